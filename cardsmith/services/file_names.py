"""Filesystem-safe names for bundle folders and asset files."""

import re

# Characters no common filesystem accepts, plus control characters
INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')
WHITESPACE_RUN = re.compile(r"\s+")

# Leading and trailing dots and spaces; a name of only dots is a path step
EDGE_CHARS = " ."

MAX_FILENAME_LENGTH = 120
FALLBACK_FILENAME = "untitled"


def sanitize_file_name(name: str, fallback: str = FALLBACK_FILENAME) -> str:
    """
    Make a string safe to use as a file or folder name.

    Invalid characters become "_", whitespace runs collapse to one space,
    leading and trailing dots and spaces are removed, and the result is
    capped in length. Names left empty become `fallback`.

    Examples:
        "My:Card*Name?" -> "My_Card_Name_"
        "  My   Card  " -> "My Card"
        ".." -> "untitled"
        "   " -> "untitled"
    """
    cleaned = INVALID_FILENAME_CHARS.sub("_", str(name))
    cleaned = WHITESPACE_RUN.sub(" ", cleaned).strip(EDGE_CHARS)
    cleaned = cleaned[:MAX_FILENAME_LENGTH].rstrip(EDGE_CHARS)
    return cleaned or fallback


def ensure_unique(file_name: str, used: dict[str, int]) -> str:
    """
    Return `file_name`, or a `_N`-suffixed variant if already used.

    `used` records names handed out so far and is updated in place.

    Examples:
        "a.png", "a.png", "a.png" -> "a.png", "a_2.png", "a_3.png"
    """
    if file_name not in used:
        used[file_name] = 1
        return file_name

    stem, dot, ext = file_name.rpartition(".")
    if not dot:
        stem, ext = file_name, ""

    count = used[file_name]
    candidate = file_name
    while candidate in used:
        count += 1
        candidate = f"{stem}_{count}{dot}{ext}"

    used[file_name] = count
    used[candidate] = 1
    return candidate
