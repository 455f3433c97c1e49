from cardsmith.parsers.project_file import (
    migrate_document,
    parse_project,
    stringify_project,
    try_parse_project,
)

__all__ = [
    "migrate_document",
    "parse_project",
    "stringify_project",
    "try_parse_project",
]
