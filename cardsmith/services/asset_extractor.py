"""
Asset extractor.

Card art is often embedded in the project as data URIs:

    data:image/png;base64,iVBORw0KGgo...

The game runtime wants plain files instead. For every card whose art carries
an embedded payload this module decodes it into bytes destined for one of two
bundle folders:

    images/<id>.<ext>    image art with an embedded src
    posters/<id>.<ext>   video art with an embedded poster frame

Any payload that cannot be decoded aborts the whole export.
"""

import base64
import binascii
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import unquote_to_bytes

from cardsmith.models.failure import AssetDecodeError
from cardsmith.services.export_normalizer import card_art, card_data, first_present
from cardsmith.services.file_names import ensure_unique, sanitize_file_name

DATA_URI_PREFIX = "data:"

# Groups: (mime_type, parameters, payload)
DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*),(?P<payload>.*)$",
    re.DOTALL,
)

WHITESPACE = re.compile(r"\s+")

MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
}
DEFAULT_EXTENSION = "bin"

AssetBucket = Literal["images", "posters"]


@dataclass(frozen=True, slots=True)
class DecodedPayload:
    mime_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return extension_for(self.mime_type)


@dataclass(frozen=True, slots=True)
class ExtractedAsset:
    """
    One embedded asset decoded for the bundle.

    Attributes:
        card_index: Position of the source card in the export input
        card_id: Source card id, if it had one
        bucket: Bundle folder the file belongs in
        file_name: File name within the bucket
        mime_type: MIME type declared by the data URI
        data: Decoded bytes
    """

    card_index: int
    card_id: Any
    bucket: AssetBucket
    file_name: str
    mime_type: str
    data: bytes

    @property
    def path(self) -> str:
        """Path relative to the bundle root."""
        return f"{self.bucket}/{self.file_name}"


def is_data_uri(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(DATA_URI_PREFIX)


def extension_for(mime_type: str) -> str:
    """File extension for a declared MIME type; `bin` when not recognised."""
    return MIME_EXTENSIONS.get(mime_type.strip().lower(), DEFAULT_EXTENSION)


def decode_data_uri(uri: str, card_id: Any = None) -> DecodedPayload:
    """
    Decode a data URI into its bytes.

    Base64 payloads are decoded strictly (whitespace ignored, missing padding
    tolerated); other payloads are percent-decoded.

    Raises:
        AssetDecodeError: If the URI is malformed or the payload is not valid
    """
    match = DATA_URI_PATTERN.match(uri)
    if match is None:
        raise AssetDecodeError(card_id, "Malformed data URI: missing ',' separator")

    mime_type = match.group("mime")
    params = [p.strip().lower() for p in match.group("params").split(";") if p.strip()]
    payload = match.group("payload")

    if "base64" not in params:
        return DecodedPayload(mime_type=mime_type, data=unquote_to_bytes(payload))

    payload = WHITESPACE.sub("", payload)
    payload += "=" * (-len(payload) % 4)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AssetDecodeError(card_id, f"Invalid base64 payload: {e}") from e

    return DecodedPayload(mime_type=mime_type, data=data)


def asset_stem(card_id: Any, position: int) -> str:
    """File stem for a card's assets: its id, or `card_<n>` without one."""
    fallback = f"card_{position + 1}"
    if card_id is None:
        return fallback
    return sanitize_file_name(str(card_id), fallback=fallback)


def extract_assets(cards: Sequence[Mapping[str, Any] | None]) -> list[ExtractedAsset]:
    """
    Decode every embedded art payload in `cards`.

    Returns:
        Assets in card order. Names are unique within each bucket.

    Raises:
        AssetDecodeError: On the first payload that cannot be decoded
    """
    assets: list[ExtractedAsset] = []
    used: dict[AssetBucket, dict[str, int]] = {"images": {}, "posters": {}}

    for index, card in enumerate(cards):
        if not isinstance(card, Mapping):
            continue
        art = card_art(card)
        if art is None:
            continue

        bucket: AssetBucket
        if art.get("kind") == "video" and is_data_uri(art.get("poster")):
            bucket, source = "posters", art["poster"]
        elif art.get("kind") == "image" and is_data_uri(art.get("src")):
            bucket, source = "images", art["src"]
        else:
            continue

        card_id = first_present(card.get("id"), card_data(card).get("id"))
        decoded = decode_data_uri(source, card_id)
        file_name = ensure_unique(
            f"{asset_stem(card_id, index)}.{decoded.extension}",
            used[bucket],
        )
        assets.append(
            ExtractedAsset(
                card_index=index,
                card_id=card_id,
                bucket=bucket,
                file_name=file_name,
                mime_type=decoded.mime_type,
                data=decoded.data,
            )
        )

    return assets
