"""
Game bundle archive builder.

Bundle layout (zip):
    <root>/cards.json         manifest, one entry per input card, input order
    <root>/images/<id>.<ext>  embedded image art
    <root>/posters/<id>.<ext> embedded video poster frames

Manifest art references that were extracted point at their bundle files
(`images/<id>.png`) instead of inline data. The same cards and project name
always produce the same archive bytes.
"""

import io
import json
import logging
import zipfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from cardsmith.config import settings
from cardsmith.models.export_card import ExportCard
from cardsmith.models.failure import KnownError, Outcome
from cardsmith.services.asset_extractor import ExtractedAsset, extract_assets
from cardsmith.services.export_normalizer import normalize_cards
from cardsmith.services.file_names import sanitize_file_name

logger = logging.getLogger(__name__)

MANIFEST_NAME = "cards.json"
ASSET_FOLDERS = ("images", "posters")

# Zip entries carry a fixed timestamp so archives are reproducible
ARCHIVE_TIMESTAMP = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644 << 16
DIR_MODE = (0o40755 << 16) | 0x10


@dataclass
class GameExport:
    """
    A fully computed game bundle, ready to be archived.

    Attributes:
        root: Top-level folder name inside the archive
        manifest: Export records, one per input card, input order
        assets: Decoded asset files
    """

    root: str
    manifest: list[ExportCard] = field(default_factory=list)
    assets: list[ExtractedAsset] = field(default_factory=list)

    @property
    def archive_name(self) -> str:
        """Suggested file name for the archive."""
        return f"{self.root}.zip"

    def manifest_entries(self) -> list[dict[str, Any]]:
        return [card.to_manifest() for card in self.manifest]

    def manifest_json(self) -> str:
        """cards.json contents."""
        return json.dumps(self.manifest_entries(), indent=2, ensure_ascii=False)


def export_root(project_name: str | None) -> str:
    """Archive root folder for a project name."""
    if project_name is None:
        return settings.export_root
    return sanitize_file_name(project_name, fallback=settings.export_root)


def _link_assets(manifest: list[ExportCard], assets: Sequence[ExtractedAsset]) -> None:
    """Point manifest art at extracted files instead of inline payloads."""
    for asset in assets:
        card = manifest[asset.card_index]
        if card.art is None:
            continue
        update: dict[str, Any] = {"src": asset.path}
        if asset.bucket == "posters":
            update["poster"] = asset.path
        manifest[asset.card_index] = card.model_copy(
            update={"art": card.art.model_copy(update=update)}
        )


def build_game_export(
    cards: Sequence[Mapping[str, Any] | None],
    project_name: str | None = None,
) -> GameExport:
    """
    Normalize cards and extract their embedded assets.

    Args:
        cards: Card records of any shape, in export order
        project_name: Used as the archive root folder (default "game-export")

    Returns:
        GameExport with the rewritten manifest and decoded assets.

    Raises:
        AssetDecodeError: If any embedded payload cannot be decoded
    """
    cards = list(cards)
    manifest = normalize_cards(cards)
    assets = extract_assets(cards)
    _link_assets(manifest, assets)

    export = GameExport(root=export_root(project_name), manifest=manifest, assets=assets)
    logger.info(
        "Built game export %r: %d cards, %d asset files",
        export.root,
        len(export.manifest),
        len(export.assets),
    )
    return export


def _write_entry(archive: zipfile.ZipFile, name: str, data: bytes) -> None:
    info = zipfile.ZipInfo(name, date_time=ARCHIVE_TIMESTAMP)
    if name.endswith("/"):
        info.external_attr = DIR_MODE
        archive.writestr(info, b"")
        return
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = FILE_MODE
    archive.writestr(info, data)


def write_game_archive(export: GameExport) -> bytes:
    """
    Compress a GameExport into zip bytes.

    Entries are written in a fixed order: root folder, manifest, then each
    asset folder with its files in card order.
    """
    buffer = io.BytesIO()
    root_prefix = f"{export.root}/"

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        _write_entry(archive, root_prefix, b"")
        _write_entry(archive, root_prefix + MANIFEST_NAME, export.manifest_json().encode("utf-8"))

        for folder in ASSET_FOLDERS:
            _write_entry(archive, f"{root_prefix}{folder}/", b"")
            for asset in export.assets:
                if asset.bucket == folder:
                    _write_entry(archive, root_prefix + asset.path, asset.data)

    return buffer.getvalue()


def export_game_zip(
    cards: Sequence[Mapping[str, Any] | None],
    project_name: str | None = None,
) -> bytes:
    """
    Build the game bundle archive for `cards`.

    Raises:
        AssetDecodeError: If any embedded payload cannot be decoded. No
            archive is produced.
    """
    return write_game_archive(build_game_export(cards, project_name))


def try_export_game_zip(
    cards: Sequence[Mapping[str, Any] | None],
    project_name: str | None = None,
) -> Outcome[bytes]:
    """Build the game bundle archive, returning an Outcome instead of raising."""
    try:
        archive = export_game_zip(cards, project_name)
    except KnownError as e:
        logger.warning("Game export failed: %s (%s)", e.message, e.detail)
        return Outcome.from_error(e)
    return Outcome.success(archive)
