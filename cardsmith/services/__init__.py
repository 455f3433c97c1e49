"""
Cardsmith services.

Recent projects bookkeeping and the game export pipeline:
normalizer -> asset extractor -> archive builder.
"""

from cardsmith.services.archive_builder import (
    GameExport,
    build_game_export,
    export_game_zip,
    try_export_game_zip,
    write_game_archive,
)
from cardsmith.services.asset_extractor import (
    ExtractedAsset,
    decode_data_uri,
    extract_assets,
)
from cardsmith.services.export_normalizer import (
    collect_export_cards,
    normalize_card,
    normalize_cards,
    normalize_localized,
    normalize_number,
    resolve_template,
)
from cardsmith.services.recents import (
    add_recent_project,
    load_recent_projects,
    save_recent_projects,
)

__all__ = [
    "ExtractedAsset",
    "GameExport",
    "add_recent_project",
    "build_game_export",
    "collect_export_cards",
    "decode_data_uri",
    "export_game_zip",
    "extract_assets",
    "load_recent_projects",
    "normalize_card",
    "normalize_cards",
    "normalize_localized",
    "normalize_number",
    "resolve_template",
    "save_recent_projects",
    "try_export_game_zip",
    "write_game_archive",
]
