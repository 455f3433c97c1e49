"""
Export a project file as a game bundle.

Reads a saved project, writes its game bundle zip next to it (or to --output),
and records the project in the recent projects list.

    cardsmith-export my-set.json
    cardsmith-export my-set.json --table tbl_main --output build/cards.zip
"""

import argparse
import logging
import sys
from pathlib import Path

from cardsmith.config import settings
from cardsmith.models.failure import KnownError
from cardsmith.parsers.project_file import parse_project
from cardsmith.services.archive_builder import build_game_export, write_game_archive
from cardsmith.services.export_normalizer import collect_export_cards
from cardsmith.services.recents import add_recent_project
from cardsmith.storage.key_value import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


def run_export(
    project_path: Path,
    output_path: Path | None = None,
    table_id: str | None = None,
    project_name: str | None = None,
    store: KeyValueStore | None = None,
) -> Path:
    """
    Export one project file.

    Args:
        project_path: Saved project file
        output_path: Archive destination. Defaults to `<root>.zip` beside
            the project file.
        table_id: Data table to export; every table when omitted
        project_name: Archive root folder; defaults to the project's name
        store: Recents store; the configured recents file when omitted

    Returns:
        Path of the written archive.

    Raises:
        InvalidProjectFormatError: If the project file cannot be loaded
        AssetDecodeError: If an embedded asset cannot be decoded
    """
    logger.info("Loading project %s", project_path)
    project = parse_project(project_path.read_text(encoding="utf-8"))

    cards = collect_export_cards(project, table_id)
    export = build_game_export(cards, project_name or str(project.meta.name))
    archive = write_game_archive(export)

    if output_path is None:
        output_path = project_path.with_name(export.archive_name)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(archive)
    logger.info("Wrote %d bytes to %s", len(archive), output_path)

    add_recent_project(
        store if store is not None else JsonFileStore(settings.recents_file),
        project,
        str(project_path.resolve()),
    )
    return output_path


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Export a Cardsmith project as a game bundle")
    parser.add_argument("project", type=Path, help="Project file to export")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Archive path")
    parser.add_argument("--table", default=None, help="Data table id to export")
    parser.add_argument("--name", default=None, help="Archive root folder name")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        run_export(args.project, args.output, args.table, args.name)
    except KnownError as e:
        logger.error("%s: %s", e.message, e.detail)
        return 1
    except OSError as e:
        logger.error("Failed to export %s: %s", args.project, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
