"""
Project file serializer and migrator.

Project file format (UTF-8 JSON):
    {
      "meta": {"name": ..., "createdAt": ..., "updatedAt": ..., "version": 2},
      "sets": [...],
      "blueprints": [...],
      "items": [...],
      "dataTables": [...],
      "assets": {"images": [...]}
    }

Files written by earlier schema revisions may lack items, dataTables, assets,
per-table columns/rows/imageBinding, or carry a semver version string. Loading
fills every one of those gaps; saving stamps the current schema version.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from cardsmith.config import IMPORTED_PROJECT_NAME, SCHEMA_VERSION
from cardsmith.models.failure import InvalidProjectFormatError, KnownError, Outcome
from cardsmith.models.project import DEFAULT_IMAGE_BINDING, Project, touch_project, utc_now

logger = logging.getLogger(__name__)

# Keys that must exist in every project file
REQUIRED_KEYS = ("meta", "sets", "blueprints")

# Saved files are indented for version control and manual inspection
INDENT = 2


def parse_project(text: str) -> Project:
    """
    Parse project file text into a Project.

    Args:
        text: Raw file contents

    Returns:
        Project with every defaultable field filled in.

    Raises:
        InvalidProjectFormatError: If the text is not JSON, is not an object,
            lacks meta/sets/blueprints, or has values of the wrong shape.
    """
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidProjectFormatError(f"Not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise InvalidProjectFormatError("Project file must contain a JSON object")

    missing = [key for key in REQUIRED_KEYS if raw.get(key) is None]
    if missing:
        raise InvalidProjectFormatError(f"Missing required keys: {', '.join(missing)}")

    if not isinstance(raw["meta"], dict):
        raise InvalidProjectFormatError("meta must be an object")

    document = migrate_document(raw)

    try:
        project = Project.model_validate(document)
    except ValidationError as e:
        raise InvalidProjectFormatError(str(e)) from e

    if project.meta.version > SCHEMA_VERSION:
        logger.warning(
            "Project %r was saved with schema version %d (current is %d)",
            project.meta.name,
            project.meta.version,
            SCHEMA_VERSION,
        )

    return project


def migrate_document(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Fill defaults on a decoded project document.

    Values present in the input always win over computed defaults. The input
    dict is not modified.
    """
    now = utc_now()
    meta = {
        "name": IMPORTED_PROJECT_NAME,
        "createdAt": now,
        "updatedAt": now,
    }
    meta.update({key: value for key, value in raw["meta"].items() if value is not None})
    if meta.get("version") is None:
        meta["version"] = SCHEMA_VERSION

    assets = raw.get("assets")
    images = assets.get("images") if isinstance(assets, dict) else None

    return {
        **raw,
        "meta": meta,
        "sets": raw.get("sets") or [],
        "blueprints": raw.get("blueprints") or [],
        "items": raw.get("items") or [],
        "dataTables": [_migrate_table(table) for table in raw.get("dataTables") or []],
        "assets": {**(assets if isinstance(assets, dict) else {}), "images": images or []},
    }


def _migrate_table(table: Any) -> Any:
    if not isinstance(table, dict):
        # Left for model validation to reject
        return table
    binding = table.get("imageBinding")
    return {
        **table,
        "columns": table.get("columns") or [],
        "rows": table.get("rows") or [],
        "imageBinding": {**DEFAULT_IMAGE_BINDING, **(binding if isinstance(binding, dict) else {})},
    }


def stringify_project(project: Project) -> str:
    """
    Serialize a project for saving.

    The project is touched first (updatedAt advanced, version stamped to the
    current schema). The caller's instance is left unchanged.

    Returns:
        JSON text with declared keys in schema order, unknown keys after them
        in their original order, two-space indentation and a trailing newline.
    """
    touched = touch_project(project)
    payload = touched.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return json.dumps(payload, indent=INDENT, ensure_ascii=False) + "\n"


def try_parse_project(text: str) -> Outcome[Project]:
    """
    Parse project file text, returning an Outcome instead of raising.

    The failure kind is INVALID_PROJECT_FORMAT for every unloadable file.
    """
    try:
        project = parse_project(text)
    except KnownError as e:
        logger.info("Rejected project file: %s", e.detail)
        return Outcome.from_error(e)
    return Outcome.success(project)
