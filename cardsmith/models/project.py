"""
Project document model.

The project is the root document edited by the studio. It is persisted as
UTF-8 JSON with camelCase keys; every model here accepts and preserves keys it
does not declare, so files written by newer or older studio builds survive a
load/save round trip unchanged.

INVARIANTS:
- A constructed Project always has sets, blueprints, items and dataTables lists
- Entries of those lists are JSON objects; their values are never coerced
- meta.version is a non-negative integer (legacy "1.0.0" strings read as 1)
- Timestamps written here are ISO-8601 UTC strings with millisecond precision
"""

import re
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cardsmith.config import SCHEMA_VERSION, UNTITLED_PROJECT_NAME

# "1", "1.0", "1.0.0", "v2.1.0" -> major component
LEGACY_VERSION_PATTERN = re.compile(r"^v?(\d+)(?:\.\d+){0,2}$")

DEFAULT_SET_NAME = "Base Set"


class DocumentModel(BaseModel):
    """Base for every persisted shape: camelCase on disk, unknown keys kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ProjectMeta(DocumentModel):
    """
    Project metadata.

    Only `version` is checked; every other value is kept exactly as loaded.
    """

    name: Any
    created_at: Any
    updated_at: Any
    version: int = Field(ge=0)
    file_path: Any = None

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("version must be an integer")
        if isinstance(value, str):
            match = LEGACY_VERSION_PATTERN.match(value.strip())
            if match is None:
                raise ValueError(f"unrecognised version {value!r}")
            return int(match.group(1))
        return value


# Collection entries below are schema documentation, not validation: fields
# are typed Any so hand-edited or older files load and save back unchanged.


class SetModel(DocumentModel):
    id: Any = None
    name: Any = None
    description: Any = None
    color: Any = None


class Blueprint(DocumentModel):
    """A reusable card layout. Elements are kept opaque; rendering is not our concern."""

    id: Any = None
    name: Any = None
    description: Any = None
    category: Any = None
    size: Any = None
    background: Any = None
    elements: Any = Field(default_factory=list)


class DataRow(DocumentModel):
    id: Any = None
    data: Any = Field(default_factory=dict)
    quantity: Any = None
    set_id: Any = None
    blueprint_id: Any = None
    art: Any = None
    race: Any = None
    traits: Any = None


class ImageBindingConfig(DocumentModel):
    column: Any = None
    images_folder: Any = None
    placeholder: Any = None
    copy_to_assets: Any = None


# Applied under every table's own imageBinding when a project is loaded
DEFAULT_IMAGE_BINDING: dict[str, Any] = {
    "column": "art",
    "imagesFolder": "",
    "placeholder": "",
    "copyToAssets": True,
}


class DataTable(DocumentModel):
    id: Any = None
    name: Any = None
    set_id: Any = None
    columns: Any = Field(default_factory=list)
    rows: list[DataRow] = Field(default_factory=list)
    image_binding: ImageBindingConfig = Field(
        default_factory=lambda: ImageBindingConfig.model_validate(DEFAULT_IMAGE_BINDING)
    )

    def model_post_init(self, __context: Any) -> None:
        # Defaulted collections are part of the saved shape
        self.__pydantic_fields_set__.update({"columns", "rows", "image_binding"})


class Item(DocumentModel):
    id: Any = None
    name: Any = None
    set_id: Any = None
    blueprint_id: Any = None
    data: Any = Field(default_factory=dict)
    quantity: Any = 1
    source_row_id: Any = None
    art: Any = None
    race: Any = None
    traits: Any = None


class ImageAsset(DocumentModel):
    id: Any = None
    name: Any = None
    src: Any = None
    size: Any = None
    added_at: Any = None


class ProjectAssets(DocumentModel):
    images: list[ImageAsset] = Field(default_factory=list)

    def model_post_init(self, __context: Any) -> None:
        self.__pydantic_fields_set__.add("images")


class Project(DocumentModel):
    """Root project document."""

    meta: ProjectMeta
    sets: list[SetModel]
    blueprints: list[Blueprint]
    items: list[Item] = Field(default_factory=list)
    data_tables: list[DataTable] = Field(default_factory=list)
    assets: ProjectAssets = Field(default_factory=ProjectAssets)

    def model_post_init(self, __context: Any) -> None:
        self.__pydantic_fields_set__.update({"items", "data_tables", "assets"})

    def get_table(self, table_id: str) -> DataTable | None:
        """Find a data table by id."""
        for table in self.data_tables:
            if table.id == table_id:
                return table
        return None


# =============================================================================
# TIMESTAMPS AND IDS
# =============================================================================


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as `YYYY-MM-DDTHH:MM:SS.mmmZ` in UTC."""
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def utc_now() -> str:
    """Current time as a project timestamp."""
    return format_timestamp(datetime.now(UTC))


def next_timestamp(previous: Any) -> str:
    """
    Current time, but strictly after `previous`.

    Saves in quick succession (or under a clock that moved backwards) still
    produce an increasing updatedAt.
    """
    now = datetime.now(UTC)
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)
    last = parse_timestamp(previous)
    if last is not None and now <= last:
        now = last + timedelta(milliseconds=1)
    return format_timestamp(now)


def create_id(prefix: str = "") -> str:
    """Short random id, `prefix_xxxxxxxx` when a prefix is given."""
    if prefix:
        return f"{prefix}_{secrets.token_hex(4)}"
    return secrets.token_hex(5)


# =============================================================================
# FACTORIES
# =============================================================================


def create_empty_project(name: str = UNTITLED_PROJECT_NAME) -> Project:
    """Create a fresh project with a single default set."""
    now = utc_now()
    return Project(
        meta=ProjectMeta(
            name=name,
            created_at=now,
            updated_at=now,
            version=SCHEMA_VERSION,
        ),
        sets=[SetModel(id=create_id("set"), name=DEFAULT_SET_NAME)],
        blueprints=[],
        items=[],
        data_tables=[],
        assets=ProjectAssets(images=[]),
    )


def clone_blueprint(blueprint: Blueprint) -> Blueprint:
    """Deep copy of a blueprint under a new id."""
    return blueprint.model_copy(deep=True, update={"id": create_id("bp")})


def create_project_from_blueprint(
    blueprint: Blueprint, name: str = UNTITLED_PROJECT_NAME
) -> Project:
    """Create a fresh project whose only blueprint is a clone of `blueprint`."""
    project = create_empty_project(name)
    return project.model_copy(update={"blueprints": [clone_blueprint(blueprint)]})


def touch_project(project: Project) -> Project:
    """
    Copy of `project` stamped for saving.

    updatedAt advances to now (strictly past its previous value) and version
    becomes the current schema version. The input is not modified.
    """
    meta = project.meta.model_copy(
        update={
            "updated_at": next_timestamp(project.meta.updated_at),
            "version": SCHEMA_VERSION,
        }
    )
    return project.model_copy(update={"meta": meta})
