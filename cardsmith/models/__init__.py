from cardsmith.models.export_card import ExportArt, ExportCard, LocalizedText
from cardsmith.models.failure import (
    AssetDecodeError,
    FailureDetail,
    FailureKind,
    InvalidProjectFormatError,
    KnownError,
    Outcome,
    OutcomeType,
    RecentsCorruptError,
    StorageUnavailableError,
)
from cardsmith.models.project import (
    Blueprint,
    DataRow,
    DataTable,
    ImageAsset,
    ImageBindingConfig,
    Item,
    Project,
    ProjectAssets,
    ProjectMeta,
    SetModel,
    clone_blueprint,
    create_empty_project,
    create_project_from_blueprint,
    touch_project,
)
from cardsmith.models.recents import RecentProject

__all__ = [
    "AssetDecodeError",
    "Blueprint",
    "DataRow",
    "DataTable",
    "ExportArt",
    "ExportCard",
    "FailureDetail",
    "FailureKind",
    "ImageAsset",
    "ImageBindingConfig",
    "InvalidProjectFormatError",
    "Item",
    "KnownError",
    "LocalizedText",
    "Outcome",
    "OutcomeType",
    "Project",
    "ProjectAssets",
    "ProjectMeta",
    "RecentProject",
    "RecentsCorruptError",
    "SetModel",
    "StorageUnavailableError",
    "clone_blueprint",
    "create_empty_project",
    "create_project_from_blueprint",
    "touch_project",
]
