"""
Failure classification for the persistence and export pipeline.

Every failure that leaves the core is classified by a FailureKind and can be
carried either as a typed exception (KnownError subclasses) or as an explicit
Outcome value. Callers that must branch on the failure kind (re-prompt for a
file vs. abort an export) use the Outcome variants and never need to inspect
exception types.

Propagation policy:
- INVALID_PROJECT_FORMAT and ASSET_DECODE_FAILURE always surface
- STORAGE_UNAVAILABLE and RECENTS_CORRUPT are recovered inside the
  recents registry and never reach the caller
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Persisted artifact failures
    INVALID_PROJECT_FORMAT = "invalid_project_format"
    ASSET_DECODE_FAILURE = "asset_decode_failure"

    # Best-effort recents failures
    STORAGE_UNAVAILABLE = "storage_unavailable"
    RECENTS_CORRUPT = "recents_corrupt"

    # Request failures
    NOT_FOUND = "not_found"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class Outcome(BaseModel, Generic[T]):
    """
    Result envelope for operations whose failures the caller must classify.

    Exactly one of `data` (on success) or `failure` (otherwise) is set.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Result data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @property
    def ok(self) -> bool:
        return self.outcome == OutcomeType.SUCCESS

    @property
    def kind(self) -> FailureKind | None:
        """Failure kind, or None on success."""
        return self.failure.kind if self.failure else None

    @classmethod
    def success(cls, data: T) -> "Outcome[T]":
        """Create a success outcome."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "Outcome[Any]":
        """Create a failure outcome whose cause is understood."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def from_error(cls, error: "KnownError") -> "Outcome[Any]":
        """Convert a KnownError into a failure outcome."""
        return cls.known_failure(
            kind=error.kind,
            message=error.message,
            detail=error.detail,
            suggestion=error.suggestion,
        )

    @classmethod
    def unknown_failure(cls, exception: Exception) -> "Outcome[Any]":
        """
        Create an unknown failure outcome.

        The message is fixed; only the exception type name is reported.
        """
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="The operation failed for an unexpected reason.",
                detail=type(exception).__name__,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_outcome(self) -> Outcome[Any]:
        """Convert to an Outcome."""
        return Outcome.from_error(self)


class InvalidProjectFormatError(KnownError):
    """
    Project text is not a loadable project document.

    Raised when the text is not JSON, is not an object, or lacks one of the
    required keys (meta, sets, blueprints). The load is aborted.
    """

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_PROJECT_FORMAT,
            message="Invalid project file",
            detail=detail,
            suggestion="Choose a project file saved by Cardsmith.",
            status_code=422,
        )


class AssetDecodeError(KnownError):
    """
    An embedded asset payload could not be decoded.

    Fatal to the whole export: no partial bundle is produced.
    """

    def __init__(self, card_id: str | None, detail: str | None = None):
        self.card_id = card_id
        super().__init__(
            kind=FailureKind.ASSET_DECODE_FAILURE,
            message=f"Embedded asset for card '{card_id}' could not be decoded",
            detail=detail,
            suggestion="Re-import the card art and export again.",
            status_code=422,
        )


class StorageUnavailableError(KnownError):
    """The key-value store is missing or could not be reached."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.STORAGE_UNAVAILABLE,
            message="Recent projects storage is unavailable",
            detail=detail,
            status_code=503,
        )


class RecentsCorruptError(KnownError):
    """The stored recents value could not be parsed."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.RECENTS_CORRUPT,
            message="Recent projects storage is corrupt",
            detail=detail,
        )
