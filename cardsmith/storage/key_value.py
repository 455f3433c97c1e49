"""
Key-value stores for host-persisted settings.

The recents registry only needs "get string by key" and "set string by key".
The host decides where that lives; two stores ship here:

- MemoryStore: process-local dict (tests, embedding in another app)
- JsonFileStore: one JSON object file on disk mapping keys to strings
"""

import json
from pathlib import Path
from typing import Protocol

from cardsmith.models.failure import RecentsCorruptError, StorageUnavailableError


class KeyValueStore(Protocol):
    """Minimal string store supplied by the host."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileStore:
    """
    Store persisted as a single JSON object file.

    A missing file reads as empty. Writes replace the whole file through a
    temporary sibling so a crash never leaves half a file behind.

    Raises:
        StorageUnavailableError: On any filesystem error
        RecentsCorruptError: If the file exists but is not a JSON object
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self.path}: {e}") from e
        try:
            values = json.loads(text)
        except json.JSONDecodeError as e:
            raise RecentsCorruptError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(values, dict):
            raise RecentsCorruptError(f"{self.path} does not contain a JSON object")
        return values

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            values = self._read_all()
        except RecentsCorruptError:
            # A corrupt file is replaced wholesale
            values = {}
        values[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(values, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write {self.path}: {e}") from e
