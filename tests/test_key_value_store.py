import json
from pathlib import Path

import pytest

from cardsmith.models.failure import RecentsCorruptError, StorageUnavailableError
from cardsmith.storage.key_value import JsonFileStore, MemoryStore


class TestMemoryStore:
    def test_get_missing(self) -> None:
        assert MemoryStore().get("k") is None

    def test_set_then_get(self) -> None:
        store = MemoryStore()
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_initial_values_copied(self) -> None:
        initial = {"k": "v"}
        store = MemoryStore(initial)
        store.set("k", "w")
        assert initial == {"k": "v"}


class TestJsonFileStore:
    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        assert JsonFileStore(tmp_path / "none.json").get("k") is None

    def test_set_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        store = JsonFileStore(path)

        store.set("k", "v")
        store.set("other", "w")

        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v", "other": "w"}
        assert store.get("k") == "v"
        assert not path.with_suffix(".json.tmp").exists()

    def test_non_string_value_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text('{"k": 5}', encoding="utf-8")

        assert JsonFileStore(path).get("k") is None

    def test_corrupt_file_raises_on_get(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("not json", encoding="utf-8")

        with pytest.raises(RecentsCorruptError):
            JsonFileStore(path).get("k")

    def test_non_object_file_raises_on_get(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(RecentsCorruptError):
            JsonFileStore(path).get("k")

    def test_set_overwrites_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("not json", encoding="utf-8")
        store = JsonFileStore(path)

        store.set("k", "v")

        assert store.get("k") == "v"

    def test_unreadable_location_raises(self, tmp_path: Path) -> None:
        """A directory where the file should be is a storage failure."""
        path = tmp_path / "store.json"
        path.mkdir()

        with pytest.raises(StorageUnavailableError):
            JsonFileStore(path).get("k")
