import io
import json
import zipfile

import pytest

from cardsmith.models.failure import AssetDecodeError, FailureKind
from cardsmith.services.archive_builder import (
    build_game_export,
    export_game_zip,
    export_root,
    try_export_game_zip,
    write_game_archive,
)


def open_archive(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


class TestExportRoot:
    def test_default(self) -> None:
        assert export_root(None) == "game-export"
        assert export_root("   ") == "game-export"

    def test_project_name(self) -> None:
        assert export_root("Dragons") == "Dragons"

    @pytest.mark.parametrize("name", ["..", ".", " .. "])
    def test_dot_names_use_default(self, name: str) -> None:
        assert export_root(name) == "game-export"

    def test_project_name_sanitized(self) -> None:
        assert export_root("Dragons: Rise/Fall") == "Dragons_ Rise_Fall"


class TestBuildGameExport:
    def test_image_card_and_plain_card(self, png_data_uri: str, png_bytes: bytes) -> None:
        """One embedded image card, one card with no art."""
        cards = [
            {"id": "c1", "name": "Dragon", "art": {"kind": "image", "src": png_data_uri}},
            {"id": "c2", "name": "Knight"},
        ]

        export = build_game_export(cards)

        entries = export.manifest_entries()
        assert export.root == "game-export"
        assert [entry["id"] for entry in entries] == ["c1", "c2"]
        assert entries[0]["art"]["src"] == "images/c1.png"
        assert "art" not in entries[1]
        assert [asset.path for asset in export.assets] == ["images/c1.png"]
        assert len(export.assets[0].data) == len(png_bytes)

    def test_poster_reference_rewritten(self, jpeg_data_uri: str) -> None:
        cards = [
            {"id": "v1", "art": {"kind": "video", "src": "clips/v1.mp4", "poster": jpeg_data_uri}}
        ]

        art = build_game_export(cards).manifest_entries()[0]["art"]

        assert art == {
            "kind": "video",
            "src": "posters/v1.jpg",
            "videoSrc": "clips/v1.mp4",
            "poster": "posters/v1.jpg",
        }

    def test_linked_art_untouched(self) -> None:
        cards = [{"id": "c1", "art": {"kind": "image", "src": "https://cdn/a.png"}}]

        export = build_game_export(cards)

        assert export.assets == []
        assert export.manifest_entries()[0]["art"]["src"] == "https://cdn/a.png"

    def test_archive_name(self) -> None:
        assert build_game_export([], "Dragons").archive_name == "Dragons.zip"

    def test_empty_manifest(self) -> None:
        assert build_game_export([]).manifest_json() == "[]"

    def test_manifest_keeps_non_ascii(self) -> None:
        cards = [{"id": "c1", "name": {"en": "Dragon", "ar": "تنين"}}]

        assert "تنين" in build_game_export(cards).manifest_json()


class TestExportGameZip:
    def test_archive_contents(self, png_data_uri: str, png_bytes: bytes) -> None:
        cards = [
            {"id": "c1", "art": {"kind": "image", "src": png_data_uri}},
            {"id": "c2"},
        ]

        with open_archive(export_game_zip(cards)) as archive:
            names = archive.namelist()
            manifest = json.loads(archive.read("game-export/cards.json"))
            image = archive.read("game-export/images/c1.png")

        assert names == [
            "game-export/",
            "game-export/cards.json",
            "game-export/images/",
            "game-export/images/c1.png",
            "game-export/posters/",
        ]
        assert len(manifest) == 2
        assert manifest[0]["art"]["src"] == "images/c1.png"
        assert image == png_bytes

    def test_root_from_project_name(self, png_data_uri: str) -> None:
        cards = [{"id": "c1", "art": {"kind": "image", "src": png_data_uri}}]

        with open_archive(export_game_zip(cards, "Dragons")) as archive:
            names = archive.namelist()

        assert "Dragons/cards.json" in names
        assert "Dragons/images/c1.png" in names

    @pytest.mark.parametrize("name", ["..", "."])
    def test_entries_stay_under_root(self, name: str) -> None:
        """A project named after a path step cannot lift entries out of the bundle."""
        with open_archive(export_game_zip([{"id": "c1"}], name)) as archive:
            names = archive.namelist()

        assert names[0] == "game-export/"
        assert all(entry.startswith("game-export/") for entry in names)

    def test_manifest_pretty_printed(self) -> None:
        with open_archive(export_game_zip([{"id": "c1"}])) as archive:
            text = archive.read("game-export/cards.json").decode("utf-8")

        assert text.startswith("[\n  {")

    def test_deterministic_bytes(self, png_data_uri: str, jpeg_data_uri: str) -> None:
        cards = [
            {"id": "c1", "art": {"kind": "image", "src": png_data_uri}},
            {"id": "v1", "art": {"kind": "video", "src": "v.mp4", "poster": jpeg_data_uri}},
        ]

        assert export_game_zip(cards, "Dragons") == export_game_zip(cards, "Dragons")

    def test_write_matches_export(self, png_data_uri: str) -> None:
        cards = [{"id": "c1", "art": {"kind": "image", "src": png_data_uri}}]

        assert write_game_archive(build_game_export(cards)) == export_game_zip(cards)

    def test_decode_failure_aborts(self) -> None:
        cards = [{"id": "bad", "art": {"kind": "image", "src": "data:image/png;base64,@@"}}]

        with pytest.raises(AssetDecodeError):
            export_game_zip(cards)


class TestTryExportGameZip:
    def test_success(self, png_data_uri: str) -> None:
        outcome = try_export_game_zip([{"id": "c1", "art": {"kind": "image", "src": png_data_uri}}])

        assert outcome.ok
        assert outcome.data is not None
        with open_archive(outcome.data) as archive:
            assert "game-export/images/c1.png" in archive.namelist()

    def test_decode_failure(self) -> None:
        cards = [{"id": "bad", "art": {"kind": "image", "src": "data:image/png;base64,@@"}}]

        outcome = try_export_game_zip(cards)

        assert not outcome.ok
        assert outcome.kind == FailureKind.ASSET_DECODE_FAILURE
        assert outcome.data is None
