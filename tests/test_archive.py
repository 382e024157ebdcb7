"""Tests for the local icon-request archive."""

import zipfile

import pytest
from conftest import FakeIconSource, make_items

from iconrequest.archive import (
    ConsoleSharePresenter,
    build_appfilter,
    build_archive,
    fix_name_for_request,
)
from iconrequest.config import ArchiveConfig


class TestFixNameForRequest:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("My App", "my_app"),
            ("  Hello,  World! ", "hello_world"),
            ("7 Minute Workout", "_7_minute_workout"),
            ("!!!", "icon"),
        ],
    )
    def test_names(self, name, expected):
        assert fix_name_for_request(name) == expected


class TestBuildArchive:
    def test_zip_has_icons_and_xml(self, tmp_path):
        items = make_items(3)

        zip_path, named = build_archive(items, FakeIconSource(), ArchiveConfig(output_dir=tmp_path))

        with zipfile.ZipFile(zip_path) as zf:
            names = set(zf.namelist())
            appfilter = zf.read("appfilter.xml").decode()
        assert {"app_0.png", "app_1.png", "app_2.png", "appmap.xml", "theme_resources.xml"} <= names
        assert 'component="ComponentInfo{com.example.app0/com.example.app0.MainActivity}"' in appfilter
        assert [i.file_name for i in named] == ["app_0.png", "app_1.png", "app_2.png"]

    def test_input_items_untouched(self, tmp_path):
        items = make_items(1)

        build_archive(items, FakeIconSource(), ArchiveConfig(output_dir=tmp_path))

        assert items[0].file_name is None

    def test_xml_escapes_names(self):
        item = make_items(1)[0].model_copy(update={"name": 'Tom & "Jerry"'})
        xml = build_appfilter([item])

        assert "Tom &amp; " in xml
        assert 'drawable="tom_jerry"' in xml


class TestConsoleSharePresenter:
    def test_prints_path(self, tmp_path):
        from rich.console import Console

        archive = tmp_path / "a.zip"
        archive.write_bytes(b"")
        console = Console(record=True, width=200)

        ConsoleSharePresenter(console).present(archive, "Icon Request")

        assert "a.zip" in console.export_text()
