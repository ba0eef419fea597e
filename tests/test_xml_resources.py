"""
Tests for resource XML patching.
"""

import asyncio
import textwrap
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from conftest import COLORS_XML, STRINGS_XML
from pwagen.core.errors import XmlPatchError
from pwagen.core.services.xml_resources import patch_element


@pytest.fixture
def strings_xml(tmp_path: Path) -> Path:
    path = tmp_path / "strings.xml"
    path.write_text(STRINGS_XML)
    return path


def _texts(path: Path, tag: str) -> dict[str, str]:
    root = ET.parse(path).getroot()
    return {el.get("name"): el.text for el in root.iter(tag)}


class TestPatchElement:
    def test_sets_matching_element(self, strings_xml: Path):
        matched = asyncio.run(patch_element(strings_xml, "string", "name", "app_name", "Sample"))
        assert matched == 1
        assert _texts(strings_xml, "string") == {"app_name": "Sample", "other": "Untouched"}

    def test_keeps_xml_declaration(self, strings_xml: Path):
        asyncio.run(patch_element(strings_xml, "string", "name", "app_name", "Sample"))
        assert strings_xml.read_text().startswith("<?xml")

    def test_no_match_still_succeeds(self, strings_xml: Path):
        matched = asyncio.run(patch_element(strings_xml, "string", "name", "missing", "X"))
        assert matched == 0

    def test_escapes_text(self, strings_xml: Path):
        asyncio.run(patch_element(strings_xml, "string", "name", "app_name", "Tom & Jerry <3"))
        assert _texts(strings_xml, "string")["app_name"] == "Tom & Jerry <3"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_value_leaves_file_alone(self, strings_xml: Path, value):
        before = strings_xml.read_text()
        matched = asyncio.run(patch_element(strings_xml, "string", "name", "app_name", value))
        assert matched == 0
        assert strings_xml.read_text() == before

    def test_idempotent(self, strings_xml: Path):
        asyncio.run(patch_element(strings_xml, "string", "name", "app_name", "Sample"))
        first = strings_xml.read_text()
        asyncio.run(patch_element(strings_xml, "string", "name", "app_name", "Sample"))
        assert strings_xml.read_text() == first

    def test_color_element(self, tmp_path: Path):
        path = tmp_path / "colors.xml"
        path.write_text(COLORS_XML)
        asyncio.run(patch_element(path, "color", "name", "colorPrimary", "red"))
        assert _texts(path, "color") == {"colorPrimary": "red", "colorAccent": "#FF4081"}

    def test_keeps_comments_and_prefixes(self, tmp_path: Path):
        path = tmp_path / "strings.xml"
        path.write_text(textwrap.dedent("""\
            <?xml version="1.0" encoding="utf-8"?>
            <resources xmlns:tools="http://schemas.android.com/tools">
                <!-- launcher label -->
                <string name="app_name" tools:ignore="MissingTranslation">PWA</string>
            </resources>
        """))

        asyncio.run(patch_element(path, "string", "name", "app_name", "Sample"))

        text = path.read_text()
        assert "<!-- launcher label -->" in text
        assert 'xmlns:tools="http://schemas.android.com/tools"' in text
        assert 'tools:ignore="MissingTranslation"' in text
        assert "ns0" not in text
        assert ">Sample</string>" in text


class TestPatchFailures:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(XmlPatchError) as exc_info:
            asyncio.run(patch_element(tmp_path / "strings.xml", "string", "name", "app_name", "X"))
        assert "strings.xml" in exc_info.value.message
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_malformed_xml(self, tmp_path: Path):
        path = tmp_path / "colors.xml"
        path.write_text("<resources><color name='colorPrimary'>")
        with pytest.raises(XmlPatchError) as exc_info:
            asyncio.run(patch_element(path, "color", "name", "colorPrimary", "red"))
        assert exc_info.value.path == str(path)
        assert "colors.xml" in exc_info.value.message
        assert isinstance(exc_info.value.cause, ET.ParseError)
