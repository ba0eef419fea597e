"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from pwagen.core.models.manifest import ManifestContent, ManifestDescriptor

STRINGS_XML = textwrap.dedent("""\
    <?xml version="1.0" encoding="utf-8"?>
    <resources>
        <string name="app_name">PWA</string>
        <string name="other">Untouched</string>
    </resources>
""")

COLORS_XML = textwrap.dedent("""\
    <?xml version="1.0" encoding="utf-8"?>
    <resources>
        <color name="colorPrimary">#3F51B5</color>
        <color name="colorAccent">#FF4081</color>
    </resources>
""")


class FakeDownloader:
    """Writes canned icon files instead of fetching anything."""

    def __init__(self, files: dict[str, bytes] | None = None, error: Exception | None = None):
        self.files = files or {}
        self.error = error
        self.calls: list[tuple] = []

    async def download_icons(self, content, base_url, target_dir: Path) -> None:
        self.calls.append((content, base_url, target_dir))
        if self.error:
            raise self.error
        if not self.files:
            return
        target_dir.mkdir(parents=True, exist_ok=True)
        for name, data in self.files.items():
            (target_dir / name).write_bytes(data)


class NullDocs:
    def __init__(self):
        self.calls = 0

    async def copy_documentation(self, output_root: Path) -> None:
        self.calls += 1


class NullTelemetry:
    def __init__(self):
        self.calls = 0

    async def write_generation_info(self, descriptor, output_root: Path) -> None:
        self.calls += 1


@pytest.fixture
def sample_content() -> ManifestContent:
    """A manifest with launcher and splash sized PNG icons."""
    return ManifestContent.model_validate({
        "name": "Sample Progressive App",
        "short_name": "Sample",
        "start_url": "https://example.com/app/",
        "theme_color": "#ff0000",
        "background_color": "#ffffff",
        "display": "standalone",
        "icons": [
            {"src": "icons/icon-48.png", "sizes": "48x48"},
            {"src": "icons/icon-96.png", "sizes": "96x96 144x144"},
            {"src": "icons/icon-192", "sizes": "192x192", "type": "image/png"},
            {"src": "icons/splash.png", "sizes": "1080x1920", "type": "image/png"},
            {"src": "icons/icon.svg", "sizes": "72x72", "type": "image/svg+xml"},
        ],
    })


@pytest.fixture
def sample_descriptor(sample_content: ManifestContent) -> ManifestDescriptor:
    return ManifestDescriptor(format="w3c", content=sample_content)


@pytest.fixture
def android_template(tmp_path: Path) -> Path:
    """A minimal Android template with the two patched resource files."""
    root = tmp_path / "template"
    values = root / "app" / "src" / "main" / "res" / "values"
    values.mkdir(parents=True)
    (values / "strings.xml").write_text(STRINGS_XML)
    (values / "colors.xml").write_text(COLORS_XML)
    (root / "settings.gradle").write_text("include ':app'\n")
    return root


@pytest.fixture
def fake_downloader() -> FakeDownloader:
    return FakeDownloader({
        "48x48.png": b"launcher-mdpi",
        "192x192.png": b"launcher-xxxhdpi",
        "1080x1920.png": b"splash-xxhdpi",
        "notes.txt": b"not an icon",
    })


@pytest.fixture
def collaborators(fake_downloader: FakeDownloader) -> dict:
    return {
        "downloader": fake_downloader,
        "docs_copier": NullDocs(),
        "telemetry": NullTelemetry(),
    }
