"""
Manifest models — the typed shape of a W3C web app manifest.

The descriptor is validated once, at the pipeline's entry boundary.
Everything downstream reads typed attributes instead of poking at
raw dicts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# The only manifest format a generator accepts.
BASE_MANIFEST_FORMAT = "w3c"


class IconRef(BaseModel):
    """A single entry of the manifest ``icons`` list.

    ``sizes`` holds whitespace-separated tokens such as ``"48x48 96x96"``.
    A single dimension (``"48"``) means a square icon.
    """

    model_config = ConfigDict(extra="allow")

    src: str
    sizes: str = ""
    type: str | None = None

    @property
    def size_tokens(self) -> list[str]:
        return self.sizes.split()


class ManifestContent(BaseModel):
    """The manifest body.

    Unknown members (display, orientation, scope, ...) are kept as extras
    so the persisted manifest round-trips them.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    short_name: str | None = None
    start_url: str | None = None
    theme_color: str | None = None
    background_color: str | None = None
    icons: list[IconRef] | None = None

    @property
    def display_name(self) -> str | None:
        """Name shown under the launcher icon."""
        return self.short_name or self.name


class ManifestDescriptor(BaseModel):
    """A format-tagged manifest, as produced by the manifest tooling.

    ``base_dir`` is the folder the manifest was read from; relative icon
    paths resolve against it. Never serialized.
    """

    format: str = BASE_MANIFEST_FORMAT
    content: ManifestContent = Field(default_factory=ManifestContent)
    base_dir: Path | None = Field(default=None, exclude=True)

    @property
    def is_base_format(self) -> bool:
        return self.format == BASE_MANIFEST_FORMAT

    def to_json_dict(self) -> dict[str, Any]:
        """Canonical on-disk form of the manifest content."""
        return self.content.model_dump(mode="json", exclude_none=True)
