"""
Pipeline collaborators — icon download, docs, telemetry, manifest file.

The generator only talks to these through the protocols below. The
default implementations are what the CLI wires in; tests swap in fakes.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Protocol
from urllib.parse import urljoin, urlparse

import requests

from pwagen import __version__
from pwagen.core.models.manifest import ManifestContent, ManifestDescriptor

logger = logging.getLogger(__name__)

IconLister = Callable[[ManifestContent], list[tuple[str, str]]]

_REMOTE_SCHEMES = ("http", "https")


# ── Protocols ───────────────────────────────────────────────────


class IconDownloader(Protocol):
    async def download_icons(
        self,
        content: ManifestContent,
        base_url: str | None,
        target_dir: Path,
    ) -> None:
        ...


class DocumentationCopier(Protocol):
    async def copy_documentation(self, output_root: Path) -> None:
        ...


class TelemetryWriter(Protocol):
    async def write_generation_info(
        self,
        descriptor: ManifestDescriptor,
        output_root: Path,
    ) -> None:
        ...


class ManifestWriter(Protocol):
    async def write_manifest(self, descriptor: ManifestDescriptor, path: Path) -> None:
        ...


# ── Icon download ───────────────────────────────────────────────


class HttpIconDownloader:
    """Fetch the icons a generator wants into ``target_dir``.

    ``icon_lister`` yields ``(file_name, src)`` pairs (the generator's
    ``list_manifest_icons``). Sources resolve in this order:

        absolute URL or path          used as is
        base URL is http(s)           joined with the base URL
        ``base_dir`` given            relative to the manifest's folder

    http(s) sources are fetched with requests, anything else is copied
    from the local filesystem.
    """

    def __init__(self, icon_lister: IconLister, timeout: float = 30.0, base_dir: Path | None = None):
        self._icon_lister = icon_lister
        self._timeout = timeout
        self._base_dir = base_dir

    async def download_icons(
        self,
        content: ManifestContent,
        base_url: str | None,
        target_dir: Path,
    ) -> None:
        references = self._icon_lister(content)
        if not references:
            logger.info("No matching icons in the manifest, nothing to download")
            return
        await asyncio.to_thread(target_dir.mkdir, parents=True, exist_ok=True)
        for file_name, src in references:
            source = self.resolve_source(src, base_url)
            await asyncio.to_thread(self._fetch, source, target_dir / file_name)
            logger.debug("Downloaded %s -> %s", source, file_name)
        logger.info("Downloaded %d icon(s) to %s", len(references), target_dir)

    def resolve_source(self, src: str, base_url: str | None) -> str:
        if urlparse(src).scheme in _REMOTE_SCHEMES + ("file",) or Path(src).is_absolute():
            return src
        if base_url and urlparse(base_url).scheme in _REMOTE_SCHEMES:
            return urljoin(base_url, src)
        if self._base_dir is not None:
            return str(self._base_dir / src)
        return src

    def _fetch(self, source: str, target: Path) -> None:
        parsed = urlparse(source)
        if parsed.scheme in _REMOTE_SCHEMES:
            response = requests.get(source, timeout=self._timeout)
            response.raise_for_status()
            target.write_bytes(response.content)
            return
        local = Path(parsed.path if parsed.scheme == "file" else source)
        shutil.copyfile(local, target)


# ── Documentation ───────────────────────────────────────────────


class FolderDocumentationCopier:
    """Copy a documentation folder to ``<output_root>/docs``."""

    def __init__(self, docs_dir: Path | None):
        self._docs_dir = docs_dir

    async def copy_documentation(self, output_root: Path) -> None:
        if self._docs_dir is None:
            return
        target = output_root / "docs"
        await asyncio.to_thread(shutil.copytree, self._docs_dir, target, dirs_exist_ok=True)
        logger.debug("Copied documentation to %s", target)


# ── Telemetry ───────────────────────────────────────────────────


class GenerationInfoWriter:
    """Write ``generationInfo.json`` next to the generated project."""

    FILE_NAME = "generationInfo.json"

    def __init__(self, generated_from: str = "CLI"):
        self._generated_from = generated_from

    async def write_generation_info(
        self,
        descriptor: ManifestDescriptor,
        output_root: Path,
    ) -> None:
        payload = {
            "generatedFrom": self._generated_from,
            "generatedAt": datetime.now(UTC).isoformat(),
            "manifestFormat": descriptor.format,
            "versions": {"pwagen": __version__},
        }
        path = output_root / self.FILE_NAME
        await asyncio.to_thread(
            path.write_text, json.dumps(payload, indent=2), encoding="utf-8"
        )


# ── Manifest ────────────────────────────────────────────────────


class JsonManifestWriter:
    """Persist the manifest content as indented JSON."""

    async def write_manifest(self, descriptor: ManifestDescriptor, path: Path) -> None:
        text = json.dumps(descriptor.to_json_dict(), ensure_ascii=False, indent=4)
        await asyncio.to_thread(path.write_text, text, encoding="utf-8")
