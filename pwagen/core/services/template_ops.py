"""
Template materialization — instantiate a project template on disk.

Two modes:

    copy  every file of the template is written to the target,
          overwriting what is there.
    sync  only files that are absent from the target or whose bytes
          differ are written; other target files are left alone.

Both create missing intermediate directories. Blocking work runs in a
worker thread so the event loop stays free.
"""

from __future__ import annotations

import asyncio
import filecmp
import logging
import shutil
from pathlib import Path

from pwagen.core.errors import TemplateCopyError
from pwagen.core.models.config import TemplateMode

logger = logging.getLogger(__name__)

TEMPLATE_COPY_FAILED = "Failed to copy the project assets to the source folder."

_BUNDLED_TEMPLATES = Path(__file__).resolve().parent.parent.parent / "templates"


def bundled_template(name: str) -> Path:
    """Path of a template shipped with the package (``android``, ``docs``)."""
    return _BUNDLED_TEMPLATES / name


def _template_files(template_dir: Path) -> list[Path]:
    if not template_dir.is_dir():
        raise FileNotFoundError(f"Template directory not found: {template_dir}")
    return sorted(p.relative_to(template_dir) for p in template_dir.rglob("*") if p.is_file())


def _empty_dirs(template_dir: Path) -> list[Path]:
    return [
        p.relative_to(template_dir)
        for p in template_dir.rglob("*")
        if p.is_dir() and not any(p.iterdir())
    ]


def copy_tree(template_dir: Path, target_dir: Path) -> list[str]:
    """Full recursive copy. Returns the relative paths written."""
    files = _template_files(template_dir)
    shutil.copytree(template_dir, target_dir, dirs_exist_ok=True)
    return [f.as_posix() for f in files]


def sync_tree(template_dir: Path, target_dir: Path) -> list[str]:
    """Copy only the files that differ. Returns the relative paths written."""
    written: list[str] = []
    for rel in _template_files(template_dir):
        src = template_dir / rel
        dst = target_dir / rel
        if dst.is_file() and filecmp.cmp(src, dst, shallow=False):
            continue
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
        written.append(rel.as_posix())
    for rel in _empty_dirs(template_dir):
        (target_dir / rel).mkdir(parents=True, exist_ok=True)
    return written


async def materialize(
    template_dir: Path | str,
    target_dir: Path | str,
    mode: TemplateMode = "copy",
) -> list[str]:
    """Instantiate ``template_dir`` into ``target_dir``.

    Raises:
        TemplateCopyError: Missing template, permission problems, or any
            other I/O failure. The original exception is the cause.
    """
    src, dst = Path(template_dir), Path(target_dir)
    worker = sync_tree if mode == "sync" else copy_tree
    logger.debug("Materializing template %s -> %s (%s)", src, dst, mode)
    try:
        written = await asyncio.to_thread(worker, src, dst)
    except OSError as e:
        raise TemplateCopyError(TEMPLATE_COPY_FAILED, e) from e
    logger.info("Template materialized: %d file(s) written to %s", len(written), dst)
    return written
