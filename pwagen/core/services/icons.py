"""
Icon matching — size-bucket tables and manifest icon lookup.

A bucket table maps an icon size key to an Android resource bucket
(density folder + role). Two matching modes exist:

    square  keys are single numbers ("48"); a size token matches when
            both of its dimensions equal the key.
    exact   keys are literal "WxH" strings ("1080x1920"); a size token
            matches when, trimmed and lower-cased, it equals the key.

Tables are module-level constants and are never mutated.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Literal
from urllib.parse import urlparse

from pwagen.core.models.manifest import IconRef, ManifestContent

logger = logging.getLogger(__name__)

MatchMode = Literal["square", "exact"]
Role = Literal["launcher", "splash"]

PNG_MIME_TYPE = "image/png"


# ── Buckets & tables ────────────────────────────────────────────


@dataclass(frozen=True)
class SizeBucket:
    """One Android resource slot."""

    key: str
    density: str
    role: Role = "launcher"

    @property
    def folder(self) -> str:
        return f"mipmap-{self.density}"

    @property
    def file_name(self) -> str:
        return f"ic_{self.role}.png"


class BucketTable:
    """Immutable, key-unique collection of size buckets with a match mode."""

    def __init__(self, buckets: tuple[SizeBucket, ...], mode: MatchMode):
        keys = [b.key for b in buckets]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Duplicate bucket keys: {', '.join(duplicates)}")
        self._buckets = tuple(buckets)
        self._by_key = {b.key: b for b in buckets}
        self._mode = mode

    @property
    def mode(self) -> MatchMode:
        return self._mode

    @property
    def buckets(self) -> tuple[SizeBucket, ...]:
        return self._buckets

    @property
    def keys(self) -> list[str]:
        return [b.key for b in self._buckets]

    def lookup(self, key: str) -> SizeBucket | None:
        """Bucket for a size key (e.g. a downloaded file's stem)."""
        return self._by_key.get(key.strip().lower())

    def resolve(self, icons: list[IconRef] | None, key: str) -> IconRef | None:
        return resolve_icon(icons, key, self._mode)

    def __iter__(self):
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"<BucketTable mode={self._mode!r} keys={self.keys!r}>"


LAUNCHER_TABLE = BucketTable(
    (
        SizeBucket("48", "mdpi"),
        SizeBucket("72", "hdpi"),
        SizeBucket("96", "xhdpi"),
        SizeBucket("144", "xxhdpi"),
        SizeBucket("192", "xxxhdpi"),
    ),
    mode="square",
)

LAUNCHER_SPLASH_TABLE = BucketTable(
    (
        SizeBucket("48x48", "mdpi"),
        SizeBucket("72x72", "hdpi"),
        SizeBucket("96x96", "xhdpi"),
        SizeBucket("144x144", "xxhdpi"),
        SizeBucket("192x192", "xxxhdpi"),
        SizeBucket("320x480", "mdpi", "splash"),
        SizeBucket("480x800", "hdpi", "splash"),
        SizeBucket("720x1280", "xhdpi", "splash"),
        SizeBucket("1080x1920", "xxhdpi", "splash"),
        SizeBucket("1440x2560", "xxxhdpi", "splash"),
    ),
    mode="exact",
)


# ── Matching ────────────────────────────────────────────────────


def is_png(icon: IconRef) -> bool:
    """True when the icon's URL ends in .png or its declared type is PNG."""
    extension = posixpath.splitext(urlparse(icon.src).path)[1]
    if extension and extension.lower() == ".png":
        return True
    return bool(icon.type) and icon.type.lower() == PNG_MIME_TYPE


def parse_size_token(token: str) -> tuple[str, str] | None:
    """Split a size token into its two dimensions.

    ``"48x48"`` gives ``("48", "48")``, ``"48"`` gives ``("48", "48")``,
    anything else (``"any"``, ``"1x2x3"``) gives ``None``.
    """
    parts = token.strip().lower().split("x")
    if len(parts) == 1 and parts[0].isdigit():
        return parts[0], parts[0]
    if len(parts) == 2 and all(p.isdigit() for p in parts):
        return parts[0], parts[1]
    return None


def _token_matches(token: str, key: str, mode: MatchMode) -> bool:
    if mode == "exact":
        return token.strip().lower() == key
    dimensions = parse_size_token(token)
    return dimensions is not None and dimensions == (key, key)


def resolve_icon(
    icons: list[IconRef] | None,
    requested_key: str | int,
    mode: MatchMode = "square",
) -> IconRef | None:
    """Return the first PNG icon with a size token matching the key.

    Args:
        icons: The manifest's icon list (may be None).
        requested_key: ``"48"`` / ``48`` in square mode, ``"1080x1920"`` in exact mode.
        mode: Active matching mode.
    """
    key = str(requested_key).strip().lower()
    for icon in icons or []:
        if not is_png(icon):
            continue
        if any(_token_matches(t, key, mode) for t in icon.size_tokens):
            return icon
    return None


# ── Manifest helpers ────────────────────────────────────────────


def list_icon_references(
    manifest: ManifestContent,
    table: BucketTable,
) -> list[tuple[str, str]]:
    """Suggested local file name and source URL for every resolvable bucket."""
    references: list[tuple[str, str]] = []
    for bucket in table:
        icon = table.resolve(manifest.icons, bucket.key)
        if icon is not None:
            references.append((f"{bucket.key}.png", icon.src))
    logger.debug("Resolved %d of %d icon buckets", len(references), len(table))
    return references


def normalize_size_key(size_key: str | int) -> str:
    """Turn a bucket key into a manifest ``sizes`` token ("48" -> "48x48")."""
    key = str(size_key).strip().lower()
    dimensions = parse_size_token(key)
    if dimensions is None:
        return key
    return f"{dimensions[0]}x{dimensions[1]}"


def add_icon(manifest: ManifestContent, file_name: str, size_key: str | int) -> IconRef:
    """Append an icon entry to the manifest, creating the list if needed.

    No de-duplication: calling twice appends twice.
    """
    icon = IconRef(src=file_name, sizes=normalize_size_key(size_key))
    if manifest.icons is None:
        manifest.icons = []
    manifest.icons.append(icon)
    return icon
