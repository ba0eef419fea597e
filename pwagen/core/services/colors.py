"""Color naming — map manifest colors to canonical CSS color names."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from pwagen.core.data import get_registry

logger = logging.getLogger(__name__)

_SHORT_HEX = re.compile(r"^#([0-9a-f])([0-9a-f])([0-9a-f])$")


def normalize_color(value: str) -> str:
    """Lower-case, trim, and expand ``#abc`` to ``#aabbcc``."""
    color = value.strip().lower()
    m = _SHORT_HEX.match(color)
    if m:
        color = "#" + "".join(c * 2 for c in m.groups())
    return color


def name_color(candidates: Iterable[str | None]) -> str | None:
    """Canonical name for the first truthy candidate color.

    Falls back to the candidate itself when the catalog has no entry for
    it. Returns ``None`` only when every candidate is empty.
    """
    value = next((c for c in candidates if c), None)
    if value is None:
        return None

    registry = get_registry()
    color = normalize_color(value)
    if color in registry.css_colors:
        return color
    name = registry.color_names.get(color)
    if name is None:
        logger.debug("No color name for %r, keeping the raw value", value)
        return value
    return name
