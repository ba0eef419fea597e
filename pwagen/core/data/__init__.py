"""
Central data registry for static catalogs.

Loads catalogs from ``pwagen/core/data/catalogs/`` once at first access
and caches them for the process lifetime. The cached tables are only
ever read, so concurrent generator runs share them freely.

Usage::

    from pwagen.core.data import get_registry

    registry = get_registry()
    names = registry.color_names      # {"#ff0000": "red", ...}
"""

from __future__ import annotations

import json
import logging
from functools import cached_property, lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent


def _load_json(relative_path: str) -> list | dict:
    """Load a JSON file relative to the data directory."""
    path = _DATA_DIR / relative_path
    if not path.exists():
        logger.warning("Data file not found: %s", path)
        return {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class DataRegistry:
    """Registry for the static data catalogs.

    Each property lazily loads its JSON file on first access and caches
    the result for the lifetime of the instance.
    """

    @cached_property
    def css_colors(self) -> Mapping[str, str]:
        """CSS named colors, name -> lower-case ``#rrggbb``."""
        data = _load_json("catalogs/css_colors.json")
        logger.debug("Loaded %d CSS color names", len(data))
        return MappingProxyType({k.lower(): v.lower() for k, v in data.items()})

    @cached_property
    def color_names(self) -> Mapping[str, str]:
        """Reverse table, ``#rrggbb`` -> first CSS name in catalog order."""
        reverse: dict[str, str] = {}
        for name, value in self.css_colors.items():
            reverse.setdefault(value, name)
        return MappingProxyType(reverse)


@lru_cache(maxsize=1)
def get_registry() -> DataRegistry:
    """Process-wide registry instance."""
    return DataRegistry()
