"""
Configuration loader — reads pwagen.yml and manifest files into models.

Generator options live in YAML (validated against GeneratorConfig);
manifests are JSON, either a full descriptor or a bare W3C manifest.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pwagen.core.models.config import GeneratorConfig
from pwagen.core.models.manifest import BASE_MANIFEST_FORMAT, ManifestDescriptor

logger = logging.getLogger(__name__)

# Default config filename
GENERATOR_CONFIG_FILE = "pwagen.yml"


class ConfigError(Exception):
    """Raised when configuration or manifest input is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for pwagen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to pwagen.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / GENERATOR_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None, overrides: dict[str, Any] | None = None) -> GeneratorConfig:
    """Load and validate generator options.

    Missing config (no path given, none found) yields the defaults.
    ``overrides`` (CLI flags) win over file values; ``None`` values are
    dropped so unset flags do not clobber the file.

    Raises:
        ConfigError: If an explicit file is missing, or the file is invalid.
    """
    data: dict[str, Any] = {}

    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", GENERATOR_CONFIG_FILE)
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        data = _read_yaml_mapping(path)
        # Options may be wrapped under a "generator" key or be flat
        if isinstance(data.get("generator"), dict):
            data = data["generator"]

    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        config = GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid generator configuration: {e}") from e

    logger.debug("Generator config: %s", config.model_dump())
    return config


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    logger.debug("Loading generator config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_manifest(path: Path) -> ManifestDescriptor:
    """Load a manifest file into a descriptor.

    Accepts ``{"format": ..., "content": {...}}`` as is; any other JSON
    object is taken to be the manifest content in the base format.

    Raises:
        ConfigError: Missing file, invalid JSON, or invalid manifest shape.
    """
    if not path.is_file():
        raise ConfigError(f"Manifest file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")

    if "format" in data and isinstance(data.get("content"), dict):
        payload = data
    else:
        payload = {"format": BASE_MANIFEST_FORMAT, "content": data}

    try:
        descriptor = ManifestDescriptor.model_validate(payload)
    except ValidationError as e:
        raise ConfigError(f"Invalid manifest in {path}: {e}") from e
    descriptor.base_dir = path.resolve().parent

    logger.info(
        "Loaded manifest '%s' with %d icon(s)",
        descriptor.content.display_name or "?",
        len(descriptor.content.icons or []),
    )
    return descriptor
