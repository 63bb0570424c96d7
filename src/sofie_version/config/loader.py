"""Configuration loading.

The project root is the nearest directory, starting from the given path
and walking up, that contains a ``package.json`` or ``pyproject.toml``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sofie_version.config.models import SofieVersionConfig
from sofie_version.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_NAME = "sofie-version"
MANIFEST_FILENAMES = ("package.json", "pyproject.toml")


def find_manifest(start_path: Path | None = None) -> Path:
    """Find the project manifest by walking up from start_path.

    ``package.json`` takes precedence over ``pyproject.toml`` in the same
    directory.

    Args:
        start_path: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the manifest

    Raises:
        ConfigNotFoundError: If no manifest is found
    """
    current = (start_path or Path.cwd()).resolve()

    while True:
        for name in MANIFEST_FILENAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        if current.parent == current:
            break
        current = current.parent

    raise ConfigNotFoundError(
        f"Could not find package.json or pyproject.toml in "
        f"{start_path or Path.cwd()} or any parent directory"
    )


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Load and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the TOML is invalid
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def load_package_json(path: Path) -> dict[str, Any]:
    """Load and parse a package.json file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the JSON is invalid
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"Expected a JSON object in {path}")
    return data


def load_manifest_data(path: Path) -> dict[str, Any]:
    """Load a manifest of either supported kind."""
    if path.name == "package.json":
        return load_package_json(path)
    return load_pyproject_toml(path)


def extract_tool_config(manifest_path: Path, data: dict[str, Any]) -> dict[str, Any]:
    """Pull the sofie-version section out of parsed manifest data.

    Returns:
        The raw configuration dict (empty if not present)
    """
    if manifest_path.name == "package.json":
        section = data.get(TOOL_NAME, {})
    else:
        section = data.get("tool", {}).get(TOOL_NAME, {})

    if not isinstance(section, dict):
        raise ConfigValidationError(f"'{TOOL_NAME}' configuration in {manifest_path} must be a table")
    return section


def load_config(path: Path | None = None) -> SofieVersionConfig:
    """Load sofie-version configuration for a project.

    Args:
        path: Project directory or manifest path (defaults to cwd)

    Returns:
        Validated configuration. Defaults are used where nothing is set.

    Raises:
        ConfigNotFoundError: If no manifest is found
        ConfigValidationError: If the configuration is invalid
    """
    manifest_path = path if path is not None and path.is_file() else find_manifest(path)
    raw = extract_tool_config(manifest_path, load_manifest_data(manifest_path))
    logger.debug("Loaded %s configuration from %s: %s", TOOL_NAME, manifest_path, raw)

    try:
        config = SofieVersionConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {manifest_path}:\n{e}") from e

    if config.manifest is None:
        config = config.model_copy(update={"manifest": manifest_path})
    elif not config.manifest.is_absolute():
        config = config.model_copy(update={"manifest": manifest_path.parent / config.manifest})
    return config
