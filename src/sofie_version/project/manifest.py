"""Project manifest access.

The manifest supplies the current version and the repository homepage,
and is where the new version is stored on release. Two kinds are
supported:

- ``package.json``: read directly, updated through ``npm version`` so the
  lock file stays in sync
- ``pyproject.toml``: read with tomllib, updated in place
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from sofie_version.config.loader import load_package_json, load_pyproject_toml
from sofie_version.exceptions import (
    ConfigValidationError,
    ManifestUpdateError,
    MissingHomepageError,
    VersionNotFoundError,
)
from sofie_version.project.pyproject import (
    get_pyproject_homepage,
    get_pyproject_version,
    update_pyproject_version,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

NPM_LOCK_FILES = ("package-lock.json", "npm-shrinkwrap.json")


class ManifestKind(StrEnum):
    PACKAGE_JSON = "package.json"
    PYPROJECT = "pyproject.toml"


@dataclass(frozen=True, slots=True)
class Manifest:
    """Release-relevant fields of a project manifest."""

    path: Path
    kind: ManifestKind
    version: str
    homepage: str | None

    @property
    def root(self) -> Path:
        return self.path.parent

    def require_homepage(self) -> str:
        """Return the homepage or fail if the manifest lacks one.

        Raises:
            MissingHomepageError: If no homepage is declared
        """
        if not self.homepage:
            where = "package.json" if self.kind is ManifestKind.PACKAGE_JSON else "[project.urls]"
            raise MissingHomepageError(
                f"No repository homepage specified in the {where} of {self.path}, exiting..."
            )
        return self.homepage


def load_manifest(path: Path) -> Manifest:
    """Read version and homepage from a manifest file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the manifest kind is not supported
        VersionNotFoundError: If the manifest has no version
    """
    if path.name == ManifestKind.PACKAGE_JSON:
        data = load_package_json(path)
        version = data.get("version")
        if not isinstance(version, str):
            raise VersionNotFoundError(f"Could not find version in {path}")
        homepage = data.get("homepage")
        return Manifest(path, ManifestKind.PACKAGE_JSON, version, homepage or None)

    if path.name == ManifestKind.PYPROJECT:
        return Manifest(
            path,
            ManifestKind.PYPROJECT,
            get_pyproject_version(path),
            get_pyproject_homepage(load_pyproject_toml(path)),
        )

    raise ConfigValidationError(f"Unsupported manifest: {path.name}")


def _run_npm_version(manifest: Manifest, new_version: str) -> None:
    cmd = ["npm", "version", new_version, "--git-tag-version", "false"]
    logger.debug("Running %s", " ".join(cmd))
    try:
        subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            cwd=manifest.root,
        )
    except subprocess.CalledProcessError as e:
        raise ManifestUpdateError(
            f"npm version failed with exit code {e.returncode}",
            stderr=e.stderr,
        ) from e


def update_manifest_version(manifest: Manifest, new_version: str) -> list[Path]:
    """Store a new version in the manifest.

    Args:
        manifest: Manifest to update
        new_version: Version to store

    Returns:
        Files that were changed and need to be staged

    Raises:
        ManifestUpdateError: If npm fails
        VersionNotFoundError: If the pyproject version cannot be located
    """
    if manifest.kind is ManifestKind.PYPROJECT:
        return [update_pyproject_version(manifest.path, new_version)]

    _run_npm_version(manifest, new_version)
    changed = [manifest.path]
    changed.extend(
        manifest.root / name for name in NPM_LOCK_FILES if (manifest.root / name).is_file()
    )
    return changed
