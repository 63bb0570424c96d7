"""pyproject.toml version and homepage access.

Reading goes through tomllib. Writing preserves formatting and comments
by using a targeted regex replacement rather than re-serializing the
TOML document.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from sofie_version.config.loader import load_pyproject_toml
from sofie_version.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

HOMEPAGE_URL_KEYS = ("Homepage", "homepage", "Repository", "repository", "Source", "source")

# [project] first, then [tool.poetry]
_VERSION_SECTIONS = (r"\[project\]", r"\[tool\.poetry\]")
_VERSION_LINE = r'^(version\s*=\s*)["\'][^"\']+["\']'


def get_pyproject_version(path: Path) -> str:
    """Get the version from pyproject.toml.

    Args:
        path: Path to pyproject.toml

    Returns:
        Version string

    Raises:
        VersionNotFoundError: If version cannot be found
    """
    data = load_pyproject_toml(path)

    version = data.get("project", {}).get("version")
    if version is None:
        version = data.get("tool", {}).get("poetry", {}).get("version")
    if not isinstance(version, str):
        raise VersionNotFoundError(
            f"Could not find version in {path}. "
            "Expected [project].version or [tool.poetry].version."
        )
    return version


def get_pyproject_homepage(data: dict[str, Any]) -> str | None:
    """Find the repository homepage in parsed pyproject data.

    Looks at ``[project.urls]`` and then at the Poetry ``homepage`` and
    ``repository`` fields.
    """
    urls = data.get("project", {}).get("urls", {})
    for key in HOMEPAGE_URL_KEYS:
        if urls.get(key):
            return urls[key]

    poetry = data.get("tool", {}).get("poetry", {})
    return poetry.get("homepage") or poetry.get("repository") or None


def update_pyproject_version(path: Path, new_version: str) -> Path:
    """Update the version in pyproject.toml.

    Args:
        path: Path to pyproject.toml
        new_version: New version string to set

    Returns:
        Path to the updated pyproject.toml

    Raises:
        VersionNotFoundError: If version cannot be found
        ProjectError: If the file was left unchanged
    """
    content = path.read_text(encoding="utf-8")

    def replace_in_section(match: re.Match[str]) -> str:
        return re.sub(
            _VERSION_LINE,
            rf'\g<1>"{new_version}"',
            match.group(0),
            count=1,
            flags=re.MULTILINE,
        )

    for header in _VERSION_SECTIONS:
        # The whole section up to the next table header or EOF
        section_pattern = rf"^{header}.*?(?=^\[|\Z)"
        section = re.search(section_pattern, content, flags=re.MULTILINE | re.DOTALL)
        if section is None or not re.search(_VERSION_LINE, section.group(0), re.MULTILINE):
            continue

        new_content = re.sub(
            section_pattern,
            replace_in_section,
            content,
            count=1,
            flags=re.MULTILINE | re.DOTALL,
        )
        if new_content == content:
            raise ProjectError(
                f"Version in {path} was not updated. It may already be {new_version}."
            )
        path.write_text(new_content, encoding="utf-8")
        return path

    raise VersionNotFoundError(
        f"Could not find version to update in {path}. "
        "Expected [project].version or [tool.poetry].version."
    )
