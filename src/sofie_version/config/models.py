"""Configuration models.

Settings live in ``[tool.sofie-version]`` of pyproject.toml or under the
``"sofie-version"`` key of package.json. Every field has a default, so a
project without any configuration works out of the box.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SofieVersionConfig(BaseModel):
    """Top-level sofie-version configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    changelog_path: Path = Field(
        default=Path("CHANGELOG.md"),
        description="Changelog file, relative to the project root",
    )
    commit_message: str = Field(
        default="chore(release): v{version}",
        description="Release commit message; {version} is substituted",
    )
    manifest: Path | None = Field(
        default=None,
        description="Manifest holding version and homepage (auto-detected if unset)",
    )
    sign_tags: bool = Field(
        default=False,
        description="Create GPG-signed tags instead of annotated ones",
    )

    @field_validator("commit_message")
    @classmethod
    def _commit_message_has_version(cls, value: str) -> str:
        if "{version}" not in value:
            raise ValueError("commit_message must contain '{version}'")
        return value

    def format_commit_message(self, version: str) -> str:
        return self.commit_message.format(version=version)
