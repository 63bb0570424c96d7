"""Exception hierarchy for sofie-version.

All errors raised on purpose derive from SofieVersionError so the CLI
can report them uniformly. Failures of external tools that are not
wrapped here propagate unchanged and terminate the run.
"""

from __future__ import annotations


class SofieVersionError(Exception):
    """Base class for all sofie-version errors."""


# Configuration


class ConfigError(SofieVersionError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No manifest or configuration file was found."""


class ConfigValidationError(ConfigError):
    """Configuration or manifest contents are invalid."""


class MissingHomepageError(ConfigError):
    """The manifest does not declare a repository homepage."""


# Versions


class VersionError(SofieVersionError):
    """Version handling failed."""


class InvalidVersionError(VersionError):
    """A string is not a valid semantic version."""


class VersionNotFoundError(VersionError):
    """The manifest does not contain a version."""


# Git


class GitError(SofieVersionError):
    """A git operation failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr


class GitCommandError(GitError):
    """A git subprocess exited with a non-zero status."""


class TagNotFoundError(GitError):
    """No release tag could be used as the boundary of the changelog."""


# Changelog and project files


class ChangelogError(SofieVersionError):
    """The changelog could not be produced."""


class ProjectError(SofieVersionError):
    """A project file could not be updated."""


class ManifestUpdateError(ProjectError):
    """The package manager failed to update the manifest version."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr
