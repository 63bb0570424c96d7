"""Semantic version calculation.

Versions are ``semver.Version`` objects. Increments follow the rules of
npm's ``semver.inc`` so a release computed here matches what ``npm
version`` would accept:

- ``major``/``minor``/``patch`` on a prerelease of the same release line
  finalize it instead of skipping a version (``2.0.0-beta.0`` -> ``2.0.0``)
- ``premajor``/``preminor``/``prepatch`` bump the release part and attach
  ``<identifier>.0`` as the prerelease
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import semver

from sofie_version.exceptions import InvalidVersionError, TagNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from sofie_version.core.commits import ClassificationResult

PRERELEASE_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


class BumpType(StrEnum):
    """Kind of version increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PREMAJOR = "premajor"
    PREMINOR = "preminor"
    PREPATCH = "prepatch"

    @property
    def is_prerelease(self) -> bool:
        return self.value.startswith("pre")


@dataclass(frozen=True, slots=True)
class VersionDecision:
    """Outcome of the version calculation for one release."""

    current_version: semver.Version
    next_version: semver.Version
    bump: BumpType
    prerelease_identifier: str | None = None

    @property
    def tag(self) -> str:
        return f"v{self.next_version}"


def parse_version(text: str) -> semver.Version:
    """Parse a semantic version string.

    A single leading ``v`` or ``=`` is accepted, as tags are usually
    written ``v1.2.3``.

    Raises:
        InvalidVersionError: If the string is not a valid semantic version
    """
    cleaned = text.strip()
    if cleaned[:1] in ("v", "V", "="):
        cleaned = cleaned[1:]
    try:
        return semver.Version.parse(cleaned)
    except (ValueError, TypeError) as e:
        raise InvalidVersionError(f"Invalid semantic version: {text!r}") from e


def is_valid_version(text: str) -> bool:
    try:
        parse_version(text)
    except InvalidVersionError:
        return False
    return True


def find_boundary_tag(tags: Iterable[str], override: str | None = None) -> str:
    """Pick the tag marking the previous release.

    Args:
        tags: Tag names, newest first
        override: Tag given explicitly by the user; used as is

    Returns:
        The first tag that is a valid semantic version

    Raises:
        TagNotFoundError: If no tag qualifies
    """
    if override:
        return override
    for tag in tags:
        if is_valid_version(tag):
            return tag
    raise TagNotFoundError(
        "No semantic version tag found to compare against. "
        "Tag the previous release or pass --last-tag."
    )


def determine_bump(
    has_breaking_changes: bool,
    has_features: bool,
    prerelease: bool = False,
) -> BumpType:
    """Pick the bump kind: major beats minor beats patch."""
    if has_breaking_changes:
        kind = "major"
    elif has_features:
        kind = "minor"
    else:
        kind = "patch"
    return BumpType(f"pre{kind}" if prerelease else kind)


def sanitize_prerelease_identifier(text: str) -> str:
    """Collapse every run of non-alphanumeric characters into one hyphen."""
    return _NON_ALPHANUMERIC.sub("-", text)


def build_prerelease_identifier(text: str, commit_time: datetime, short_hash: str) -> str:
    """Build the full prerelease identifier for a build.

    Args:
        text: Identifier requested by the user (e.g. "beta")
        commit_time: Time of the commit being released
        short_hash: Abbreviated hash of that commit

    Returns:
        ``<sanitized>-<yyyyMMdd-HHmmss>-<short_hash>``
    """
    stamp = commit_time.strftime(PRERELEASE_TIMESTAMP_FORMAT)
    return f"{sanitize_prerelease_identifier(text)}-{stamp}-{short_hash.strip()}"


def increment_version(
    current: semver.Version,
    bump: BumpType,
    identifier: str | None = None,
) -> semver.Version:
    """Increment a version the way ``npm version <bump> --preid <identifier>`` does."""
    major, minor, patch = current.major, current.minor, current.patch
    pending = current.prerelease is not None

    if bump is BumpType.MAJOR:
        if not (pending and minor == 0 and patch == 0):
            major += 1
        minor = patch = 0
    elif bump is BumpType.MINOR:
        if not (pending and patch == 0):
            minor += 1
        patch = 0
    elif bump is BumpType.PATCH:
        if not pending:
            patch += 1
    elif bump is BumpType.PREMAJOR:
        major, minor, patch = major + 1, 0, 0
    elif bump is BumpType.PREMINOR:
        minor, patch = minor + 1, 0
    elif bump is BumpType.PREPATCH:
        patch += 1

    prerelease = None
    if bump.is_prerelease:
        prerelease = f"{identifier}.0" if identifier else "0"

    return semver.Version(major, minor, patch, prerelease=prerelease)


def calculate_next_version(
    current_version: str | semver.Version,
    classification: ClassificationResult,
    *,
    prerelease: bool = False,
    identifier: str | None = None,
) -> VersionDecision:
    """Decide the next version from the classified commits.

    Args:
        current_version: Version currently in the manifest
        classification: Commits since the last release
        prerelease: Produce a ``pre*`` bump
        identifier: Prerelease identifier, already sanitized

    Returns:
        The version decision

    Raises:
        InvalidVersionError: If current_version is not a semantic version
    """
    current = (
        current_version
        if isinstance(current_version, semver.Version)
        else parse_version(current_version)
    )
    bump = determine_bump(
        classification.has_breaking_changes,
        classification.has_features,
        prerelease=prerelease or identifier is not None,
    )
    return VersionDecision(
        current_version=current,
        next_version=increment_version(current, bump, identifier),
        bump=bump,
        prerelease_identifier=identifier,
    )
