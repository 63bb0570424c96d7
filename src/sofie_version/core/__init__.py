"""Core business logic for sofie-version.

This module contains the fundamental building blocks:
- Conventional commit classification
- Semantic version calculation
- Changelog rendering and merging
"""

from __future__ import annotations

from sofie_version.core.changelog import (
    CHANGELOG_GROUPS,
    CHANGELOG_HEADER,
    merge_changelog,
    parse_release_heading,
    read_changelog,
    render_changelog_section,
)
from sofie_version.core.commits import (
    ClassificationResult,
    ClassifiedCommit,
    classify_commits,
    parse_subject,
)
from sofie_version.core.version import (
    BumpType,
    VersionDecision,
    calculate_next_version,
    parse_version,
)

__all__ = [
    # Changelog
    "CHANGELOG_GROUPS",
    "CHANGELOG_HEADER",
    # Version
    "BumpType",
    # Commits
    "ClassificationResult",
    "ClassifiedCommit",
    "VersionDecision",
    "calculate_next_version",
    "classify_commits",
    "merge_changelog",
    "parse_release_heading",
    "parse_subject",
    "parse_version",
    "read_changelog",
    "render_changelog_section",
]
