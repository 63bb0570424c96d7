"""Changelog rendering and merging.

A release section is rendered from classified commits and prepended to
the existing changelog. Everything from the previous release heading
onwards is kept untouched; the header above it is regenerated.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from sofie_version.core.commits import ClassificationResult, ClassifiedCommit
    from sofie_version.core.version import VersionDecision

logger = logging.getLogger(__name__)

CHANGELOG_HEADER = (
    "# Changelog\n\n"
    "All notable changes to this project will be documented in this file. "
    "See [Convential Commits](https://www.conventionalcommits.org/en/v1.0.0/#specification) "
    "for commit guidelines.\n\n"
)

# Only these commit types are rendered, in this order of preference
CHANGELOG_GROUPS: dict[str, str] = {
    "feat": "Features",
    "fix": "Fixes",
}

START_OF_LAST_RELEASE_PATTERN = re.compile(
    r"(^#+ \[?[0-9]+\.[0-9]+\.[0-9]+|<a name=)",
    re.MULTILINE,
)

RELEASE_HEADING_PATTERN = re.compile(
    r"^## \[(?P<version>[^\]]+)\]"
    r"\((?P<repo_url>.+)/compare/(?P<previous_tag>[^)]*)\.\.\.(?P<tag>[^)]+)\)"
    r" \((?P<date>[^)]+)\)$"
)

HEADING_DATE_FORMAT = "%a %b %d %Y"


@dataclass(frozen=True, slots=True)
class ReleaseHeading:
    """The parts of a rendered release heading."""

    version: str
    repo_url: str
    previous_tag: str
    tag: str
    date: str


def repo_url_from_homepage(homepage: str) -> str:
    """Strip a ``#readme`` style fragment from a homepage URL."""
    return homepage.split("#", 1)[0]


def format_release_heading(
    version: str,
    repo_url: str,
    previous_tag: str,
    today: date,
) -> str:
    return (
        f"## [{version}]({repo_url}/compare/{previous_tag}...v{version}) "
        f"({today.strftime(HEADING_DATE_FORMAT)})\n"
    )


def parse_release_heading(line: str) -> ReleaseHeading | None:
    """Parse a heading produced by format_release_heading.

    Returns:
        The heading parts, or None if the line is not a release heading
    """
    match = RELEASE_HEADING_PATTERN.match(line.rstrip("\n"))
    if match is None:
        return None
    return ReleaseHeading(**match.groupdict())


def format_changelog_entry(commit: ClassifiedCommit, repo_url: str) -> str:
    """Format one commit as a Markdown bullet linking to the commit."""
    scope = f"**{commit.scope}** " if commit.scope else ""
    return (
        f"* {scope}{commit.description} "
        f"[{commit.short_hash}]({repo_url}/commit/{commit.full_hash.strip()})"
    )


def _render_groups(
    groups: dict[str, list[ClassifiedCommit]],
    repo_url: str,
    group_prefix: str,
) -> str:
    md = ""
    for commit_type, commits in groups.items():
        title = CHANGELOG_GROUPS.get(commit_type)
        if title is None:
            logger.debug("Not rendering %d %r commit(s)", len(commits), commit_type)
            continue
        md += f"{group_prefix}### {title}\n"
        for commit in commits:
            md += "\n" + format_changelog_entry(commit, repo_url)
    return md


def render_changelog_section(
    decision: VersionDecision,
    classification: ClassificationResult,
    repo_url: str,
    previous_tag: str,
    today: date | None = None,
) -> str:
    """Render the Markdown section for a release.

    Breaking changes come first under their own heading, followed by the
    normal changes. Within each, only the types in CHANGELOG_GROUPS are
    rendered.

    Args:
        decision: Version decision for the release
        classification: Classified commits since previous_tag
        repo_url: Repository URL used for compare and commit links
        previous_tag: Tag of the previous release
        today: Release date (defaults to today)

    Returns:
        Markdown for the release section
    """
    md = format_release_heading(
        str(decision.next_version),
        repo_url,
        previous_tag,
        today or date.today(),
    )

    if classification.breaking:
        md += "\n## Breaking changes\n"
        md += _render_groups(classification.breaking, repo_url, "\n")

    if classification.changes:
        md += _render_groups(classification.changes, repo_url, "\n\n")

    return md


def find_previous_releases(existing: str) -> str:
    """Return the existing changelog from the first release section on.

    Returns an empty string when no release section is found.
    """
    match = START_OF_LAST_RELEASE_PATTERN.search(existing)
    if match is None:
        return ""
    return existing[match.start() :]


def merge_changelog(section: str, existing: str | None) -> str:
    """Prepend a rendered section to an existing changelog.

    Args:
        section: Output of render_changelog_section
        existing: Current changelog contents, or None if there is none

    Returns:
        The new changelog contents
    """
    retained = find_previous_releases(existing) if existing else ""
    return CHANGELOG_HEADER + section + "\n\n" + retained


def preview_changelog(section: str) -> str:
    """Changelog text shown in dry-run mode."""
    return CHANGELOG_HEADER + section


def read_changelog(path: Path) -> str | None:
    """Read the changelog, returning None if it does not exist.

    Raises:
        OSError: For any failure other than the file being absent
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No changelog at %s, starting a new one", path)
        return None


def write_changelog(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")
