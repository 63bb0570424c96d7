"""Conventional commit classification.

Subjects are matched against a deliberately loose grammar::

    type(scope)!: description

``type`` is a bare word, ``(scope)`` is optional and may be missing its
closing parenthesis, ``!`` marks a breaking change and the description is
optional. Any subject that starts with a word character therefore
matches; only subjects that do not are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sofie_version.vcs.git import CommitRecord

CONVENTIONAL_SUBJECT_PATTERN = re.compile(
    r"^(?P<type>\w+)"
    r"(?P<scope>\([^()\r\n]*\)|\()?"
    r"(?P<breaking>!)?"
    r"(?P<description>:.*)?"
)

FEATURE_TYPE = "feat"


@dataclass(frozen=True, slots=True)
class ConventionalSubject:
    """The parts of a subject line that matched the grammar."""

    type: str
    scope: str | None
    breaking: bool
    description: str | None


@dataclass(frozen=True, slots=True)
class ClassifiedCommit:
    """A commit whose subject matched the conventional grammar."""

    subject: str
    body: str
    short_hash: str
    full_hash: str
    type: str
    scope: str | None
    description: str
    breaking: bool


@dataclass
class ClassificationResult:
    """Classified commits bucketed by type.

    Dict order follows the first commit seen for each type; each list keeps
    the order the commits were supplied in.
    """

    breaking: dict[str, list[ClassifiedCommit]] = field(default_factory=dict)
    changes: dict[str, list[ClassifiedCommit]] = field(default_factory=dict)

    @property
    def has_breaking_changes(self) -> bool:
        return any(self.breaking.values())

    @property
    def has_features(self) -> bool:
        return bool(self.changes.get(FEATURE_TYPE))

    def add(self, commit: ClassifiedCommit) -> None:
        bucket = self.breaking if commit.breaking else self.changes
        bucket.setdefault(commit.type, []).append(commit)


def parse_subject(subject: str) -> ConventionalSubject | None:
    """Parse a commit subject line.

    Args:
        subject: First line of the commit message

    Returns:
        The matched parts, or None if the subject does not match
    """
    match = CONVENTIONAL_SUBJECT_PATTERN.match(subject)
    if match is None:
        return None

    raw_scope = match.group("scope")
    scope = raw_scope.strip("()") if raw_scope else None

    # Drop the ": " separator
    raw_description = match.group("description")
    description = raw_description[2:] if raw_description else None

    return ConventionalSubject(
        type=match.group("type"),
        scope=scope or None,
        breaking=match.group("breaking") is not None,
        description=description or None,
    )


def classify_commit(record: CommitRecord) -> ClassifiedCommit | None:
    """Classify a single commit, or return None when it does not match."""
    parsed = parse_subject(record.subject)
    if parsed is None:
        return None

    return ClassifiedCommit(
        subject=record.subject,
        body=record.body,
        short_hash=record.short_hash,
        full_hash=record.full_hash,
        type=parsed.type,
        scope=parsed.scope,
        description=parsed.description or record.subject,
        breaking=parsed.breaking,
    )


def classify_commits(records: Iterable[CommitRecord]) -> ClassificationResult:
    """Bucket commits into breaking and normal changes keyed by type.

    Commits whose subject does not match are silently left out.
    """
    result = ClassificationResult()
    for record in records:
        classified = classify_commit(record)
        if classified is not None:
            result.add(classified)
    return result
