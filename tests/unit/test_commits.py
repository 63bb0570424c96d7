"""Tests for conventional commit classification."""

from __future__ import annotations

import pytest
from conftest import make_record

from sofie_version.core.commits import (
    ClassificationResult,
    ConventionalSubject,
    classify_commit,
    classify_commits,
    parse_subject,
)
from sofie_version.vcs.git import CommitRecord


class TestParseSubject:
    """Tests for parse_subject()."""

    def test_parse_simple_feat(self):
        """Parse a simple feat subject."""
        parsed = parse_subject("feat: add new feature")

        assert parsed == ConventionalSubject(
            type="feat",
            scope=None,
            breaking=False,
            description="add new feature",
        )

    def test_parse_with_scope(self):
        """Scope is extracted without parentheses."""
        parsed = parse_subject("fix(api): handle null response")

        assert parsed is not None
        assert parsed.type == "fix"
        assert parsed.scope == "api"
        assert parsed.description == "handle null response"

    def test_parse_breaking_with_exclamation(self):
        """! marks a breaking change."""
        parsed = parse_subject("feat!: redesign API")

        assert parsed is not None
        assert parsed.breaking
        assert parsed.scope is None

    def test_parse_breaking_with_scope_and_exclamation(self):
        """Scope and ! can be combined."""
        parsed = parse_subject("refactor(core)!: change config format")

        assert parsed is not None
        assert parsed.breaking
        assert parsed.type == "refactor"
        assert parsed.scope == "core"

    def test_unclosed_scope(self):
        """A lone opening parenthesis is accepted as an empty scope."""
        parsed = parse_subject("feat(core: missing paren")

        assert parsed is not None
        assert parsed.type == "feat"
        assert parsed.scope is None
        assert parsed.description is None

    def test_empty_scope(self):
        """Empty parentheses give no scope."""
        parsed = parse_subject("fix(): something")

        assert parsed is not None
        assert parsed.scope is None
        assert parsed.description == "something"

    def test_no_description(self):
        """A bare word matches with no description."""
        parsed = parse_subject("feature request implemented")

        assert parsed is not None
        assert parsed.type == "feature"
        assert parsed.description is None

    @pytest.mark.parametrize(
        "subject",
        ["", "[skip ci] update", "  feat: leading space", "- bullet", ":bug: emoji"],
    )
    def test_unmatched(self, subject: str):
        """Subjects not starting with a word character do not match."""
        assert parse_subject(subject) is None


class TestClassifyCommit:
    """Tests for classify_commit()."""

    def test_keeps_record_fields(self, fix_commit: CommitRecord):
        """The classified commit carries the original record fields."""
        classified = classify_commit(fix_commit)

        assert classified is not None
        assert classified.short_hash == fix_commit.short_hash
        assert classified.full_hash == fix_commit.full_hash
        assert classified.subject == fix_commit.subject
        assert classified.scope == "core"
        assert classified.description == "handle null response"

    def test_description_falls_back_to_subject(self):
        """Without a description the whole subject is used."""
        classified = classify_commit(make_record("fix typo in readme"))

        assert classified is not None
        assert classified.type == "fix"
        assert classified.description == "fix typo in readme"

    def test_colon_only_falls_back_to_subject(self):
        """A bare colon leaves no description either."""
        classified = classify_commit(make_record("feat:"))

        assert classified is not None
        assert classified.description == "feat:"

    def test_unmatched_returns_none(self):
        """Non-matching subjects are not classified."""
        assert classify_commit(make_record("!!! oops")) is None


class TestClassifyCommits:
    """Tests for classify_commits()."""

    def test_breaking_and_normal_buckets(self, sample_commits: list[CommitRecord]):
        """Breaking commits land in the breaking map, others in changes."""
        result = classify_commits(sample_commits)

        assert list(result.breaking) == ["feat"]
        assert [c.short_hash for c in result.breaking["feat"]] == ["brk8901"]
        assert "feat" in result.changes
        assert "fix" in result.changes
        assert "docs" in result.changes
        assert "chore" in result.changes

    def test_unmatched_commits_are_dropped(self, sample_commits: list[CommitRecord]):
        """The non-conventional commit appears in neither map."""
        result = classify_commits(sample_commits)

        hashes = [
            c.short_hash
            for bucket in (result.breaking, result.changes)
            for commits in bucket.values()
            for c in commits
        ]
        assert "nc22222" not in hashes
        assert len(hashes) == len(sample_commits) - 1

    def test_group_order_follows_first_commit(self, sample_commits: list[CommitRecord]):
        """Types are keyed in the order their first commit was seen."""
        result = classify_commits(sample_commits)

        assert list(result.changes) == ["feat", "docs", "fix", "chore"]

    def test_commit_order_preserved(self, sample_commits: list[CommitRecord]):
        """Commits of one type keep their input order."""
        result = classify_commits(sample_commits)

        assert [c.short_hash for c in result.changes["feat"]] == ["feat123", "ui44444"]

    def test_empty_input(self):
        """No commits gives empty maps."""
        result = classify_commits([])

        assert result.breaking == {}
        assert result.changes == {}
        assert not result.has_breaking_changes
        assert not result.has_features


class TestClassificationResult:
    """Tests for ClassificationResult flags."""

    def test_has_features(self, feat_commit: CommitRecord):
        result = classify_commits([feat_commit])

        assert result.has_features
        assert not result.has_breaking_changes

    def test_breaking_feature_is_not_a_feature(self, breaking_commit: CommitRecord):
        """A breaking feat only counts as breaking."""
        result = classify_commits([breaking_commit])

        assert result.has_breaking_changes
        assert not result.has_features

    def test_add(self, fix_commit: CommitRecord):
        result = ClassificationResult()
        classified = classify_commit(fix_commit)
        assert classified is not None

        result.add(classified)

        assert result.changes == {"fix": [classified]}
