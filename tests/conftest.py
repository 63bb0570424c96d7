"""Shared fixtures for sofie-version tests."""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from sofie_version.vcs.git import CommitRecord

REPO_URL = "https://github.com/example/project"


def make_record(subject: str, short_hash: str = "abc1234", body: str = "") -> CommitRecord:
    """Build a CommitRecord with a full hash derived from the short one."""
    return CommitRecord(
        subject=subject,
        body=body,
        short_hash=short_hash,
        full_hash=short_hash.ljust(40, "0"),
    )


@pytest.fixture
def feat_commit() -> CommitRecord:
    return make_record("feat: add user authentication", "feat123")


@pytest.fixture
def fix_commit() -> CommitRecord:
    return make_record("fix(core): handle null response", "fix4567")


@pytest.fixture
def breaking_commit() -> CommitRecord:
    return make_record("feat(api)!: redesign configuration format", "brk8901")


@pytest.fixture
def sample_commits(
    feat_commit: CommitRecord,
    fix_commit: CommitRecord,
    breaking_commit: CommitRecord,
) -> list[CommitRecord]:
    """A realistic mix of commits, newest first."""
    return [
        feat_commit,
        make_record("docs: update readme", "doc1111"),
        fix_commit,
        make_record("[skip] not conventional", "nc22222"),
        breaking_commit,
        make_record("chore(deps): bump dependencies", "chr3333"),
        make_record("feat(ui): dark mode", "ui44444"),
    ]


@pytest.fixture
def pyproject_project(tmp_path: Path) -> Path:
    """A project directory with a pyproject.toml manifest."""
    (tmp_path / "pyproject.toml").write_text(
        f"""\
[project]
name = "test-project"
version = "1.2.3"
description = "A test project"

[project.urls]
Homepage = "{REPO_URL}#readme"

[tool.other]
version = "9.9.9"
"""
    )
    return tmp_path


@pytest.fixture
def package_json_project(tmp_path: Path) -> Path:
    """A project directory with a package.json manifest."""
    (tmp_path / "package.json").write_text(
        json.dumps(
            {
                "name": "test-project",
                "version": "1.2.3",
                "homepage": f"{REPO_URL}#readme",
            },
            indent=2,
        )
    )
    return tmp_path


def git(repo: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    ).stdout


def commit_file(repo: Path, name: str, message: str) -> None:
    """Write a file and commit it with the given message."""
    path = repo / name
    path.write_text(f"{message}\n")
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def temp_git_repo(pyproject_project: Path) -> Path:
    """A git repository with a pyproject.toml and a v1.2.3 release tag."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = pyproject_project
    git(repo, "init", "-q", "-b", "main")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    git(repo, "add", "pyproject.toml")
    git(repo, "commit", "-q", "-m", "chore: initial commit")
    git(repo, "tag", "v1.2.3")
    return repo
