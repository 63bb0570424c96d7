"""Git operations via subprocess.

The repository is treated as a black box: every query and mutation is a
``git`` invocation run in the project directory. Nothing here retries or
rolls back; a failing command raises GitCommandError.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sofie_version.exceptions import GitCommandError, GitError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# ASCII unit and record separators never appear in commit messages
FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = "%x1e%s%x1f%b%x1f%h%x1f%H"


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """A raw commit read from the log."""

    subject: str
    body: str
    short_hash: str
    full_hash: str


def parse_log_output(output: str) -> list[CommitRecord]:
    """Split ``git log`` output produced with LOG_FORMAT into records.

    Args:
        output: Raw stdout of ``git log --format=LOG_FORMAT``

    Returns:
        Commit records in log order (newest first)
    """
    records = []
    for raw in output.split(RECORD_SEPARATOR):
        if not raw.strip():
            continue
        fields = raw.split(FIELD_SEPARATOR)
        if len(fields) != 4:
            logger.debug("Skipping malformed log record: %r", raw)
            continue
        subject, body, short_hash, full_hash = fields
        records.append(
            CommitRecord(
                subject=subject,
                body=body.strip(),
                short_hash=short_hash.strip(),
                full_hash=full_hash.strip(),
            )
        )
    return records


class GitRepository:
    """A git working copy."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or Path.cwd()).resolve()
        if not self.path.is_dir():
            raise GitError(f"Not a directory: {self.path}")

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
            )
        except subprocess.CalledProcessError as e:
            raise GitCommandError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout

    def list_tags(self) -> list[str]:
        """List tags sorted by version, newest first."""
        output = self._run("tag", "-l", "--sort=-v:refname")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def get_commits_between(self, since: str, until: str = "HEAD") -> list[CommitRecord]:
        """Get the commits reachable from ``until`` but not from ``since``.

        Args:
            since: Boundary ref (usually the previous release tag)
            until: End ref

        Returns:
            Commit records, newest first
        """
        output = self._run("log", f"--format={LOG_FORMAT}", f"{since}..{until}")
        return parse_log_output(output)

    def get_short_hash(self, ref: str = "HEAD") -> str:
        return self._run("rev-parse", "--short", ref).strip()

    def get_commit_time(self, ref: str = "HEAD") -> datetime:
        """Get the committer time of ``ref`` as an aware UTC datetime."""
        output = self._run("log", "-1", "--pretty=format:%ct", ref).strip()
        return datetime.fromtimestamp(int(output), tz=UTC)

    def add(self, paths: Sequence[Path | str]) -> None:
        self._run("add", "--", *(str(p) for p in paths))

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)

    def create_tag(self, name: str, message: str | None = None, *, sign: bool = False) -> None:
        """Create an annotated (optionally signed) tag at HEAD."""
        args = ["tag", "-s" if sign else "-a", name, "-m", message or name]
        self._run(*args)
