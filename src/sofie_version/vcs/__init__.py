"""Version control access."""

from __future__ import annotations

from sofie_version.vcs.git import CommitRecord, GitRepository, parse_log_output

__all__ = ["CommitRecord", "GitRepository", "parse_log_output"]
