"""Implementation of the release command.

Computes the next version from the commits since the last release,
renders the changelog section and, unless in dry-run mode, writes the
changelog, bumps the manifest, commits and tags.

Apply mode has no rollback: if a step fails the run stops there and the
working copy keeps whatever the earlier steps changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from sofie_version.config import load_config
from sofie_version.core.changelog import (
    merge_changelog,
    preview_changelog,
    read_changelog,
    render_changelog_section,
    repo_url_from_homepage,
    write_changelog,
)
from sofie_version.core.commits import classify_commits
from sofie_version.core.version import (
    build_prerelease_identifier,
    calculate_next_version,
    find_boundary_tag,
)
from sofie_version.exceptions import SofieVersionError
from sofie_version.project import load_manifest, update_manifest_version
from sofie_version.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from sofie_version.config.models import SofieVersionConfig
    from sofie_version.core.version import VersionDecision
    from sofie_version.project import Manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseContext:
    """Explicit inputs of one run."""

    project_path: Path = field(default_factory=Path.cwd)
    dry_run: bool = False
    prerelease: str | None = None
    last_tag: str | None = None
    today: date = field(default_factory=date.today)


@dataclass(frozen=True)
class ReleasePlan:
    """Everything computed before any side effect happens."""

    decision: VersionDecision
    previous_tag: str
    section: str
    changelog_path: Path
    changelog: str


def plan_release(
    context: ReleaseContext,
    config: SofieVersionConfig,
    manifest: Manifest,
    repo: GitRepository,
) -> ReleasePlan:
    """Compute the next version and changelog without touching anything.

    Raises:
        MissingHomepageError: If the manifest has no homepage
        TagNotFoundError: If no previous release tag exists
        InvalidVersionError: If the manifest version is not semver
    """
    repo_url = repo_url_from_homepage(manifest.require_homepage())

    previous_tag = find_boundary_tag(
        [] if context.last_tag else repo.list_tags(),
        override=context.last_tag,
    )
    logger.info("Collecting commits since %s", previous_tag)

    records = repo.get_commits_between(previous_tag)
    classification = classify_commits(records)
    logger.info(
        "Classified %d commit(s): breaking=%s changes=%s",
        len(records),
        {t: len(c) for t, c in classification.breaking.items()},
        {t: len(c) for t, c in classification.changes.items()},
    )

    identifier = None
    if context.prerelease:
        identifier = build_prerelease_identifier(
            context.prerelease,
            repo.get_commit_time("HEAD"),
            repo.get_short_hash("HEAD"),
        )

    decision = calculate_next_version(
        manifest.version,
        classification,
        prerelease=context.prerelease is not None,
        identifier=identifier,
    )

    section = render_changelog_section(
        decision,
        classification,
        repo_url,
        previous_tag,
        today=context.today,
    )

    changelog_path = manifest.root / config.changelog_path
    return ReleasePlan(
        decision=decision,
        previous_tag=previous_tag,
        section=section,
        changelog_path=changelog_path,
        changelog=merge_changelog(section, read_changelog(changelog_path)),
    )


def apply_release(
    plan: ReleasePlan,
    config: SofieVersionConfig,
    manifest: Manifest,
    repo: GitRepository,
    console: Console,
) -> None:
    """Write the changelog, bump the manifest, commit and tag."""
    version = str(plan.decision.next_version)

    write_changelog(plan.changelog_path, plan.changelog)
    console.print(f"  [green]✓[/] Updated {plan.changelog_path.name}")

    changed = update_manifest_version(manifest, version)
    console.print(f"  [green]✓[/] Updated version in {manifest.path.name}")

    repo.add([*changed, plan.changelog_path])
    repo.commit(config.format_commit_message(version))
    console.print(f"  [green]✓[/] Committed release [cyan]{version}[/]")

    repo.create_tag(plan.decision.tag, f"Release {plan.decision.tag}", sign=config.sign_tags)
    console.print(f"  [green]✓[/] Tagged [cyan]{plan.decision.tag}[/]")


def run_update(
    context: ReleaseContext,
    console: Console,
    err_console: Console,
    repo: GitRepository | None = None,
) -> None:
    """Run the release command.

    Args:
        context: Inputs of this run
        console: Console for standard output
        err_console: Console for error output
        repo: Git repository (defaults to the project's)
    """
    try:
        config = load_config(context.project_path)
        manifest = load_manifest(config.manifest)
    except SofieVersionError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    try:
        repo = repo or GitRepository(manifest.root)
        plan = plan_release(context, config, manifest, repo)
    except SofieVersionError as e:
        _report_error(e, err_console)
        raise SystemExit(1) from e

    if context.dry_run:
        console.out(preview_changelog(plan.section), highlight=False)
        return

    console.print(
        f"\n[green]RELEASING[/] - Updating from [cyan]{plan.decision.current_version}[/] "
        f"to [green]{plan.decision.next_version}[/] ({plan.decision.bump})\n"
    )

    try:
        apply_release(plan, config, manifest, repo, console)
    except SofieVersionError as e:
        _report_error(e, err_console)
        raise SystemExit(1) from e


def _report_error(error: SofieVersionError, err_console: Console) -> None:
    err_console.print(f"[red]Error:[/] {error}")
    stderr = getattr(error, "stderr", None)
    if stderr:
        err_console.print(stderr.strip(), style="red", markup=False, highlight=False)
