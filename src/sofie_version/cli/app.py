"""Command-line entry point."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from sofie_version import __version__
from sofie_version.cli.commands.update import ReleaseContext, run_update

app = typer.Typer(
    name="sofie-version",
    help="Bump the version, update the changelog and tag a release from conventional commits.",
    add_completion=False,
    no_args_is_help=False,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sofie-version {__version__}")
        raise typer.Exit


@app.command()
def release(
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Simulate the version update and print the changelog."),
    ] = False,
    prerelease: Annotated[
        str | None,
        typer.Option(
            "--prerelease",
            help="Tag a prerelease build, using this text as the identifier suffix.",
        ),
    ] = None,
    last_tag: Annotated[
        str | None,
        typer.Option(
            "--last-tag",
            "--lastTag",
            help="Tag of the previous release (defaults to the newest semver tag).",
        ),
    ] = None,
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-C",
            help="Project directory (defaults to the current directory).",
            exists=True,
            file_okay=False,
            resolve_path=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """Compute the next release from the commits since the last tag."""
    _configure_logging(verbose)
    context = ReleaseContext(
        project_path=path or Path.cwd(),
        dry_run=dry_run,
        prerelease=prerelease,
        last_tag=last_tag,
    )
    run_update(context, console, err_console)


def main() -> None:
    app()
