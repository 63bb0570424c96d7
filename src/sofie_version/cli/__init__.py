"""Command-line interface for sofie-version."""

from __future__ import annotations

from sofie_version.cli.app import app, main

__all__ = ["app", "main"]
