"""Project manifest handling."""

from __future__ import annotations

from sofie_version.project.manifest import (
    Manifest,
    ManifestKind,
    load_manifest,
    update_manifest_version,
)

__all__ = ["Manifest", "ManifestKind", "load_manifest", "update_manifest_version"]
