"""Configuration management for sofie-version."""

from __future__ import annotations

from sofie_version.config.loader import find_manifest, load_config
from sofie_version.config.models import SofieVersionConfig

__all__ = [
    "SofieVersionConfig",
    "find_manifest",
    "load_config",
]
