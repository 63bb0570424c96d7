"""Allow running as ``python -m sofie_version``."""

from __future__ import annotations

from sofie_version.cli.app import main

if __name__ == "__main__":
    main()
