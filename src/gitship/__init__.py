"""gitship - gitmoji release notes and content-addressed deployment manifests."""

from __future__ import annotations

__version__ = "0.1.0"
