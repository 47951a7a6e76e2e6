"""Configuration management for gitship."""

from __future__ import annotations

from gitship.config.loader import load_config
from gitship.config.models import ChangelogConfig, DeployConfig, GitShipConfig

__all__ = [
    "ChangelogConfig",
    "DeployConfig",
    "GitShipConfig",
    "load_config",
]
