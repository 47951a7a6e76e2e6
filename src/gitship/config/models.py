"""Configuration models for gitship.

Settings are read from the ``[tool.gitship]`` table of pyproject.toml and
validated with pydantic. Every field has a default, so a project without
the table still gets a working configuration.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitship.core.version import ReleaseType


class ChangelogConfig(BaseModel):
    """Changelog generation settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    path: Path = Path("CHANGELOG.md")
    strip_emoji_codes: bool = False


class DeployConfig(BaseModel):
    """Deployment manifest settings.

    ``exclusions`` is a comma-separated list of regular expression
    fragments, always combined with the built-in exclusions.
    """

    model_config = ConfigDict(extra="forbid")

    entry: str | None = None
    import_map: str | None = None
    exclusions: str = ""
    production: bool = False
    include_symlinks: bool = False

    @field_validator("exclusions")
    @classmethod
    def _validate_exclusions(cls, value: str) -> str:
        for fragment in value.split(","):
            if fragment.strip():
                try:
                    re.compile(fragment.strip())
                except re.error as e:
                    raise ValueError(f"invalid exclusion pattern {fragment.strip()!r}: {e}") from e
        return value


class GitShipConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    owner: str = ""
    name: str | None = None
    default_release_type: ReleaseType = ReleaseType.PATCH
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    deploy: DeployConfig = Field(default_factory=DeployConfig)
