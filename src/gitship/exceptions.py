"""Exception hierarchy for gitship.

Every error raised by the pipelines derives from GitShipError, so the CLI
can report it uniformly and exit with a non-zero status. Each error keeps
enough context (raw fragment, path, version string) to diagnose the failure
without re-running the command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


class GitShipError(Exception):
    """Base exception for all gitship errors."""

    def __init__(self, message: str, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({context})"


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(GitShipError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """The [tool.gitship] table or [project] metadata is invalid."""


# =============================================================================
# Commits and releases
# =============================================================================


class GitError(GitShipError):
    """A git subprocess failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message, {"stderr": stderr.strip()} if stderr else None)
        self.stderr = stderr


class CommitParseError(GitShipError):
    """A fragment of git log output is not a well-formed commit record."""

    def __init__(self, fragment: Any, reason: str | None = None) -> None:
        details: dict[str, Any] = {"commit": fragment}
        if reason:
            details["reason"] = reason
        super().__init__("Parse commit failed.", details)
        self.fragment = fragment


class NoMarkerError(GitShipError):
    """A commit subject has no :code: marker to classify it by."""

    def __init__(self, subject: str) -> None:
        super().__init__("No emoji found :(", {"subject": subject})
        self.subject = subject


class VersionParseError(GitShipError):
    """A string does not follow the semantic version grammar."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid semantic version: {text!r}")
        self.text = text


# =============================================================================
# Deployment
# =============================================================================


class ManifestReadError(GitShipError):
    """A file could not be read while building a manifest."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        super().__init__(
            f"Could not read {path}",
            {"reason": reason} if reason else None,
        )
        self.path = path
