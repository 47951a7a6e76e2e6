"""Version control access for gitship."""

from __future__ import annotations

from gitship.vcs.git import COMMIT_FORMAT, GitRepository

__all__ = ["COMMIT_FORMAT", "GitRepository"]
