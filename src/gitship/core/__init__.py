"""Core business logic for gitship.

This module contains the fundamental building blocks:
- Commit parsing from git log output
- Gitmoji classification of commit subjects
- Release assembly and changelog rendering
- Semantic version parsing and increments
"""

from __future__ import annotations

from gitship.core.changelog import render_release
from gitship.core.commits import (
    Author,
    Commit,
    compare_commits_by_timestamp,
    parse_commit,
    parse_git_log_output,
    sort_commits,
)
from gitship.core.labels import UNRELEASED_LABELS, CommitLabel, get_commit_label
from gitship.core.release import (
    ReleaseChanges,
    ReleaseObject,
    extract_version_from_commit,
    get_release_object,
    init_release_object,
)
from gitship.core.version import ReleaseType, Version, parse_version

__all__ = [
    # Commits
    "Author",
    "Commit",
    "compare_commits_by_timestamp",
    "parse_commit",
    "parse_git_log_output",
    "sort_commits",
    # Labels
    "UNRELEASED_LABELS",
    "CommitLabel",
    "get_commit_label",
    # Release
    "ReleaseChanges",
    "ReleaseObject",
    "extract_version_from_commit",
    "get_release_object",
    "init_release_object",
    # Version
    "ReleaseType",
    "Version",
    "parse_version",
    # Changelog
    "render_release",
]
