"""Git repository access.

Commits are read with ``git log`` using a pretty format that prints one
JSON object per commit; ``gitship.core.commits`` turns that output into
Commit records.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from gitship.core.commits import Commit, parse_git_log_output, sort_commits
from gitship.exceptions import GitError

logger = logging.getLogger(__name__)

COMMIT_FORMAT = {
    "hash": "%H",
    "id": "%h",
    "timestamp": "%ad",
    "author": {
        "name": "%an",
        "email": "%ae",
    },
    "subject": "%s",
    "ref": "%D",
}

PRETTY_FORMAT = f"--pretty=format:{json.dumps(COMMIT_FORMAT, separators=(',', ':'))}"
EPOCH_DATE_FORMAT = "--date=format:%s"


class GitRepository:
    """Thin wrapper running git commands in a working tree."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else Path.cwd()
        if not self.path.is_dir():
            raise GitError(f"Not a directory: {self.path}")

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=True,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout

    def log(self, *args: str) -> str:
        """Raw ``git log`` output in the JSON commit format."""
        return self._run("log", EPOCH_DATE_FORMAT, PRETTY_FORMAT, *args)

    def retrieve_all_commits(self) -> list[Commit]:
        """All commits reachable from any ref, most recent first."""
        return sort_commits(parse_git_log_output(self.log("--tags", "--all")))

    def retrieve_first_commit(self) -> Commit:
        """The oldest commit on the first-parent history of HEAD."""
        commits = sort_commits(parse_git_log_output(self.log("--first-parent")))
        if not commits:
            raise GitError(f"No commits found in {self.path}")
        return commits[-1]
