"""Release assembly from gitmoji commits.

Commits are walked most recent first and filed under their changelog label
until the previous release commit (``:bookmark:``) is reached. That commit's
tag gives the previous version; everything older belongs to earlier
releases.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from gitship.core.commits import Commit
from gitship.core.labels import UNRELEASED_LABELS, CommitLabel, get_commit_label, is_release_label
from gitship.core.version import TAG_PREFIX

logger = logging.getLogger(__name__)

RELEASE_REF_PREFIX = f"tag: {TAG_PREFIX}"

FirstCommitProvider = Callable[[], Commit]


@dataclass
class ReleaseChanges:
    """Commits filed under one changelog label."""

    label: CommitLabel
    commits: list[Commit] = field(default_factory=list)


@dataclass
class ReleaseObject:
    """Description of a release handed to changelog rendering.

    Attributes:
        owner: Repository owner (e.g. GitHub user name)
        name: Project name
        version: Version being released
        tag: Tag name for ``version``
        previous: Previous release version, or the first commit hash when
            there is no previous release
        previous_tag: Tag of the previous release, or the first commit hash
        changes: One entry per unreleased label, in changelog order
    """

    version: str
    owner: str = ""
    name: str = ""
    previous: str = ""
    previous_tag: str = ""
    changes: dict[CommitLabel, ReleaseChanges] = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return f"{TAG_PREFIX}{self.version}"

    @property
    def is_first_release(self) -> bool:
        return not self.previous_tag.startswith(TAG_PREFIX)

    def non_empty_changes(self) -> list[ReleaseChanges]:
        return [changes for changes in self.changes.values() if changes.commits]

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner": self.owner,
            "name": self.name,
            "version": self.version,
            "tag": self.tag,
            "previous": self.previous,
            "previousTag": self.previous_tag,
            "changes": {
                str(label): {
                    "label": str(changes.label),
                    "commits": [commit.model_dump(mode="json") for commit in changes.commits],
                }
                for label, changes in self.changes.items()
            },
        }


def init_release_object(
    version: str,
    previous: str = "",
    *,
    owner: str = "",
    name: str = "",
) -> ReleaseObject:
    """Create a release object with every label bucket present and empty."""
    return ReleaseObject(
        version=version,
        owner=owner,
        name=name,
        previous=previous,
        changes={label: ReleaseChanges(label=label) for label in UNRELEASED_LABELS},
    )


def extract_version_from_commit(commit: Commit) -> str:
    """Get the version from a release commit's ``tag: vX.Y.Z`` ref."""
    return commit.ref.replace(RELEASE_REF_PREFIX, "")


def get_release_object(
    version: str,
    commits: Iterable[Commit],
    *,
    first_commit: FirstCommitProvider,
    owner: str = "",
    name: str = "",
) -> ReleaseObject:
    """Build the release object for ``version`` from recent commits.

    Args:
        version: Version being released
        commits: Commits sorted most recent first
        first_commit: Returns the repository's first commit; only called
            when no previous release commit is found
        owner: Repository owner
        name: Project name

    Returns:
        The release object. When there is no previous release, both
        ``previous`` and ``previous_tag`` hold the first commit's hash.

    Raises:
        NoMarkerError: If a commit before the release boundary has no
            ``:code:`` marker
    """
    release = init_release_object(version, owner=owner, name=name)

    for commit in commits:
        label = get_commit_label(commit.subject)

        if is_release_label(label):
            release.previous = extract_version_from_commit(commit)
            release.previous_tag = f"{TAG_PREFIX}{release.previous}"
            logger.debug("Found previous release %s at %s", release.previous_tag, commit.id)
            break

        release.changes[label].commits.append(commit)

    if release.previous == "":
        root = first_commit()
        logger.debug("No previous release; falling back to first commit %s", root.hash)
        release.previous = root.hash
        release.previous_tag = root.hash

    return release
