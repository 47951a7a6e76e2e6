"""Tests for release assembly."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gitship.core.commits import parse_git_log_output
from gitship.core.labels import UNRELEASED_LABELS, CommitLabel
from gitship.core.release import (
    extract_version_from_commit,
    get_release_object,
    init_release_object,
)
from gitship.core.version import Version
from gitship.exceptions import NoMarkerError
from tests.conftest import FIRST_COMMIT_HASH


class TestInitReleaseObject:
    """Tests for init_release_object()."""

    def test_all_buckets_present_and_empty(self):
        """Every unreleased label starts with an empty bucket."""
        release = init_release_object("1.0.0")

        assert list(release.changes) == list(UNRELEASED_LABELS)
        assert all(changes.commits == [] for changes in release.changes.values())
        assert all(label == changes.label for label, changes in release.changes.items())

    def test_tag_and_defaults(self):
        release = init_release_object("1.2.3")

        assert release.version == "1.2.3"
        assert release.tag == "v1.2.3"
        assert release.previous == ""
        assert release.previous_tag == ""
        assert release.owner == ""

    def test_buckets_are_independent(self):
        """Each release gets its own lists."""
        a = init_release_object("1.0.0")
        b = init_release_object("1.0.0")
        a.changes[CommitLabel.ADDED].commits.append(MagicMock())

        assert b.changes[CommitLabel.ADDED].commits == []


class TestExtractVersionFromCommit:
    """Tests for extract_version_from_commit()."""

    @pytest.mark.parametrize("version", ["1.0.1", "1.1.0", "1.0.0"])
    def test_strips_tag_prefix(self, make_commit, version: str):
        commit = make_commit(":bookmark: Release", ref=f"tag: v{version}")

        assert extract_version_from_commit(commit) == version


class TestGetReleaseObject:
    """Tests for get_release_object()."""

    def test_release_commit_sets_previous(self, make_commit):
        """The release commit's tag becomes the previous version."""
        first_commit = MagicMock()
        release = get_release_object(
            "1.0.0",
            [
                make_commit(":sparkles: New"),
                make_commit(":bug: Fix"),
                make_commit(":bookmark: Release v0.1.0", ref="tag: v0.1.0"),
                make_commit(":sparkles: Older"),
            ],
            first_commit=first_commit,
        )

        assert release.previous == "0.1.0"
        assert release.previous_tag == "v0.1.0"
        first_commit.assert_not_called()

    def test_commits_after_boundary_excluded(self, make_commit):
        """The release commit and everything older stay out of the buckets."""
        release = get_release_object(
            "1.0.0",
            [
                make_commit(":sparkles: New"),
                make_commit(":bookmark: Release v0.1.0", ref="tag: v0.1.0"),
                make_commit(":sparkles: Older"),
                make_commit("no marker at all"),
            ],
            first_commit=MagicMock(),
        )

        added = release.changes[CommitLabel.ADDED].commits
        assert [c.subject for c in added] == [":sparkles: New"]
        assert sum(len(c.commits) for c in release.changes.values()) == 1

    def test_no_release_falls_back_to_first_commit(self, first_commit):
        """Without a release commit, the first commit hash is used for both fields."""
        provider = MagicMock(return_value=first_commit)

        release = get_release_object("1.0.0", [], first_commit=provider)

        provider.assert_called_once_with()
        assert release.previous == FIRST_COMMIT_HASH
        # The fallback tag is a raw hash, not a "v"-prefixed tag.
        assert release.previous_tag == FIRST_COMMIT_HASH
        assert release.is_first_release

    def test_always_eight_buckets(self, make_commit, first_commit):
        """Buckets exist even when no commit falls into them."""
        release = get_release_object(
            "1.0.0",
            [make_commit(":bug: Only a fix")],
            first_commit=lambda: first_commit,
        )

        assert len(release.changes) == 8
        assert CommitLabel.RELEASE not in release.changes
        assert len(release.changes[CommitLabel.FIXED].commits) == 1
        assert release.changes[CommitLabel.SECURITY].commits == []

    def test_bucket_order_is_visit_order(self, make_commit, first_commit):
        """Commits keep their most-recent-first order within a bucket."""
        commits = [make_commit(f":sparkles: Feature {n}") for n in range(3)]

        release = get_release_object("1.0.0", commits, first_commit=lambda: first_commit)

        assert release.changes[CommitLabel.ADDED].commits == commits

    def test_unknown_codes_go_to_miscellaneous(self, make_commit, first_commit):
        release = get_release_object(
            "1.0.0",
            [make_commit(":rainbow_flag: Pride theme")],
            first_commit=lambda: first_commit,
        )

        assert len(release.changes[CommitLabel.MISCELLANEOUS].commits) == 1

    def test_missing_marker_raises(self, make_commit, first_commit):
        """Commits before the boundary must carry a marker."""
        with pytest.raises(NoMarkerError):
            get_release_object(
                "1.0.0",
                [make_commit("Plain message")],
                first_commit=lambda: first_commit,
            )

    def test_owner_and_name(self, first_commit):
        release = get_release_object(
            "1.0.0",
            [],
            first_commit=lambda: first_commit,
            owner="octocat",
            name="hello-world",
        )

        assert release.owner == "octocat"
        assert release.name == "hello-world"

    def test_to_dict(self, make_commit):
        release = get_release_object(
            "1.1.0",
            [
                make_commit(":lock: Patch CVE"),
                make_commit(":bookmark: Release", ref="tag: v1.0.0"),
            ],
            first_commit=MagicMock(),
        )

        data = release.to_dict()

        assert data["tag"] == "v1.1.0"
        assert data["previousTag"] == "v1.0.0"
        assert list(data["changes"]) == [str(label) for label in UNRELEASED_LABELS]
        assert data["changes"]["Security"]["commits"][0]["subject"] == ":lock: Patch CVE"


class TestEndToEnd:
    """Log text through parsing and assembly."""

    def test_three_commit_release(self, release_log_output: str):
        """A feature, a fix and the previous release produce the next release."""
        commits = parse_git_log_output(release_log_output)
        next_version = Version.parse("1.0.0").next_minor()

        release = get_release_object(str(next_version), commits, first_commit=MagicMock())

        assert release.version == "1.1.0"
        assert release.tag == "v1.1.0"
        assert len(release.changes[CommitLabel.ADDED].commits) == 1
        assert len(release.changes[CommitLabel.FIXED].commits) == 1
        assert release.previous == "1.0.0"
        assert release.previous_tag == "v1.0.0"
        assert not release.is_first_release
