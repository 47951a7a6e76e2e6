"""Markdown changelog rendering for release objects.

A release renders as one ``## [version]`` section with a ``###`` heading
per non-empty label, in the fixed label order. The compare link is built
from the previous tag, which is a commit hash for the first release.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from gitship.core.commits import strip_emoji_codes
from gitship.core.labels import CommitLabel

if TYPE_CHECKING:
    from gitship.core.commits import Commit
    from gitship.core.release import ReleaseObject

LABEL_HEADINGS: dict[CommitLabel, str] = {
    CommitLabel.BREAKING_CHANGES: "### ⚠️ Breaking Changes",
    CommitLabel.ADDED: "### ✨ Added",
    CommitLabel.SECURITY: "### 🔒 Security",
    CommitLabel.FIXED: "### 🐛 Fixed",
    CommitLabel.REMOVED: "### 🔥 Removed",
    CommitLabel.DEPRECATED: "### 🗑️ Deprecated",
    CommitLabel.CHANGED: "### ♻️ Changed",
    CommitLabel.MISCELLANEOUS: "### 📝 Miscellaneous",
}


def format_commit_for_changelog(
    commit: Commit,
    *,
    strip_codes: bool = False,
    include_sha: bool = True,
) -> str:
    """Format a commit as a changelog bullet.

    Args:
        commit: Commit to format
        strip_codes: Remove ``:code:`` markers from the subject
        include_sha: Append the short hash

    Returns:
        A single Markdown list item
    """
    subject = strip_emoji_codes(commit.subject) if strip_codes else commit.subject
    line = f"- {subject}"
    if include_sha:
        line += f" ({commit.id})"
    return line


def compare_url(release: ReleaseObject) -> str | None:
    """GitHub compare URL between the previous and the new tag."""
    if not release.owner or not release.name or not release.previous_tag:
        return None
    return (
        f"https://github.com/{release.owner}/{release.name}"
        f"/compare/{release.previous_tag}...{release.tag}"
    )


def render_release(
    release: ReleaseObject,
    *,
    strip_codes: bool = False,
    release_date: date | None = None,
) -> str:
    """Render a release object as a Markdown changelog section.

    Args:
        release: Assembled release
        strip_codes: Remove ``:code:`` markers from commit subjects
        release_date: Date shown in the heading, today (UTC) by default

    Returns:
        Changelog section; it only holds the heading when nothing changed
    """
    when = release_date or datetime.now(UTC).date()
    lines = [f"## [{release.version}] - {when.isoformat()}", ""]

    for changes in release.non_empty_changes():
        lines.append(LABEL_HEADINGS[changes.label])
        lines.append("")
        for commit in changes.commits:
            lines.append(format_commit_for_changelog(commit, strip_codes=strip_codes))
        lines.append("")

    url = compare_url(release)
    if url:
        lines.append(f"[{release.version}]: {url}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def prepend_to_changelog(existing: str, section: str) -> str:
    """Insert a new section above earlier releases, below any title."""
    if not existing.strip():
        return f"# Changelog\n\n{section}"

    marker = existing.find("\n## ")
    if existing.startswith("## "):
        return f"{section}\n{existing}"
    if marker == -1:
        return f"{existing.rstrip()}\n\n{section}"
    return f"{existing[: marker + 1]}{section}\n{existing[marker + 1 :]}"
