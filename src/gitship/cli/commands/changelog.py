"""Implementation of the 'changelog' command.

The changelog command assembles the release for the next version from the
git history and prints (or writes) its changelog section.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from gitship.config import load_config
from gitship.config.loader import get_project_version
from gitship.core.changelog import prepend_to_changelog, render_release
from gitship.core.release import get_release_object
from gitship.core.version import ReleaseType, Version
from gitship.exceptions import GitShipError
from gitship.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from gitship.core.release import ReleaseObject

logger = logging.getLogger(__name__)


def run_changelog(
    path: str | None,
    release_type: ReleaseType | None,
    version_override: str | None,
    as_json: bool,
    write: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog command.

    Args:
        path: Optional path to project directory
        release_type: Increment to apply to the current version
        version_override: Explicit version for the release (e.g. "2.0.0")
        as_json: Print the release object as JSON instead of Markdown
        write: Prepend the section to the configured changelog file
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        repo = GitRepository(project_path)
        next_version = _next_version(
            project_path,
            version_override,
            release_type or config.default_release_type,
        )
        commits = repo.retrieve_all_commits()
        release = get_release_object(
            str(next_version),
            commits,
            first_commit=repo.retrieve_first_commit,
            owner=config.owner,
            name=config.name or "",
        )
    except GitShipError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    logger.info(
        "Assembled %s from %d commit(s) since %s",
        release.tag,
        sum(len(c.commits) for c in release.changes.values()),
        release.previous_tag,
    )

    if as_json:
        console.print_json(json.dumps(release.to_dict()))
        return

    section = render_release(release, strip_codes=config.changelog.strip_emoji_codes)

    if not write:
        console.print(section, markup=False, highlight=False, emoji=False)
        return

    if not config.changelog.enabled:
        err_console.print("[yellow]Changelog is disabled in [tool.gitship.changelog].[/]")
        return

    changelog_path = project_path / config.changelog.path
    try:
        existing = changelog_path.read_text(encoding="utf-8") if changelog_path.exists() else ""
        changelog_path.write_text(prepend_to_changelog(existing, section), encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Error updating {changelog_path}:[/] {e}")
        raise SystemExit(1) from e
    console.print(_summary_panel(release, config.changelog.path))


def _next_version(
    project_path: Path,
    version_override: str | None,
    release_type: ReleaseType,
) -> Version:
    if version_override:
        return Version.parse(version_override)
    current = Version.parse(get_project_version(project_path))
    return current.bump(release_type)


def _summary_panel(release: ReleaseObject, changelog_path: Path) -> Panel:
    counts = "\n".join(
        f"  • {changes.label}: {len(changes.commits)}" for changes in release.non_empty_changes()
    )
    return Panel(
        f"[green]Wrote {release.tag} to {changelog_path}[/]\n\n"
        f"Previous release: [cyan]{release.previous_tag}[/]\n"
        f"{counts or '  (no changes)'}",
        title="[green]Changelog Updated[/]",
        border_style="green",
    )
