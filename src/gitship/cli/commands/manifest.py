"""Implementation of the 'manifest' command.

Builds the deployment manifest for a project tree and prints the
deployment request together with the files that still need uploading.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING

from rich.table import Table

from gitship.config import load_config
from gitship.deploy.request import build_deployment_request
from gitship.exceptions import GitShipError

if TYPE_CHECKING:
    from rich.console import Console


def run_manifest(
    path: str | None,
    entry: str | None,
    exclude: str | None,
    known_hashes_file: str | None,
    production: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the manifest command.

    Args:
        path: Optional path to project directory
        entry: Entry point relative to the project, overrides config
        exclude: Extra comma-separated exclusion patterns
        known_hashes_file: File listing blob ids the remote already has,
            one per line
        production: Mark the request as a production deployment
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
    except GitShipError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    entry_point = entry or config.deploy.entry
    if not entry_point:
        err_console.print(
            "[red]Error:[/] No entry point. Pass one or set "
            "[cyan]entry[/] in [tool.gitship.deploy]."
        )
        raise SystemExit(1)

    exclusions = [config.deploy.exclusions, exclude or ""]
    try:
        known = _read_known_hashes(Path(known_hashes_file)) if known_hashes_file else []
    except OSError as e:
        err_console.print(f"[red]Error reading known hashes:[/] {e}")
        raise SystemExit(1) from e

    try:
        request, uploads = build_deployment_request(
            project_path,
            entry_point,
            exclusions=",".join(exclusions),
            import_map=config.deploy.import_map,
            production=production or config.deploy.production,
            known_hashes=known,
            include_symlinks=config.deploy.include_symlinks,
        )
    except re.error as e:
        err_console.print(f"[red]Invalid exclusion pattern:[/] {e}")
        raise SystemExit(1) from e
    except GitShipError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print_json(json.dumps(request.to_dict()))

    table = Table(title=f"Uploads ({len(uploads)} of {len(request.manifest.files)} blobs)")
    table.add_column("Blob", style="cyan", no_wrap=True)
    table.add_column("Path")
    for upload in uploads:
        table.add_row(upload.git_sha1[:12], str(upload.path.relative_to(project_path)))
    err_console.print(table)


def _read_known_hashes(path: Path) -> list[str]:
    return [line.strip() for line in path.read_text().splitlines() if line.strip()]
