"""gitship command line application."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from gitship import __version__
from gitship.cli.commands.changelog import run_changelog
from gitship.cli.commands.manifest import run_manifest
from gitship.core.version import ReleaseType

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="gitship",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Gitmoji release notes and content-addressed deployment manifests.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
    )


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: Annotated[bool, typer.Option("--version", help="Show version and exit.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    _configure_logging(verbose)


@app.command()
def changelog(
    path: Annotated[str | None, typer.Argument(help="Project directory.")] = None,
    bump: Annotated[
        ReleaseType | None,
        typer.Option("--bump", "-b", help="Increment applied to the current version."),
    ] = None,
    version: Annotated[
        str | None, typer.Option("--version", help="Release this exact version.")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the release as JSON.")] = False,
    write: Annotated[bool, typer.Option("--write", "-w", help="Update the changelog file.")] = False,
) -> None:
    """Assemble the next release from gitmoji commits."""
    run_changelog(path, bump, version, as_json, write, console, err_console)


@app.command()
def manifest(
    entry: Annotated[str | None, typer.Argument(help="Entry point, relative to the project.")] = None,
    path: Annotated[str | None, typer.Option("--path", "-p", help="Project directory.")] = None,
    exclude: Annotated[
        str | None, typer.Option("--exclude", "-e", help="Comma-separated regex exclusions.")
    ] = None,
    known: Annotated[
        str | None, typer.Option("--known", help="File of blob ids the remote already has.")
    ] = None,
    production: Annotated[bool, typer.Option("--production", help="Production deploy.")] = False,
) -> None:
    """Build the deployment manifest for a project tree."""
    run_manifest(path, entry, exclude, known, production, console, err_console)


def main() -> None:
    app()
