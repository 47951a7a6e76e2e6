"""Content-addressed deployment manifests.

A manifest describes a project tree by name, kind and content hash without
embedding file bytes. File hashes are git blob ids (SHA-1 over
``b"blob <size>\\0" + content``), so a deployment service that already
holds a blob can skip the upload. Building a manifest never touches the
network; the side table of ``hash -> path`` tells the caller where to read
the bytes the remote is missing.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Literal

from gitship.exceptions import ManifestReadError

logger = logging.getLogger(__name__)

DEFAULT_EXCLUSIONS: tuple[str, ...] = (r"^\.git", r"^\.vscode", r"(^|/)\.env")

# Directories with this in their name are never walked, even when not excluded.
VCS_DIR_MARKER = ".git"


@dataclass(frozen=True)
class ManifestFile:
    git_sha1: str
    size: int
    kind: Literal["file"] = "file"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "gitSha1": self.git_sha1, "size": self.size}


@dataclass(frozen=True)
class ManifestDirectory:
    entries: dict[str, ManifestEntry] = field(default_factory=dict)
    kind: Literal["directory"] = "directory"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "entries": {name: entry.to_dict() for name, entry in self.entries.items()},
        }


@dataclass(frozen=True)
class ManifestSymlink:
    target: str
    kind: Literal["symlink"] = "symlink"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "target": self.target}


ManifestEntry = ManifestFile | ManifestDirectory | ManifestSymlink


@dataclass
class Manifest:
    """Result of a manifest build.

    Attributes:
        entries: Top-level entries by name
        files: Side table mapping each content hash to one file with that
            content
    """

    entries: dict[str, ManifestEntry] = field(default_factory=dict)
    files: dict[str, Path] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"entries": {name: entry.to_dict() for name, entry in self.entries.items()}}

    def iter_files(self) -> Iterable[tuple[str, ManifestFile]]:
        """Yield ``(relative path, file entry)`` for every file, depth first."""
        yield from _iter_files(self.entries, PurePosixPath())


def calculate_git_sha1(data: bytes) -> str:
    """Git blob id of ``data``."""
    digest = hashlib.sha1(usedforsecurity=False)
    digest.update(f"blob {len(data)}\0".encode())
    digest.update(data)
    return digest.hexdigest()


def parse_exclusions(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated exclusion setting into regex fragments."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [part.strip() for part in parts if part and part.strip()]


def compile_exclusions(extra: str | Iterable[str] | None = None) -> re.Pattern[str]:
    """Combine the built-in exclusions with user fragments into one pattern.

    Raises:
        re.error: If a fragment is not a valid regular expression
    """
    fragments = [*DEFAULT_EXCLUSIONS, *parse_exclusions(extra)]
    return re.compile("|".join(f"(?:{fragment})" for fragment in fragments))


def build_manifest(
    root: Path | str,
    exclusions: re.Pattern[str] | str | Iterable[str] | None = None,
    *,
    include_symlinks: bool = False,
) -> Manifest:
    """Walk ``root`` and describe every non-excluded file.

    Exclusion patterns are searched in each entry's path relative to
    ``root`` (POSIX separators, no leading ``./``). Excluded directories
    are not descended into. Entries are visited in name order, so the
    result does not depend on the file system's listing order.

    Args:
        root: Directory to describe
        exclusions: Compiled pattern, or fragments to combine with the
            built-in exclusions
        include_symlinks: Record symlinks as symlink entries instead of
            skipping them; links are never followed

    Returns:
        The manifest and its ``hash -> path`` side table

    Raises:
        ManifestReadError: If a file or directory cannot be read
    """
    root_path = Path(root)
    pattern = exclusions if isinstance(exclusions, re.Pattern) else compile_exclusions(exclusions)
    manifest = Manifest()
    manifest.entries = _walk(
        root_path,
        PurePosixPath(),
        pattern,
        manifest.files,
        include_symlinks=include_symlinks,
    )
    logger.debug("Built manifest for %s: %d unique blob(s)", root_path, len(manifest.files))
    return manifest


def _walk(
    directory: Path,
    relative: PurePosixPath,
    pattern: re.Pattern[str],
    files: dict[str, Path],
    *,
    include_symlinks: bool,
) -> dict[str, ManifestEntry]:
    entries: dict[str, ManifestEntry] = {}

    try:
        with os.scandir(directory) as it:
            dir_entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise ManifestReadError(directory, reason=e.strerror) from e

    for dir_entry in dir_entries:
        rel_path = relative / dir_entry.name
        if pattern.search(str(rel_path)):
            logger.debug("Excluding %s", rel_path)
            continue

        path = Path(dir_entry.path)
        if dir_entry.is_symlink():
            if include_symlinks:
                try:
                    target = os.readlink(path)
                except OSError as e:
                    raise ManifestReadError(path, reason=e.strerror) from e
                entries[dir_entry.name] = ManifestSymlink(target=target)
        elif dir_entry.is_file():
            entries[dir_entry.name] = _describe_file(path, files)
        elif dir_entry.is_dir():
            if VCS_DIR_MARKER in dir_entry.name:
                continue
            entries[dir_entry.name] = ManifestDirectory(
                entries=_walk(path, rel_path, pattern, files, include_symlinks=include_symlinks)
            )

    return entries


def _describe_file(path: Path, files: dict[str, Path]) -> ManifestFile:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ManifestReadError(path, reason=e.strerror) from e

    git_sha1 = calculate_git_sha1(data)
    files.setdefault(git_sha1, path)
    return ManifestFile(git_sha1=git_sha1, size=len(data))


def _iter_files(
    entries: dict[str, ManifestEntry], prefix: PurePosixPath
) -> Iterable[tuple[str, ManifestFile]]:
    for name, entry in entries.items():
        if isinstance(entry, ManifestFile):
            yield str(prefix / name), entry
        elif isinstance(entry, ManifestDirectory):
            yield from _iter_files(entry.entries, prefix / name)
