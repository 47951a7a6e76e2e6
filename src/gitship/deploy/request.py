"""Deployment request assembly.

A deployment request embeds the manifest verbatim and names the entry
point. File bytes are attached separately, and only for blobs the remote
does not hold yet.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gitship.deploy.manifest import Manifest, build_manifest

logger = logging.getLogger(__name__)

SOURCE_ROOT_URL = "file:///src/"


@dataclass(frozen=True)
class Upload:
    git_sha1: str
    path: Path

    def read(self) -> bytes:
        return self.path.read_bytes()


@dataclass
class DeploymentRequest:
    url: str
    manifest: Manifest
    import_map_url: str | None = None
    production: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "importMapUrl": self.import_map_url,
            "production": self.production,
            "manifest": self.manifest.to_dict(),
        }


def source_url(relative_path: str) -> str:
    return SOURCE_ROOT_URL + relative_path.removeprefix("./")


def select_uploads(manifest: Manifest, known_hashes: Iterable[str] = ()) -> list[Upload]:
    """Files whose content the remote does not have, in manifest order."""
    known = set(known_hashes)
    return [
        Upload(git_sha1=git_sha1, path=path)
        for git_sha1, path in manifest.files.items()
        if git_sha1 not in known
    ]


def build_deployment_request(
    root: Path | str,
    entry: str,
    *,
    exclusions: str | Iterable[str] | None = None,
    import_map: str | None = None,
    production: bool = False,
    known_hashes: Iterable[str] = (),
    include_symlinks: bool = False,
) -> tuple[DeploymentRequest, list[Upload]]:
    """Describe ``root`` as a deployment of ``entry``.

    Args:
        root: Project directory
        entry: Entry point path relative to ``root``
        exclusions: Extra exclusion fragments (comma-separated or a list)
        import_map: Import map path relative to ``root``
        production: Deploy to production
        known_hashes: Blob ids the deployment service already stores
        include_symlinks: Record symlinks in the manifest

    Returns:
        The request and the files that must be uploaded with it

    Raises:
        ManifestReadError: If a file cannot be read
    """
    manifest = build_manifest(root, exclusions, include_symlinks=include_symlinks)
    request = DeploymentRequest(
        url=source_url(entry),
        manifest=manifest,
        import_map_url=source_url(import_map) if import_map else None,
        production=production,
    )
    uploads = select_uploads(manifest, known_hashes)
    logger.debug(
        "Deployment of %s needs %d of %d blob(s)", entry, len(uploads), len(manifest.files)
    )
    return request, uploads
