"""Deployment manifests and request assembly."""

from __future__ import annotations

from gitship.deploy.manifest import (
    DEFAULT_EXCLUSIONS,
    Manifest,
    ManifestDirectory,
    ManifestEntry,
    ManifestFile,
    ManifestSymlink,
    build_manifest,
    calculate_git_sha1,
    compile_exclusions,
)
from gitship.deploy.request import DeploymentRequest, Upload, build_deployment_request

__all__ = [
    "DEFAULT_EXCLUSIONS",
    "DeploymentRequest",
    "Manifest",
    "ManifestDirectory",
    "ManifestEntry",
    "ManifestFile",
    "ManifestSymlink",
    "Upload",
    "build_deployment_request",
    "build_manifest",
    "calculate_git_sha1",
    "compile_exclusions",
]
