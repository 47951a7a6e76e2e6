"""Tests for deployment request assembly."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitship.deploy.manifest import build_manifest, calculate_git_sha1
from gitship.deploy.request import (
    build_deployment_request,
    select_uploads,
    source_url,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_source_url():
    assert source_url("main.py") == "file:///src/main.py"
    assert source_url("./app/main.py") == "file:///src/app/main.py"
    assert source_url(".well-known/x") == "file:///src/.well-known/x"


class TestSelectUploads:
    """Tests for select_uploads()."""

    def test_all_uploads_when_remote_empty(self, project_dir: Path):
        manifest = build_manifest(project_dir)

        uploads = select_uploads(manifest)

        assert {u.git_sha1 for u in uploads} == set(manifest.files)

    def test_known_hashes_skipped(self, project_dir: Path):
        manifest = build_manifest(project_dir)
        known = calculate_git_sha1((project_dir / "main.py").read_bytes())

        uploads = select_uploads(manifest, [known])

        assert known not in {u.git_sha1 for u in uploads}
        assert len(uploads) == len(manifest.files) - 1

    def test_upload_reads_bytes(self, project_dir: Path):
        manifest = build_manifest(project_dir)
        upload = next(u for u in select_uploads(manifest) if u.path.name == "main.py")

        assert upload.read() == b"print('hello')\n"


class TestBuildDeploymentRequest:
    """Tests for build_deployment_request()."""

    def test_request_payload(self, project_dir: Path):
        request, uploads = build_deployment_request(
            project_dir,
            "main.py",
            exclusions="^docs",
            import_map="import-map.json",
            production=True,
        )

        data = request.to_dict()
        assert data["url"] == "file:///src/main.py"
        assert data["importMapUrl"] == "file:///src/import-map.json"
        assert data["production"] is True
        assert set(data["manifest"]["entries"]) == {"main.py", "lib", "pyproject.toml"}
        assert len(uploads) == 3

    def test_no_import_map(self, project_dir: Path):
        request, _ = build_deployment_request(project_dir, "main.py")

        assert request.to_dict()["importMapUrl"] is None
        assert request.production is False

    def test_manifest_embedded_verbatim(self, project_dir: Path):
        request, _ = build_deployment_request(project_dir, "main.py")

        assert request.to_dict()["manifest"] == build_manifest(project_dir).to_dict()

    def test_known_hashes_reduce_uploads(self, project_dir: Path):
        manifest = build_manifest(project_dir)

        _, uploads = build_deployment_request(
            project_dir, "main.py", known_hashes=manifest.files.keys()
        )

        assert uploads == []
