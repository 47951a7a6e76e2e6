"""Shared fixtures for gitship tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import TYPE_CHECKING, Any

import pytest

from gitship.core.commits import Author, Commit

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

FIRST_COMMIT_HASH = "4e8037a42326e75c9e68f8b3c39157f8c70a99e3"

_counter = count(1)


def raw_commit(**overrides: Any) -> dict[str, Any]:
    """A commit record as git prints it with the JSON pretty format."""
    n = next(_counter)
    record: dict[str, Any] = {
        "hash": f"{n:040x}",
        "id": f"{n:07x}",
        "timestamp": str(1700000000 + n * 60),
        "author": {"name": "Ada Lovelace", "email": "ada@example.com"},
        "subject": ":sparkles: Add feature",
        "ref": "",
    }
    record.update(overrides)
    return record


def log_output(*records: dict[str, Any]) -> str:
    """Join records the way ``git log`` prints them."""
    return "\n".join(json.dumps(record, ensure_ascii=False) for record in records)


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory for commits; newer calls get older timestamps by default."""
    base = datetime(2024, 1, 31, 12, 0, tzinfo=UTC)
    ids = count(1)

    def factory(subject: str = ":sparkles: Add feature", **overrides: Any) -> Commit:
        n = next(ids)
        fields: dict[str, Any] = {
            "hash": f"{n:040x}",
            "id": f"{n:07x}",
            "timestamp": base - timedelta(hours=n),
            "author": Author(name="Ada Lovelace", email="ada@example.com"),
            "subject": subject,
            "ref": "",
        }
        fields.update(overrides)
        return Commit(**fields)

    return factory


@pytest.fixture
def first_commit(make_commit: Callable[..., Commit]) -> Commit:
    return make_commit(":tada: Add initial files", hash=FIRST_COMMIT_HASH, id="4e8037a")


@pytest.fixture
def release_log_output() -> str:
    """Three commits: a feature, a fix, and the previous release."""
    return log_output(
        raw_commit(subject=":sparkles: A", timestamp="1700000300"),
        raw_commit(subject=":bug: B", timestamp="1700000200"),
        raw_commit(
            subject=":bookmark: Release v1.0.0",
            timestamp="1700000100",
            ref="tag: v1.0.0",
        ),
    )


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with pyproject.toml and a small source tree."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.gitship]
owner = "octocat"

[tool.gitship.deploy]
entry = "main.py"
exclusions = "^docs"
"""
    )
    (tmp_path / "main.py").write_text("print('hello')\n")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "util.py").write_text("VALUE = 1\n")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.md").write_text("# Docs\n")
    return tmp_path
