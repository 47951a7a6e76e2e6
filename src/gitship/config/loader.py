"""Loading gitship configuration from pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gitship.config.models import GitShipConfig
from gitship.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"
TOOL_KEY = "gitship"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or the nearest parent directory.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / PYPROJECT
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No {PYPROJECT} found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"{path} does not exist")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_gitship_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Get the ``[tool.gitship]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def load_config(path: Path | None = None) -> GitShipConfig:
    """Load configuration for the project at ``path``.

    The project name defaults to ``[project].name`` when the gitship table
    does not set one.

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
        ConfigValidationError: If the configuration is invalid
    """
    pyproject_path = find_pyproject_toml(path)
    pyproject = load_pyproject_toml(pyproject_path)
    raw = extract_gitship_config(pyproject)
    logger.debug("Loaded [tool.%s] from %s: %s", TOOL_KEY, pyproject_path, raw)

    try:
        config = GitShipConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_KEY}] in {pyproject_path}:\n{e}") from e

    if config.name is None:
        project_name = pyproject.get("project", {}).get("name")
        if project_name:
            config = config.model_copy(update={"name": project_name})
    return config


def _get_project_field(path: Path | None, key: str) -> str:
    pyproject_path = find_pyproject_toml(path)
    value = load_pyproject_toml(pyproject_path).get("project", {}).get(key)
    if not isinstance(value, str) or not value:
        raise ConfigValidationError(f"[project].{key} is missing in {pyproject_path}")
    return value


def get_project_name(path: Path | None = None) -> str:
    """Get ``[project].name``."""
    return _get_project_field(path, "name")


def get_project_version(path: Path | None = None) -> str:
    """Get ``[project].version``."""
    return _get_project_field(path, "version")
