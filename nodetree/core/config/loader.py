"""
Configuration loader — project discovery and optional CLI settings.

A project is any directory holding an ``s-project.json`` file.  Next
to it, an optional ``nodetree.yml`` carries defaults for the CLI
(stage, region, log level).  It is read with PyYAML and validated
against a Pydantic schema.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

# Default config filenames
PROJECT_FILE = "s-project.json"
SETTINGS_FILE = "nodetree.yml"


class ConfigError(Exception):
    """Raised when configuration is invalid, missing, or incomplete."""


class Settings(BaseModel):
    """Optional per-project defaults read from nodetree.yml."""

    stage: str | None = None
    region: str | None = None
    log_level: str | None = None


def find_project_file(start_dir: Path | None = None) -> Path | None:
    """Search for s-project.json starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to s-project.json, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / PROJECT_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def find_project_root(start_dir: Path | None = None) -> Path | None:
    """Directory containing s-project.json, or None."""
    found = find_project_file(start_dir)
    return found.parent if found else None


def load_project(root: Path) -> dict[str, Any]:
    """Read the project document at *root*.

    Raises:
        ConfigError: If the file is missing or not a JSON object.
    """
    path = root / PROJECT_FILE
    if not path.is_file():
        raise ConfigError(f"Project file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")

    logger.debug("Loaded project document from %s", path)
    return data


def load_settings(root: Path | None) -> Settings:
    """Load nodetree.yml from the project root.

    A missing file yields default settings.

    Raises:
        ConfigError: If the file exists but is malformed.
    """
    if root is None:
        return Settings()

    path = root / SETTINGS_FILE
    if not path.is_file():
        return Settings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.debug("Loaded settings from %s", path)
    return settings
