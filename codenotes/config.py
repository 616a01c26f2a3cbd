"""Resolve where notes live and how they are presented."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from attrs import define

from codenotes.errors import ConfigError

JSONDict = dict[str, Any]

# Environment variables overriding the configuration file.
ENV_NOTES_DIR = "CODENOTES_DIR"
ENV_CONFIG_FILE = "CODENOTES_CONFIG"

# Per-user directory holding the configuration and the default note store.
CONFIG_DIR = Path.home() / ".codenotes"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "config.yaml"
DEFAULT_NOTES_DIR = CONFIG_DIR / "notes"


@define(slots=True)
class Settings:
    """Effective configuration of a note store.

    Attributes:
        notes_dir: Directory holding the note documents.
        extension: File extension identifying note documents.
        preview_length: Maximum length of code previews in search results.
    """

    notes_dir: Path
    extension: str = ".md"
    preview_length: int = 80


def expand_path(value: str) -> Path:
    """Expand a leading ``~`` and return ``value`` as an absolute path."""

    if value.startswith("~"):
        value = str(Path.home()) + value[1:]
    return Path(value).resolve()


def load_config_file(path: Path) -> JSONDict:
    """Read the YAML configuration file at ``path``.

    Args:
        path: Location of the configuration file.

    Returns:
        The configuration mapping; empty when the file does not exist.

    Throws:
        ConfigError: If the file is not valid YAML or not a mapping.
    """

    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid configuration file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must hold a mapping")
    return data


def load_settings(
    notes_dir: str | None = None, config_file: str | None = None
) -> Settings:
    """Build the effective settings.

    The note store directory is taken from ``notes_dir``, then the
    ``CODENOTES_DIR`` environment variable, then the ``notes_directory`` key
    of the configuration file and finally ``~/.codenotes/notes``.

    Args:
        notes_dir: Explicit note store directory.
        config_file: Explicit configuration file path.

    Returns:
        Resolved ``Settings``.
    """

    config_path = (
        expand_path(config_file)
        if config_file
        else expand_path(os.environ[ENV_CONFIG_FILE])
        if os.environ.get(ENV_CONFIG_FILE, "").strip()
        else DEFAULT_CONFIG_FILE
    )
    config = load_config_file(config_path)

    # Pick the first non-blank candidate for the store directory.
    candidates = (
        notes_dir,
        os.environ.get(ENV_NOTES_DIR),
        config.get("notes_directory"),
    )
    chosen = next(
        (str(c) for c in candidates if c is not None and str(c).strip()),
        None,
    )
    directory = expand_path(chosen.strip()) if chosen else DEFAULT_NOTES_DIR

    settings = Settings(notes_dir=directory)
    if config.get("extension"):
        extension = str(config["extension"])
        settings.extension = (
            extension if extension.startswith(".") else f".{extension}"
        )
    if config.get("preview_length") is not None:
        try:
            settings.preview_length = int(config["preview_length"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"preview_length must be an integer in {config_path}"
            ) from exc
    return settings
