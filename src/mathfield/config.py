#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/config.py
"""Configuration file discovery and loading.

Options can be stored in ``.mathfield.toml``, ``.mathfield.yaml``,
``.mathfield.yml``, ``.mathfield.json``, or a ``[tool.mathfield]`` table in
``pyproject.toml``. Discovery walks from the working directory up to the
filesystem root and then falls back to the user's home directory.

Example ``.mathfield.toml``::

    left_right_into_cmd_goes = "up"
    unknown_commands = "text"
    auto_exit_styles = ["\\\\mathbb"]

"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from mathfield.constants import CONFIG_FILENAMES, PYPROJECT_SECTION
from mathfield.exceptions import ConfigError, ValidationError
from mathfield.options import EditorOptions

logger = logging.getLogger(__name__)


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.mathfield]`` table from a pyproject.toml file.

    Returns
    -------
    dict
        The table, or an empty dict when the file has none

    Raises
    ------
    ConfigError
        If the file is not valid TOML or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {e}", str(pyproject_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading {pyproject_path}: {e}", str(pyproject_path), e) from e

    section = data.get("tool", {}).get(PYPROJECT_SECTION)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_SECTION}] in {pyproject_path} must be a table, got {type(section).__name__}",
            str(pyproject_path),
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Each directory is checked for the dedicated config files in priority
    order, then for a ``pyproject.toml`` containing a ``[tool.mathfield]``
    table.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigError as e:
                logger.debug("Skipping unreadable %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Searches parent directories first (see ``find_config_in_parents``), then
    the user's home directory.

    """
    found = find_config_in_parents(start_dir)
    if found is not None:
        return found

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path
    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML, or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    ConfigError
        If the file cannot be read, parsed, or has an unsupported format

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigError(f"Configuration file does not exist: {config_path}", str(config_path))

    ext = config_path.suffix.lower()
    if config_path.name.lower() == "pyproject.toml":
        return _load_pyproject_section(config_path)

    try:
        if ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise ConfigError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml", str(config_path))
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}", str(config_path), e) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"Config file {config_path} must contain a mapping at root level, got {type(config).__name__}",
            str(config_path),
        )
    return config


def options_from_config(config: Dict[str, Any], base: Optional[EditorOptions] = None) -> EditorOptions:
    """Build editor options from a configuration mapping.

    Parameters
    ----------
    config : dict
        Keys are ``EditorOptions`` field names
    base : EditorOptions, optional
        Options to update; defaults to ``EditorOptions()``

    Returns
    -------
    EditorOptions
        Options with the configured values applied

    Raises
    ------
    ConfigError
        If the mapping contains unknown keys or invalid values

    """
    base = base or EditorOptions()
    known = set(EditorOptions.field_names())
    unknown = sorted(set(config) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
    try:
        return base.create_updated(**config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e.message}", original_error=e) from e


def load_options(explicit_path: Optional[str] = None, start_dir: Optional[Path] = None) -> EditorOptions:
    """Load editor options from an explicit file or by discovery.

    Parameters
    ----------
    explicit_path : str, optional
        Config file given on the command line; skips discovery
    start_dir : Path, optional
        Directory discovery starts from

    Returns
    -------
    EditorOptions
        Configured options, or defaults when no config file exists

    """
    path: Optional[Path]
    path = Path(explicit_path) if explicit_path else discover_config_file(start_dir)
    if path is None:
        return EditorOptions()
    logger.debug("Loading configuration from %s", path)
    return options_from_config(load_config_file(path))
