"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of PlasticConfig to/from
TOML format.
"""

import os
import platform
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from plastic_shell.domain.config import PlasticConfig

LOCAL_CONFIG_FILENAME = "plastic-shell.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/plastic-shell/config.toml or ~/.config/plastic-shell/config.toml
    - Windows: %APPDATA%/plastic-shell/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "plastic-shell" / "config.toml"
        return Path.home() / ".config" / "plastic-shell" / "config.toml"

    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "plastic-shell" / "config.toml"
    return Path.home() / ".config" / "plastic-shell" / "config.toml"


def get_local_config_path(workspace_root: Path) -> Path:
    """Get the path to the per-workspace config file."""
    return workspace_root / LOCAL_CONFIG_FILENAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to a TOML config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: PlasticConfig) -> dict[str, Any]:
    """Convert a PlasticConfig to TOML-ready section dictionaries."""
    return {
        "shell": {
            "binary_path": config.shell.binary_path,
            "activity_timeout": config.shell.activity_timeout,
            "exit_wait": config.shell.exit_wait,
        },
        "workspace": {
            "root": config.workspace.root,
        },
    }


def load_config(path: Path) -> PlasticConfig:
    """Load configuration from a TOML file on top of defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    return PlasticConfig.from_partial(PlasticConfig.default(), load_config_data(path))


def save_config(config: PlasticConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: PlasticConfig to save
        path: Destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
