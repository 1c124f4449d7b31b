"""Per-user configuration path management for fsguard.

On POSIX hosts the configuration directory follows the XDG Base Directory
Specification. On Windows it lives under the local application data folder.

Defaults:
- POSIX: ~/.config/fsguard/ (or $XDG_CONFIG_HOME/fsguard/)
- Windows: %LOCALAPPDATA%\\fsguard\\ (or ~/AppData/Local/fsguard/)
"""

import os
import sys
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "fsguard"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/fsguard/ (or XDG_CONFIG_HOME/fsguard/), or the
        local application data folder on Windows.
    """
    if sys.platform == "win32":
        return _get_xdg_dir("LOCALAPPDATA", "AppData/Local")
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the policy configuration file path.

    Returns:
        Path to <config dir>/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override file path.

    Returns:
        Path to <config dir>/theme.toml.
    """
    return get_config_dir() / "theme.toml"

