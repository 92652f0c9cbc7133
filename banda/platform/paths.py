"""User-level directory locations.

banda keeps its configuration in the user config directory and its
in-flight release checkpoints in the user state directory, so checkpoints
never appear in the working tree of the repository being released.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path

__all__ = [
    "home",
    "user_config_dir",
    "user_state_dir",
]

APP_NAME = "banda"


def _is_windows() -> bool:
    return sys.platform == "win32"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, falling back to Path.home().
    """
    if _is_windows():
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)

    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Location of config.toml.

    ~/.config/banda/ (Linux/macOS, honours XDG_CONFIG_HOME) or
    %APPDATA%/banda/ (Windows).
    """
    if _is_windows():
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home() / "AppData" / "Roaming" / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


@lru_cache(maxsize=1)
def user_state_dir() -> Path:
    """Location of release checkpoints.

    BANDA_STATE_DIR wins when set. Otherwise ~/.local/state/banda/ (honours
    XDG_STATE_HOME) or %LOCALAPPDATA%/banda/ on Windows.
    """
    override = os.environ.get("BANDA_STATE_DIR")
    if override:
        return Path(override).expanduser()

    if _is_windows():
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / APP_NAME
        return home() / "AppData" / "Local" / APP_NAME

    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        return Path(xdg_state) / APP_NAME
    return home() / ".local" / "state" / APP_NAME


def clear_caches() -> None:
    """Clear all cached paths.

    Useful for testing when environment variables change.
    """
    home.cache_clear()
    user_config_dir.cache_clear()
    user_state_dir.cache_clear()
