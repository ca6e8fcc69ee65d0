"""Platform-aware configuration path resolution.

- User: %APPDATA%\\weaponswatch\\ on Windows, $XDG_CONFIG_HOME/weaponswatch/
  or ~/.config/weaponswatch/ elsewhere
- Project: <project_root>/.weaponswatch/
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "weaponswatch"
PROJECT_DIR = ".weaponswatch"


def get_user_config_path() -> Path | None:
    """Get the user-level config file path (the file may not exist)."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME / CONFIG_FILENAME
        return None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME / CONFIG_FILENAME
    return Path.home() / ".config" / APP_NAME / CONFIG_FILENAME


def get_project_config_path(project_root: str | os.PathLike[str]) -> Path:
    """Get the project-level config file path (the file may not exist)."""
    return Path(project_root) / PROJECT_DIR / CONFIG_FILENAME


def get_config_paths(project_root: str | os.PathLike[str] | None = None) -> list[Path]:
    """Get config paths from lowest to highest priority."""
    paths: list[Path] = []

    user_path = get_user_config_path()
    if user_path:
        paths.append(user_path)

    if project_root:
        paths.append(get_project_config_path(project_root))

    return paths
