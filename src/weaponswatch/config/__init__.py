"""Configuration management for WeaponsWatch.

YAML configuration merged from the user config, an optional project config
and environment variables:

    from weaponswatch.config import load_config

    config = load_config(project_root="/path/to/project")
    print(config.monitor.poll_interval)
"""

from weaponswatch.config.loader import (
    get_config,
    load_config,
    reset_config,
)
from weaponswatch.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
)
from weaponswatch.config.schema import (
    Config,
    LoggingConfig,
    MonitorConfig,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    # Schema types
    "MonitorConfig",
    "LoggingConfig",
    # Path utilities
    "get_config_paths",
    "get_user_config_path",
    "get_project_config_path",
]
