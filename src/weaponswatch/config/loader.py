"""Configuration file loading and caching.

Sources, lowest to highest priority: user config, project config,
environment variables. Command-line flags are applied on top by the CLI.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from weaponswatch.config.paths import get_config_paths
from weaponswatch.config.schema import (
    DEFAULT_POLL_INTERVAL,
    Config,
    LoggingConfig,
    MonitorConfig,
)
from weaponswatch.logging import LOG_ENV_VAR

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("weaponswatch.config")

POLL_INTERVAL_ENV_VAR = "WEAPONSWATCH_POLL_INTERVAL"

_cached_config: Config | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning {} if missing, unreadable or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        if data is not None:
            _log.warning("Ignoring %s: top level must be a mapping", path)
        return {}
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings merge; other values (lists included) are replaced;
    None in ``override`` leaves the base value untouched.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_dicts(current, value)
        else:
            merged[key] = value
    return merged


def env_overrides() -> dict[str, Any]:
    """Build a config dict from environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get(LOG_ENV_VAR)
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    interval = os.environ.get(POLL_INTERVAL_ENV_VAR)
    if interval:
        overrides.setdefault("monitor", {})["poll_interval"] = interval

    return overrides


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        _log.warning("Ignoring config section '%s': must be a mapping", name)
        return {}
    return value


def _parse_poll_interval(raw: Any) -> float:
    try:
        interval = float(raw)
    except (TypeError, ValueError):
        _log.warning("monitor.poll_interval must be numeric (got %r), using default", raw)
        return DEFAULT_POLL_INTERVAL
    if interval <= 0:
        _log.warning("monitor.poll_interval must be positive (got %r), using default", raw)
        return DEFAULT_POLL_INTERVAL
    return interval


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged config dict to a typed Config."""
    monitor_data = _section(data, "monitor")
    path = monitor_data.get("path")
    monitor = MonitorConfig(
        path=str(path) if path is not None else None,
        poll_interval=_parse_poll_interval(
            monitor_data.get("poll_interval", DEFAULT_POLL_INTERVAL)
        ),
    )

    log_data = _section(data, "logging")
    verbose = log_data.get("verbose")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=verbose if isinstance(verbose, int) else None,
        file=log_data.get("file"),
    )

    known_keys = {"monitor", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(monitor=monitor, logging=logging_config, extra=extra)


def load_config(project_root: str | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Args:
        project_root: Directory holding a project-level ``.weaponswatch``
            config. Project configs are never cached.
        reload: Force a reload of the cached global config.
    """
    global _cached_config

    if _cached_config is not None and not reload and project_root is None:
        return _cached_config

    merged: dict[str, Any] = {}
    for path in get_config_paths(project_root):
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded config from %s", path)
            merged = merge_dicts(merged, data)

    merged = merge_dicts(merged, env_overrides())
    config = dict_to_config(merged)

    if project_root is None:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Drop the cached config (used by tests)."""
    global _cached_config
    _cached_config = None
