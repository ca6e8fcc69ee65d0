"""Configuration schema dataclasses for WeaponsWatch.

All fields are optional so partial configs from several files can be
merged together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_WEAPONS_FILE = "weapons.json"
DEFAULT_POLL_INTERVAL = 0.25


@dataclass
class MonitorConfig:
    """Weapons file monitor configuration.

    Example config.yaml:
        monitor:
          path: /srv/game/weapons.json
          poll_interval: 0.5
    """

    path: str | None = None  # Default: weapons.json in the working directory
    poll_interval: float = DEFAULT_POLL_INTERVAL  # Seconds between polls


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Unknown top-level sections are kept for forward compatibility
    extra: dict[str, Any] = field(default_factory=dict)
