"""WeaponsWatch: poll a weapons JSON file and report its contents on change."""

__version__ = "0.1.0"

# Public API
from weaponswatch.cancellation import (
    CancellationSource,
    CancellationToken,
    OperationCancelledError,
)
from weaponswatch.config import Config, get_config, load_config
from weaponswatch.errors import MonitorConfigError
from weaponswatch.filesystem import FileSystem, LocalFileSystem
from weaponswatch.monitor import (
    MonitorState,
    WeaponsFileMonitor,
    WeaponsUpdatedCallback,
    start_monitor,
)
from weaponswatch.ticker import PeriodicTicker, Ticker
from weaponswatch.view import WeaponsView
from weaponswatch.weapons import TechType, Weapon, WeaponsDecodeError, decode_weapons

__all__ = [
    # Monitor
    "WeaponsFileMonitor",
    "WeaponsUpdatedCallback",
    "MonitorState",
    "start_monitor",
    # Records
    "Weapon",
    "TechType",
    "decode_weapons",
    # Capabilities
    "Ticker",
    "PeriodicTicker",
    "FileSystem",
    "LocalFileSystem",
    "CancellationSource",
    "CancellationToken",
    # Errors
    "MonitorConfigError",
    "OperationCancelledError",
    "WeaponsDecodeError",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Display
    "WeaponsView",
]
