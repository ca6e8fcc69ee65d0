"""Logging configuration for WeaponsWatch.

All package loggers are children of the ``weaponswatch`` logger. Records
are written to a log file when one is configured (config or
WEAPONSWATCH_LOG), otherwise to stderr when stderr is an interactive
console. Records from child loggers carry their component name:

    14:02:11 debug: [monitor] /data/weapons.json changed (mtime_ns=...)

Verbosity levels: error(0), warning(1), info(2), verbose(3), trace(4).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weaponswatch.config.schema import LoggingConfig

LOG_ENV_VAR = "WEAPONSWATCH_LOG"

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("weaponswatch")

_initialized = False

# Indexed by -v count; anything past the end means TRACE
_VERBOSITY = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)


class _ComponentFormatter(logging.Formatter):
    """Lowercase level names and a ``[component]`` tag for child loggers."""

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy; other handlers may see the same record
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = record.levelname.lower()
        _, _, component = record.name.partition(".")
        record.component = f"[{component}] " if component else ""
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Pick the log level for a config.

    ``verbose`` wins over ``level``. Unknown level names fall back to INFO.
    """
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        return _VERBOSITY[min(max(config.verbose, 0), len(_VERBOSITY) - 1)]
    if config.level:
        return logging.getLevelNamesMapping().get(config.level.upper(), logging.INFO)
    return logging.INFO


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Initialize package logging.

    Call once at startup; later calls are no-ops. A log file that cannot
    be opened is reported and replaced by stderr output.

    Args:
        config: Optional LoggingConfig with level, verbose and file settings.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = resolve_level(config)
    logger.setLevel(level)

    log_path = config.file if config and config.file else os.environ.get(LOG_ENV_VAR)
    handler: logging.Handler | None = None
    open_error: OSError | None = None

    if log_path:
        try:
            handler = logging.FileHandler(os.path.expanduser(log_path), encoding="utf-8")
        except OSError as e:
            open_error = e

    if handler is None and sys.stderr.isatty():
        handler = logging.StreamHandler(sys.stderr)

    if handler is not None:
        handler.setLevel(level)
        handler.setFormatter(
            _ComponentFormatter(
                "%(asctime)s %(levelname)s: %(component)s%(message)s", datefmt="%H:%M:%S"
            )
        )
        logger.addHandler(handler)

    if open_error is not None:
        logger.warning("Could not open log file %s: %s", log_path, open_error)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a package logger.

    Args:
        name: Optional component name (e.g., "monitor"). None returns the
              root ``weaponswatch`` logger.
    """
    if name:
        return logger.getChild(name)
    return logger
