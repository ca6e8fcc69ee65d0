"""Polling monitor for a single weapons file.

The monitor runs one asyncio task per instance. On every tick it checks the
file's last-write time and, when it changed, reads and decodes the file and
hands the weapons to the subscriber. Nothing is read while nobody is
subscribed, so a consumer that subscribes after start() still receives the
first update.

Example:
    async with WeaponsFileMonitor("weapons.json", 0.25) as monitor:
        monitor.subscribe(lambda sender, weapons: print(weapons))
        await asyncio.sleep(10)
"""

from __future__ import annotations

import asyncio
import os
import threading
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from weaponswatch.cancellation import CancellationSource, CancellationToken
from weaponswatch.errors import MonitorConfigError
from weaponswatch.filesystem import FileSystem, LocalFileSystem
from weaponswatch.logging import get_logger
from weaponswatch.ticker import PeriodicTicker, Ticker
from weaponswatch.weapons import Weapon, WeaponsDecodeError, decode_weapons

log = get_logger("monitor")


class MonitorState(Enum):
    """Lifecycle of a WeaponsFileMonitor."""

    CREATED = "created"
    RUNNING = "running"
    CANCELLING = "cancelling"
    STOPPED = "stopped"


class WeaponsUpdatedCallback(Protocol):
    """Callback signature for weapons updates."""

    def __call__(self, sender: WeaponsFileMonitor, weapons: list[Weapon]) -> None:
        """Handle a new weapons list (empty when the file is gone or invalid)."""
        ...


FailureHandler = Callable[[Exception], None]


def log_failure(error: Exception) -> None:
    """Default failure handler: report through the monitor logger."""
    if isinstance(error, WeaponsDecodeError):
        log.warning("Could not decode weapons file: %s", error)
    else:
        log.debug("Weapons file check failed: %s", error)


class WeaponsFileMonitor:
    """Watches a weapons file and reports its contents when it changes.

    Lifecycle: construct, then start() (or use start_monitor() or
    ``async with``), then aclose() exactly once.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        interval: float | None = None,
        *,
        file_system: FileSystem | None = None,
        ticker: Ticker | None = None,
        on_error: FailureHandler | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            path: File to watch.
            interval: Seconds between polls. Required unless ``ticker``
                is given.
            file_system: File access capability (default: local disk).
            ticker: Tick source (default: PeriodicTicker(interval)).
            on_error: Called with swallowed read/check/decode failures
                (default: log_failure).

        Raises:
            MonitorConfigError: If ``path`` is blank, or the interval is
                missing or not positive.
        """
        path_str = os.fspath(path)
        if not path_str or path_str.isspace():
            raise MonitorConfigError("path must not be empty or whitespace")

        if ticker is None:
            if interval is None:
                raise MonitorConfigError("interval is required when no ticker is given")
            ticker = PeriodicTicker(interval)

        self._path = path_str
        self._file_system: FileSystem = file_system or LocalFileSystem()
        self._ticker = ticker
        self._on_error = on_error or log_failure

        self._cts = CancellationSource()
        self._task: asyncio.Task[None] | None = None
        self._state = MonitorState.CREATED

        # Touched only by the monitor task
        self._last_write_time: int | None = None

        self._subscriber: WeaponsUpdatedCallback | None = None
        self._subscriber_lock = threading.Lock()

    @property
    def path(self) -> str:
        """The monitored file path."""
        return self._path

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def has_subscriber(self) -> bool:
        """Whether a callback is currently subscribed."""
        with self._subscriber_lock:
            return self._subscriber is not None

    def subscribe(self, callback: WeaponsUpdatedCallback) -> Callable[[], None]:
        """Subscribe to weapons updates, replacing any previous subscriber.

        Safe to call from any thread.

        Args:
            callback: Called from the monitor task with (monitor, weapons).

        Returns:
            A function that unsubscribes ``callback`` if it is still the
            current subscriber.
        """
        with self._subscriber_lock:
            self._subscriber = callback

        def unsubscribe() -> None:
            with self._subscriber_lock:
                if self._subscriber is callback:
                    self._subscriber = None

        return unsubscribe

    def unsubscribe(self) -> None:
        """Remove the current subscriber, if any."""
        with self._subscriber_lock:
            self._subscriber = None

    def start(self) -> None:
        """Start polling in a background task.

        Must be called from within a running event loop.

        Raises:
            RuntimeError: If the monitor was already started or closed.
        """
        if self._state is not MonitorState.CREATED:
            raise RuntimeError(f"Cannot start monitor in state {self._state.value}")

        self._task = asyncio.create_task(
            self._run(self._cts.token), name=f"weapons-monitor:{self._path}"
        )
        self._state = MonitorState.RUNNING
        log.info("Monitoring %s", self._path)

    async def aclose(self) -> None:
        """Stop polling and release resources.

        Waits for the background task to finish. An unexpected failure of
        the task is re-raised here; cancellation is not.

        Raises:
            RuntimeError: If the monitor was already closed.
        """
        if self._state in (MonitorState.CANCELLING, MonitorState.STOPPED):
            raise RuntimeError("Monitor is already closed")

        self._state = MonitorState.CANCELLING
        try:
            self._cts.cancel()
            if self._task is not None:
                await asyncio.wait({self._task})
                if not self._task.cancelled():
                    error = self._task.exception()
                    if error is not None:
                        raise error
        finally:
            self._ticker.close()
            self._cts.close()
            self._state = MonitorState.STOPPED
            log.info("Stopped monitoring %s", self._path)

    async def __aenter__(self) -> WeaponsFileMonitor:
        self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def _run(self, token: CancellationToken) -> None:
        """Main polling loop."""
        try:
            while not token.is_cancelled:
                if not await self._ticker.wait_for_next_tick(token):
                    log.debug("Ticker retired, monitor loop ending")
                    return
                await self._check_for_update(token)
        except asyncio.CancelledError:
            log.debug("Monitor loop cancelled")

    async def _check_for_update(self, token: CancellationToken) -> None:
        # Nothing is read until someone listens, so the first update
        # cannot be lost between start() and subscribe()
        if not self.has_subscriber:
            return

        try:
            if not self._file_system.exists(self._path):
                if self._last_write_time is None:
                    return
                log.debug("%s was removed", self._path)
                self._last_write_time = None
                self._notify([])
                return

            write_time = self._file_system.get_last_write_time(self._path)
        except Exception as e:
            self._on_error(e)
            return

        if write_time == self._last_write_time:
            return

        self._last_write_time = write_time
        log.debug("%s changed (mtime_ns=%d)", self._path, write_time)

        weapons = await self._read_weapons(token)
        self._notify(weapons)

    async def _read_weapons(self, token: CancellationToken) -> list[Weapon]:
        """Read and decode the file. Returns [] on any failure."""
        try:
            data = await token.run(self._file_system.read_bytes(self._path))
            return decode_weapons(data)
        except Exception as e:
            self._on_error(e)
            return []

    def _notify(self, weapons: list[Weapon]) -> None:
        with self._subscriber_lock:
            callback = self._subscriber
        if callback is None:
            return
        try:
            callback(self, weapons)
        except Exception as e:
            log.error("Error in weapons update callback: %s", e)


def start_monitor(
    path: str | os.PathLike[str],
    interval: float | None = None,
    *,
    file_system: FileSystem | None = None,
    ticker: Ticker | None = None,
    on_error: FailureHandler | None = None,
) -> WeaponsFileMonitor:
    """Create a WeaponsFileMonitor and start it.

    Must be called from within a running event loop. Arguments are those of
    WeaponsFileMonitor.
    """
    monitor = WeaponsFileMonitor(
        path,
        interval,
        file_system=file_system,
        ticker=ticker,
        on_error=on_error,
    )
    monitor.start()
    return monitor
