"""Periodic tick source used to pace the file monitor.

The monitor depends only on the Ticker protocol so tests can drive it one
tick at a time.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol

from weaponswatch.cancellation import CancellationToken
from weaponswatch.errors import MonitorConfigError


class Ticker(Protocol):
    """Protocol for a fixed-period tick source.

    Implementations:
    - PeriodicTicker: wall-clock ticks on the running event loop
    - ManualTicker (tests): ticks released explicitly by test code
    """

    async def wait_for_next_tick(self, token: CancellationToken) -> bool:
        """Wait for the next tick.

        Args:
            token: Cancellation token of the caller.

        Returns:
            True when a tick fired, False once the ticker has been closed.

        Raises:
            OperationCancelledError: If ``token`` is cancelled while waiting.
        """
        ...

    def close(self) -> None:
        """Permanently retire the ticker. Safe to call more than once."""
        ...


class PeriodicTicker:
    """Ticks every ``period`` seconds on a fixed schedule.

    The schedule starts at construction. If the consumer falls behind, the
    missed ticks collapse into a single immediate tick instead of firing in
    a burst.
    """

    def __init__(self, period: float) -> None:
        """Initialize the ticker.

        Args:
            period: Seconds between ticks. Must be greater than 0.

        Raises:
            MonitorConfigError: If ``period`` is not positive.
        """
        if period <= 0:
            raise MonitorConfigError(f"period must be greater than 0 (got {period!r})")

        self._period = float(period)
        self._next_tick = time.monotonic() + self._period
        self._closed = asyncio.Event()

    @property
    def period(self) -> float:
        """Seconds between ticks."""
        return self._period

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def wait_for_next_tick(self, token: CancellationToken) -> bool:
        token.raise_if_cancelled()
        if self._closed.is_set():
            return False

        now = time.monotonic()
        delay = max(self._next_tick - now, 0.0)
        self._next_tick += self._period
        if self._next_tick <= now:
            # Consumer fell behind, realign on the next period boundary
            missed = int((now - self._next_tick) // self._period) + 1
            self._next_tick += missed * self._period

        return await token.run(self._sleep_unless_closed(delay))

    async def _sleep_unless_closed(self, delay: float) -> bool:
        try:
            await asyncio.wait_for(self._closed.wait(), timeout=delay)
        except TimeoutError:
            return True
        return False

    def close(self) -> None:
        self._closed.set()
