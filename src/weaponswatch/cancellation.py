"""Cooperative cancellation shared by every suspending call of a monitor.

A CancellationSource owns the signal; the CancellationToken it hands out is
passed into the ticker wait and the file read so that a single cancel()
aborts whichever of them is currently pending.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class OperationCancelledError(asyncio.CancelledError):
    """Raised from a suspending call when its token has been cancelled.

    Derives from asyncio.CancelledError, so ``except Exception`` blocks
    never swallow it.
    """


class CancellationToken:
    """Read side of a CancellationSource."""

    def __init__(self, event: asyncio.Event) -> None:
        self._event = event

    @property
    def is_cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelledError()

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token is cancelled first.

        Args:
            awaitable: Coroutine or future to race against the token.

        Returns:
            The awaitable's result.

        Raises:
            OperationCancelledError: If the token fires before completion.
                The pending awaitable is cancelled.
        """
        if self.is_cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise OperationCancelledError()
        work = asyncio.ensure_future(awaitable)
        cancelled = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not work.done():
                work.cancel()

        if work.done() and not work.cancelled():
            return work.result()
        raise OperationCancelledError()


class CancellationSource:
    """Owns a cancellation signal.

    cancel() may be called any number of times; only the first has an
    effect. After close() the source may no longer be cancelled.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._closed = False
        self.token = CancellationToken(self._event)

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation."""
        if self._closed:
            raise RuntimeError("CancellationSource is closed")
        self._event.set()

    def close(self) -> None:
        """Release the source."""
        self._closed = True
