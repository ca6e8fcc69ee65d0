"""Shared test utilities for WeaponsWatch tests."""

from __future__ import annotations

import asyncio
import codecs
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter

from weaponswatch.cancellation import CancellationToken
from weaponswatch.weapons import TechType, Weapon

WEAPONS_PATH = "/data/weapons.json"

WEAPONS_JSON_1 = """
[
    {
        "Name": "Fenrir",
        "Tech": "Power",
        "AttacksPerSecond": 6.9
    },
    {
        "Name": "Genjiroh",
        "Tech": "Smart",
        "AttacksPerSecond": 4.8
    }
]
"""

WEAPONS_JSON_2 = """
[
    {
        "Name": "Constitutional Arms Liberty",
        "Tech": "Power",
        "AttacksPerSecond": 3.75
    },
    {
        "Name": "Tsunami Nekomata",
        "Tech": "Tech",
        "AttacksPerSecond": 0.93
    }
]
"""

# As saved by editors that write a UTF-8 byte order mark
WEAPONS_JSON_1_BOM = codecs.BOM_UTF8 + WEAPONS_JSON_1.encode("utf-8")

EXPECTED_WEAPONS_1 = [
    Weapon(name="Fenrir", tech=TechType.POWER, attacks_per_second=6.9),
    Weapon(name="Genjiroh", tech=TechType.SMART, attacks_per_second=4.8),
]

EXPECTED_WEAPONS_2 = [
    Weapon(name="Constitutional Arms Liberty", tech=TechType.POWER, attacks_per_second=3.75),
    Weapon(name="Tsunami Nekomata", tech=TechType.TECH, attacks_per_second=0.93),
]

# Upper bound for any single wait in a test
TEST_TIMEOUT = 3.0


def encode_weapons(weapons: Iterable[Weapon]) -> bytes:
    """Write weapons in the on-disk format (file field names)."""
    return TypeAdapter(list[Weapon]).dump_json(list(weapons), by_alias=True, indent=2)


class ManualTicker:
    """Ticker driven explicitly by test code.

    The consumer side (the monitor) calls wait_for_next_tick(); the test
    side calls tick() to release one tick and wait until the monitor has
    fully processed it and is waiting again.
    """

    def __init__(self) -> None:
        self._release = asyncio.Semaphore(0)
        self._changed = asyncio.Condition()
        self.awaits = 0  # times the consumer started waiting
        self.released = 0  # ticks released by the test
        self.consumed = 0  # ticks handed to the consumer
        self.closed = False

    async def wait_for_next_tick(self, token: CancellationToken) -> bool:
        async with self._changed:
            self.awaits += 1
            self._changed.notify_all()

        if self.closed:
            return False
        await token.run(self._release.acquire())
        if self.closed:
            return False

        async with self._changed:
            self.consumed += 1
            self._changed.notify_all()
        return True

    def close(self) -> None:
        self.closed = True
        # Wake a pending waiter so it can observe the close
        self._release.release()

    async def _wait_for(self, predicate: Callable[[], bool], timeout: float) -> None:
        async def wait() -> None:
            async with self._changed:
                await self._changed.wait_for(predicate)

        await asyncio.wait_for(wait(), timeout)

    async def wait_until_awaited(self, count: int = 1, timeout: float = TEST_TIMEOUT) -> None:
        """Wait until the consumer has called wait_for_next_tick ``count`` times."""
        await self._wait_for(lambda: self.awaits >= count, timeout)

    async def release(self, timeout: float = TEST_TIMEOUT) -> None:
        """Release one tick and wait until the consumer has taken it."""
        await self.wait_until_awaited(self.released + 1, timeout)
        self.released += 1
        self._release.release()
        target = self.released
        await self._wait_for(lambda: self.consumed >= target, timeout)

    async def tick(self, timeout: float = TEST_TIMEOUT) -> None:
        """Release one tick and wait until the consumer has finished processing it."""
        await self.release(timeout)
        await self.wait_until_awaited(self.released + 1, timeout)


@dataclass
class FakeFile:
    """An in-memory file."""

    data: bytes
    write_time: int


class FakeFileSystem:
    """In-memory FileSystem with per-operation call counters.

    Assign an exception to ``errors[operation]`` to make that operation
    fail, and set ``read_gate`` to an unset asyncio.Event to make reads
    block until it is set.
    """

    def __init__(self) -> None:
        self.files: dict[str, FakeFile] = {}
        self.calls: Counter[str] = Counter()
        self.errors: dict[str, Exception] = {}
        self.read_gate: asyncio.Event | None = None
        self.read_started = asyncio.Event()
        self._clock = 1_700_000_000_000_000_000

    def _next_write_time(self) -> int:
        self._clock += 1_000_000_000
        return self._clock

    def write(self, path: str, content: str | bytes, write_time: int | None = None) -> None:
        """Create or replace a file, bumping its write time unless one is given."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        self.files[path] = FakeFile(
            data=data,
            write_time=write_time if write_time is not None else self._next_write_time(),
        )

    def remove(self, path: str) -> None:
        del self.files[path]

    def _call(self, operation: str) -> None:
        self.calls[operation] += 1
        error = self.errors.get(operation)
        if error is not None:
            raise error

    def exists(self, path: str) -> bool:
        self._call("exists")
        return path in self.files

    def get_last_write_time(self, path: str) -> int:
        self._call("get_last_write_time")
        try:
            return self.files[path].write_time
        except KeyError:
            raise FileNotFoundError(path) from None

    async def read_bytes(self, path: str) -> bytes:
        self._call("read_bytes")
        self.read_started.set()
        if self.read_gate is not None:
            await self.read_gate.wait()
        try:
            return self.files[path].data
        except KeyError:
            raise FileNotFoundError(path) from None


class UpdateRecorder:
    """Subscriber that records every weapons list it receives."""

    def __init__(self) -> None:
        self.updates: list[list[Weapon]] = []
        self.senders: list[Any] = []

    def __call__(self, sender: Any, weapons: list[Weapon]) -> None:
        self.senders.append(sender)
        self.updates.append(list(weapons))
