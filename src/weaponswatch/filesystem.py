"""File system access used by the monitor.

The monitor never touches the disk directly; it goes through a FileSystem
so tests can supply in-memory files and count calls.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Protocol for the file operations needed by the monitor."""

    def exists(self, path: str) -> bool:
        """Return True if ``path`` exists and is a file."""
        ...

    def get_last_write_time(self, path: str) -> int:
        """Return the last-modified time of ``path`` in nanoseconds.

        Raises:
            OSError: If the file cannot be inspected.
        """
        ...

    async def read_bytes(self, path: str) -> bytes:
        """Read the full contents of ``path``.

        Raises:
            OSError: If the file cannot be read.
        """
        ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def get_last_write_time(self, path: str) -> int:
        return Path(path).stat().st_mtime_ns

    async def read_bytes(self, path: str) -> bytes:
        # Blocking read runs off the event loop
        return await asyncio.to_thread(Path(path).read_bytes)
