"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from tests.utils import FakeFileSystem, ManualTicker, UpdateRecorder

# Configure pytest-asyncio to use auto mode
# This is redundant with pyproject.toml but ensures it's set
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def ticker() -> ManualTicker:
    """A ticker released one tick at a time by the test."""
    return ManualTicker()


@pytest.fixture
def file_system() -> FakeFileSystem:
    """An empty in-memory file system."""
    return FakeFileSystem()


@pytest.fixture
def recorder() -> UpdateRecorder:
    """A subscriber that records updates."""
    return UpdateRecorder()
