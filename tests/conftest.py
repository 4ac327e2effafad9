"""Shared pytest fixtures for headway tests.

Fixtures are organized into categories:
- Clock fixtures (deterministic time for the tracker)
- Settings fixtures (isolated environment)
- Output fixtures (captured bar output)

Usage:
    def test_example(clock):
        tracker = Tracker(measurement_interval=0.01, clock=clock)
        tracker.set_progress(0.1)
        clock.advance(0.01)
        tracker.set_progress(0.2)
"""

from __future__ import annotations

import io
import os
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from headway.config import clear_settings_cache
from headway.state import THEMES, ProgressTheme

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.python import Function


# =============================================================================
# Test Collection Hook
# =============================================================================


def pytest_collection_modifyitems(config: Config, items: list[Function]) -> None:
    """Ensure unit tests run before integration tests.

    Integration tests use real sleeps and background threads; running the
    fast unit tests first gives quicker feedback.
    """

    def sort_key(item: Function) -> tuple[int, str]:
        path_str = str(item.fspath)
        if "/integration/" in path_str:
            return (1, path_str)
        return (0, path_str)

    items.sort(key=sort_key)


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Return a fake clock starting at an arbitrary instant."""
    return FakeClock()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Iterator[None]:
    """Run every test without HEADWAY_* variables or a local .env file."""
    for key in list(os.environ):
        if key.startswith("HEADWAY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Output Fixtures
# =============================================================================


class CapturedStream(io.StringIO):
    """StringIO safe to write from the bar thread and read from the test."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()

    def write(self, s: str) -> int:
        with self._lock:
            return super().write(s)

    def getvalue(self) -> str:
        with self._lock:
            return super().getvalue()


@pytest.fixture
def stream() -> CapturedStream:
    """Return a thread-safe in-memory output stream."""
    return CapturedStream()


@pytest.fixture
def ascii_theme() -> ProgressTheme:
    """Return the ASCII palette, independent of the test environment."""
    return THEMES["ascii"]
