"""Shared test fixtures and configuration.

Sets up environment variables before any src imports, and provides common
fixtures: storages, a hand-driven timer and a pinned clock.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("LOCAL_TIMEZONE", "UTC")
os.environ.setdefault("REFRESH_INTERVAL_MS", "1000")

from datetime import datetime, timezone
from functools import partial

import pytest


class FakeHandle:
    def __init__(self, interval_s, callback):
        self.interval_s = interval_s
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeTimer:
    """Timer port driven by hand: fire() runs every armed callback once."""

    def __init__(self):
        self.handles = []

    def call_repeating(self, interval_s, callback):
        handle = FakeHandle(interval_s, callback)
        self.handles.append(handle)
        return handle

    @property
    def armed(self):
        return [h for h in self.handles if not h.cancelled]

    def fire(self, times=1):
        for _ in range(times):
            for handle in self.armed:
                handle.callback()


# Wednesday 2025-01-15 12:00:00 UTC (winter in the northern hemisphere)
FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def fixed_compute():
    """compute_snapshot pinned to FIXED_NOW with a UTC viewer."""
    from src.core.time_engine import compute_snapshot

    return partial(
        compute_snapshot,
        now_provider=lambda: FIXED_NOW,
        local_zone_provider=lambda: timezone.utc,
    )


@pytest.fixture
def memory_storage():
    from src.adapters.memory_storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "data" / "test_friends.db")


@pytest.fixture
def sqlite_storage(tmp_db_path):
    from src.adapters.sqlite_storage import SQLiteStorage
    return SQLiteStorage(db_path=tmp_db_path)


@pytest.fixture
def friend_store(memory_storage):
    from src.data.store import FriendStore
    return FriendStore(memory_storage)
