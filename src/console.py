"""
Friends Midnight — Console runner.

Wires SQLite storage, the refresh scheduler and the friends service onto an
asyncio loop and logs the countdown table on every refresh until Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from src.adapters.asyncio_timer import AsyncioTimer
from src.adapters.sqlite_storage import SQLiteStorage
from src.config import settings
from src.core.friends_service import FriendsService
from src.core.refresh_scheduler import RefreshScheduler
from src.core.time_engine import format_countdown, format_time
from src.data.models import Snapshot
from src.data.store import FriendStore

logger = logging.getLogger(__name__)


def format_snapshot(snapshot: Snapshot) -> list[str]:
    """One line per friend: name, location, zone, local time, midnight, countdown."""
    lines = []
    for s in snapshot.states:
        marker = "*" if s.focus else " "
        lines.append(
            f"{marker} {s.name:<16} {s.location:<16} {s.tz_name:<6} "
            f"{format_time(s.time)}  {format_time(s.midnight)}  "
            f"{format_countdown(s.countdown)}"
        )
    return lines


def _log_snapshot(snapshot: Snapshot) -> None:
    for line in format_snapshot(snapshot):
        logger.info("%s", line)


async def run() -> None:
    """Run the countdown until cancelled."""
    store = FriendStore(SQLiteStorage(settings.DATABASE_PATH), key=settings.STORAGE_KEY)
    scheduler = RefreshScheduler(
        AsyncioTimer(),
        interval_ms=settings.REFRESH_INTERVAL_MS,
        on_snapshot=_log_snapshot,
    )
    service = FriendsService(store, scheduler)

    service.startup()
    if service.message:
        logger.warning("%s", service.message)

    try:
        await asyncio.Event().wait()
    finally:
        service.shutdown()


def main() -> None:
    logger.info("Starting Friends Midnight (storage: %s)", settings.DATABASE_PATH)
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Stopped")
