"""
Friends Midnight — Refresh Scheduler.

Keeps the countdown snapshot current: recomputes immediately whenever the
friend list is started or replaced, and on every timer tick while running.

State machine:  IDLE --start()--> RUNNING --stop()--> IDLE
replace() works in either state and never arms or disarms the timer.

Single-threaded: ticks and replace() run on the same event loop, and the
snapshot is always swapped wholesale.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Sequence

from src.core.time_engine import compute_snapshot

if TYPE_CHECKING:
    from src.data.models import Friend, Snapshot
    from src.ports.timer_port import Timer, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 1000


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class SchedulerError(Exception):
    """Raised on an invalid state transition (e.g. start() while running)."""


class RefreshScheduler:
    """Owns the active friend list, the current snapshot and the timer handle."""

    def __init__(
        self,
        timer: Timer,
        compute: Callable[[Sequence[Friend]], Snapshot] = compute_snapshot,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        on_snapshot: Callable[[Snapshot], None] | None = None,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._timer = timer
        self._compute = compute
        self._interval_ms = interval_ms
        self._on_snapshot = on_snapshot

        self._state = SchedulerState.IDLE
        self._handle: TimerHandle | None = None
        self._friends: tuple[Friend, ...] = ()
        self._snapshot: Snapshot | None = None
        self._skipped_tz: frozenset[str] = frozenset()

    # -- read-only views ----------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def friends(self) -> list[Friend]:
        return list(self._friends)

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    # -- lifecycle ----------------------------------------------------------

    def start(self, friends: Sequence[Friend]) -> None:
        """Publish a snapshot for `friends` now, then refresh every interval."""
        if self._state is SchedulerState.RUNNING:
            raise SchedulerError("scheduler is already running")

        self._friends = tuple(friends)
        self.refresh()
        self._handle = self._timer.call_repeating(
            self._interval_ms / 1000, self._tick,
        )
        self._state = SchedulerState.RUNNING
        logger.info(
            "Refresh scheduler started: %d friends every %d ms",
            len(self._friends), self._interval_ms,
        )

    def stop(self) -> None:
        """Disarm the timer. Safe to call repeatedly or before start()."""
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()
        if self._state is SchedulerState.RUNNING:
            self._state = SchedulerState.IDLE
            logger.info("Refresh scheduler stopped")

    def replace(self, friends: Sequence[Friend]) -> None:
        """Swap the active list and recompute without waiting for a tick."""
        self._friends = tuple(friends)
        logger.debug("Friend list replaced (%d friends)", len(self._friends))
        self.refresh()

    # -- computation --------------------------------------------------------

    def refresh(self) -> Snapshot:
        """Recompute the snapshot for the active list and publish it."""
        snapshot = self._compute(self._friends)
        self._snapshot = snapshot
        self._report_skipped(snapshot)

        if self._on_snapshot is not None:
            try:
                self._on_snapshot(snapshot)
            except Exception as exc:
                logger.error("Snapshot listener failed: %s", exc)
        return snapshot

    def _tick(self) -> None:
        # A tick already queued when stop() ran must not publish
        if self._state is not SchedulerState.RUNNING:
            return
        self.refresh()

    def _report_skipped(self, snapshot: Snapshot) -> None:
        skipped_tz = frozenset(s.tz for s in snapshot.skipped)
        if skipped_tz and skipped_tz != self._skipped_tz:
            logger.warning(
                "Unknown timezones left out of the countdown: %s",
                ", ".join(sorted(skipped_tz)),
            )
        self._skipped_tz = skipped_tz
