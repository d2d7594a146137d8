"""asyncio timer adapter — implements the Timer port on an event loop.

Each tick re-arms itself with loop.call_later, so a slow callback delays the
next tick instead of stacking them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class _RepeatingHandle:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_s: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval_s = interval_s
        self._callback = callback
        self._cancelled = False
        self._pending: asyncio.TimerHandle | None = None
        self._arm()

    def _arm(self) -> None:
        self._pending = self._loop.call_later(self._interval_s, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception as exc:
            logger.error("Timer callback failed: %s", exc)
        if not self._cancelled:
            self._arm()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class AsyncioTimer:
    """Timer backed by an asyncio event loop (the running loop by default)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_repeating(
        self, interval_s: float, callback: Callable[[], None]
    ) -> _RepeatingHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _RepeatingHandle(loop, interval_s, callback)
