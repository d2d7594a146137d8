"""Timer port — abstract interface for repeating callbacks.

The refresh scheduler depends on this protocol so ticks can be driven by an
event loop in production and by hand in tests.
"""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A repeating callback that can be disarmed."""

    def cancel(self) -> None: ...


class Timer(Protocol):
    """Arms repeating callbacks."""

    def call_repeating(
        self, interval_s: float, callback: Callable[[], None]
    ) -> TimerHandle: ...
