"""
Friends Midnight — Data Models.

A friend is a named location with an IANA timezone. The persisted form is a
plain JSON object with exactly the keys name/location/tz and an optional
boolean focus, so `focus=None` means "key absent", not "false".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Friend:
    """A named location with an associated timezone, optionally focused."""

    name: str
    location: str
    tz: str                    # IANA identifier, e.g. "Europe/Berlin"
    focus: bool | None = None  # None → key absent in the stored JSON

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "location": self.location, "tz": self.tz}
        if self.focus is not None:
            data["focus"] = self.focus
        return data


@dataclass(frozen=True)
class FriendState:
    """One friend's computed countdown state, rebuilt on every refresh."""

    name: str
    location: str
    tz: str
    focus: bool | None
    index: int                 # position in the input list
    offset: int                # minutes east of UTC at "now"
    tz_name: str               # abbreviation at "now", e.g. "CEST"
    time: datetime             # now, in the friend's zone
    midnight: datetime         # friend's next midnight, in the viewer's zone
    countdown: timedelta       # whole seconds, never negative

    @property
    def friend(self) -> Friend:
        return Friend(
            name=self.name, location=self.location, tz=self.tz, focus=self.focus,
        )


@dataclass(frozen=True)
class SkippedFriend:
    """A friend left out of a snapshot because its zone could not be resolved."""

    index: int
    name: str
    tz: str
    reason: str


@dataclass(frozen=True)
class Snapshot:
    """The complete result of one refresh: sorted states plus skipped entries."""

    states: tuple[FriendState, ...]
    computed_at: datetime
    skipped: tuple[SkippedFriend, ...] = ()
