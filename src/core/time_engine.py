"""
Friends Midnight — Time Engine.

Pure computation: given "now", the viewer's zone and a friend list, derive
each friend's local time, zone abbreviation, next local midnight (shown in
the viewer's zone) and the countdown to it, then sort by UTC offset.

No I/O: the clock and the local zone are injected so tests can pin both.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Sequence

from src.core.zones import resolve_zone, system_local_zone, system_now
from src.data.models import Friend, FriendState, SkippedFriend, Snapshot

logger = logging.getLogger(__name__)

NowProvider = Callable[[], datetime]
ZoneProvider = Callable[[], tzinfo]

_ONE_SECOND = timedelta(seconds=1)


def next_midnight(now: datetime, zone: tzinfo) -> datetime:
    """Return the first midnight in `zone` strictly after `now`.

    The calendar date of `now` in `zone` is advanced by one day and the
    wall-clock fields are zeroed, so a `now` of 23:59:59 yields the
    midnight one second later and a `now` of 00:00:00 yields the one a
    full day later.
    """
    local = now.astimezone(zone)
    return datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=zone)


def countdown_between(now: datetime, target: datetime) -> timedelta:
    """Whole-second duration from now to target, never negative."""
    # Same-tzinfo subtraction is wall-clock based, so compare in UTC
    delta = target.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    if delta <= timedelta(0):
        return timedelta(0)
    return timedelta(seconds=delta // _ONE_SECOND)


def _offset_minutes(local: datetime) -> int:
    offset = local.utcoffset() or timedelta(0)
    return int(offset.total_seconds() // 60)


def _compute_one(
    friend: Friend, index: int, now: datetime, here: tzinfo,
) -> FriendState:
    zone = resolve_zone(friend.tz)
    local = now.astimezone(zone)
    midnight = next_midnight(now, zone).astimezone(here)

    return FriendState(
        name=friend.name,
        location=friend.location,
        tz=friend.tz,
        focus=friend.focus,
        index=index,
        offset=_offset_minutes(local),
        tz_name=local.tzname() or friend.tz,
        time=local,
        midnight=midnight,
        countdown=countdown_between(now, midnight),
    )


def sort_states(states: list[FriendState]) -> list[FriendState]:
    """Order by offset descending; equal offsets keep input order."""
    return sorted(states, key=lambda s: (-s.offset, s.index))


def compute_snapshot(
    friends: Sequence[Friend],
    now_provider: NowProvider = system_now,
    local_zone_provider: ZoneProvider = system_local_zone,
) -> Snapshot:
    """Compute every friend's state from a single captured instant.

    Friends whose zone cannot be resolved are left out of `states` and
    listed in `skipped`; they never abort the whole computation.

    Raises:
        ValueError: now_provider returned a naive datetime.
    """
    now = now_provider()
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now_provider must return a timezone-aware datetime")
    here = local_zone_provider()

    states: list[FriendState] = []
    skipped: list[SkippedFriend] = []
    for index, friend in enumerate(friends):
        try:
            states.append(_compute_one(friend, index, now, here))
        except ValueError as exc:
            logger.debug("Skipping friend #%d '%s': %s", index, friend.name, exc)
            skipped.append(SkippedFriend(
                index=index, name=friend.name, tz=friend.tz, reason=str(exc),
            ))

    return Snapshot(
        states=tuple(sort_states(states)),
        computed_at=now,
        skipped=tuple(skipped),
    )


def compute_states(
    friends: Sequence[Friend],
    now_provider: NowProvider = system_now,
    local_zone_provider: ZoneProvider = system_local_zone,
) -> list[FriendState]:
    """Sorted list of computed states; see compute_snapshot."""
    return list(compute_snapshot(friends, now_provider, local_zone_provider).states)


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------


def format_time(value: datetime) -> str:
    """Format as YYYY-MM-DD HH:MM:SS in the datetime's own zone."""
    return value.strftime("%Y-%m-%d %H:%M:%S")


def format_countdown(value: timedelta) -> str:
    """Format as HH:MM:SS using total hours (a DST day can exceed 24h)."""
    total = max(int(value.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def offset_group_starts(states: Sequence[FriendState]) -> list[bool]:
    """True for each state whose offset differs from the one before it."""
    starts: list[bool] = []
    previous: int | None = None
    for state in states:
        starts.append(previous is None or state.offset != previous)
        previous = state.offset
    return starts
