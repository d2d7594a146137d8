"""
Friends Midnight — Friend Validator.

Strict checks over untrusted, already-decoded JSON. A friend is a plain
object with exactly the keys name/location/tz (all strings) plus an optional
boolean focus; anything else is rejected.

The boolean predicates never raise. parse_friend / parse_friend_list return a
tagged result (Ok or Err) carrying either the Friend objects or the reason.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from src.core.zones import is_known_zone
from src.data.models import Friend

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("name", "location", "tz")
_FOCUS_KEY = "focus"


@dataclass(frozen=True)
class ValidationError:
    """Why a value is not a friend (or a friend list)."""

    message: str
    index: int | None = None
    key: str | None = None

    def __str__(self) -> str:
        where = []
        if self.index is not None:
            where.append(f"item {self.index}")
        if self.key is not None:
            where.append(f"key {self.key!r}")
        return f"{self.message} ({', '.join(where)})" if where else self.message


@dataclass(frozen=True)
class Ok:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ValidationError

    @property
    def ok(self) -> bool:
        return False


ParseResult = Ok | Err


# ---------------------------------------------------------------------------
# Tagged-result parsers
# ---------------------------------------------------------------------------


def parse_friend(value: Any, index: int | None = None) -> ParseResult:
    """Parse one decoded JSON value into a Friend.

    Only a plain dict qualifies: lists, None, dict subclasses and arbitrary
    instances are rejected. The key set must be exactly the three required
    keys, or those three plus "focus".
    """
    if type(value) is not dict:
        return Err(ValidationError("not a plain object", index=index))

    keys = set(value.keys())
    if len(keys) not in (3, 4):
        return Err(ValidationError(
            f"expected 3 or 4 keys, got {len(keys)}", index=index,
        ))

    if len(keys) == 4:
        if _FOCUS_KEY not in keys:
            extra = sorted(str(k) for k in keys - set(_REQUIRED_KEYS))
            return Err(ValidationError(
                "unexpected key", index=index, key=extra[0] if extra else None,
            ))
        if not isinstance(value[_FOCUS_KEY], bool):
            return Err(ValidationError(
                "focus must be a boolean", index=index, key=_FOCUS_KEY,
            ))

    for key in _REQUIRED_KEYS:
        if key not in keys:
            return Err(ValidationError("missing key", index=index, key=key))
        if not isinstance(value[key], str):
            return Err(ValidationError("must be a string", index=index, key=key))

    return Ok(Friend(
        name=value["name"],
        location=value["location"],
        tz=value["tz"],
        focus=value.get(_FOCUS_KEY),
    ))


def parse_friend_list(value: Any) -> ParseResult:
    """Parse a decoded JSON array into a list of Friends.

    The first invalid element fails the whole list. An empty array is valid.
    """
    if not isinstance(value, list):
        return Err(ValidationError("not an array"))

    friends: list[Friend] = []
    for i, item in enumerate(value):
        result = parse_friend(item, index=i)
        if isinstance(result, Err):
            return result
        friends.append(result.value)
    return Ok(friends)


# ---------------------------------------------------------------------------
# Boolean predicates
# ---------------------------------------------------------------------------


def is_friend(value: Any) -> bool:
    """True iff value is a well-formed friend record."""
    return isinstance(parse_friend(value), Ok)


def is_friend_list(value: Any) -> bool:
    """True iff value is a list whose every element is a friend record."""
    return isinstance(parse_friend_list(value), Ok)


# ---------------------------------------------------------------------------
# Timezone check (used by the edit surface, not part of the record schema)
# ---------------------------------------------------------------------------


def unknown_timezones(friends: Iterable[Friend]) -> list[str]:
    """Return the zone identifiers that zoneinfo cannot resolve, in order."""
    unknown: list[str] = []
    for friend in friends:
        if friend.tz not in unknown and not is_known_zone(friend.tz):
            logger.debug("Unknown timezone %r", friend.tz)
            unknown.append(friend.tz)
    return unknown
