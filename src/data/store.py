"""
Friends Midnight — Friend Store.

Loads and saves the friend list as JSON under a single key of a
KeyValueStorage. Every failure is reported with a typed error so the caller
can fall back to the default list and tell the user why.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from src.core.validator import Err, parse_friend_list
from src.data.models import Friend

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)

FRIENDS_KEY = "friends"

DEFAULT_FRIENDS: tuple[Friend, ...] = (
    Friend(name="Me", location="Here", tz="Europe/Berlin", focus=True),
)


def default_friends() -> list[Friend]:
    """Return a fresh copy of the built-in default list."""
    return list(DEFAULT_FRIENDS)


def _reject_constant(name: str) -> None:
    raise ValueError(f"Unexpected token {name} in JSON")


def decode_json(text: str) -> Any:
    """Decode JSON text the way a browser's JSON.parse would.

    NaN, Infinity and -Infinity are rejected with ValueError.

    Raises:
        ValueError: malformed JSON (JSONDecodeError is a subclass).
        RecursionError: nesting too deep for the decoder.
        TypeError: text is not a str, bytes or bytearray.
    """
    return json.loads(text, parse_constant=_reject_constant)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class FriendStoreError(Exception):
    """Base class for every friend store failure."""


class StorageUnavailable(FriendStoreError):
    """The underlying storage could not be read at all."""


class NoData(FriendStoreError):
    """Nothing is stored under the friends key."""


class ParseError(FriendStoreError):
    """The stored text is not valid JSON."""


class SchemaInvalid(FriendStoreError):
    """The stored JSON is not a list of friends."""


class StorageWriteFailure(FriendStoreError):
    """Writing the friend list failed (quota, disabled storage, I/O error)."""


class StorageClearFailure(FriendStoreError):
    """Removing the stored friend list failed. Logged, never raised."""


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class FriendStore:
    """Durable copy of the friend list."""

    def __init__(self, storage: KeyValueStorage, key: str = FRIENDS_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Friend]:
        """Read, decode and validate the stored friend list.

        Raises:
            StorageUnavailable: the storage read raised.
            NoData: the key is absent.
            ParseError: the stored text is not JSON.
            SchemaInvalid: the JSON is not a list of friends.
        """
        try:
            raw = self._storage.get_item(self._key)
        except Exception as exc:
            logger.warning("Friend storage read failed: %s", exc)
            raise StorageUnavailable("storage not available") from exc

        if raw is None:
            raise NoData("no friends in storage")

        try:
            decoded = decode_json(raw)
        except (ValueError, TypeError, RecursionError) as exc:
            logger.warning("Stored friends are not valid JSON: %s", exc)
            raise ParseError("invalid friends data: unable to parse JSON") from exc

        result = parse_friend_list(decoded)
        if isinstance(result, Err):
            logger.warning("Stored friends failed validation: %s", result.error)
            raise SchemaInvalid("invalid friends data: not an array of friends")

        logger.info("Loaded %d friends from storage", len(result.value))
        return result.value

    def save(self, friends: list[Friend]) -> None:
        """Serialize the list to JSON and write it with a single set operation.

        Raises:
            StorageWriteFailure: the storage write raised.
        """
        payload = json.dumps([f.to_dict() for f in friends])
        try:
            self._storage.set_item(self._key, payload)
        except Exception as exc:
            logger.error("Failed to store friends: %s", exc)
            raise StorageWriteFailure("unable to store friends") from exc
        logger.info("Saved %d friends", len(friends))

    def clear(self) -> None:
        """Remove the stored list. Best effort: failures are only logged."""
        try:
            self._storage.remove_item(self._key)
        except Exception as exc:
            failure = StorageClearFailure(f"unable to clear friends: {exc}")
            logger.warning("%s", failure)
            return
        logger.info("Cleared stored friends")
