"""
Friends Midnight — UI-Agnostic Friends Service.

Orchestrates the engine for a presentation layer: loads the stored list on
startup (falling back to the default list), accepts raw JSON edits, resets to
the default, and exposes a single message describing the latest outcome.

The presentation layer reads `scheduler.snapshot` (or subscribes through the
scheduler's listener) and renders it however it likes.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from src.core.validator import Err, parse_friend_list, unknown_timezones
from src.data.store import (
    FriendStoreError,
    StorageWriteFailure,
    decode_json,
    default_friends,
)

if TYPE_CHECKING:
    from src.core.refresh_scheduler import RefreshScheduler
    from src.data.models import Friend
    from src.data.store import FriendStore

logger = logging.getLogger(__name__)

NOT_A_VALID_FRIEND = "Not a valid friend"
RESET_MESSAGE = "Reset To Default"


class FriendsService:
    """Startup, edit and reset flows over a FriendStore and a RefreshScheduler."""

    def __init__(self, store: FriendStore, scheduler: RefreshScheduler) -> None:
        self._store = store
        self._scheduler = scheduler
        self._message: str | None = None

    @property
    def message(self) -> str | None:
        """The most recent load/save/reset outcome, if any."""
        return self._message

    @property
    def friends(self) -> list[Friend]:
        return self._scheduler.friends

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Startup / shutdown
    # ------------------------------------------------------------------

    def startup(self) -> list[Friend]:
        """Load the stored list (or the default) and start refreshing."""
        try:
            friends = self._store.load()
            self._message = None
        except FriendStoreError as exc:
            friends = default_friends()
            self._message = f"Error: {exc}; loaded default instead"
            logger.warning("Falling back to default friends: %s", exc)

        self._scheduler.start(friends)
        return friends

    def shutdown(self) -> None:
        self._scheduler.stop()

    # ------------------------------------------------------------------
    # Manual edit
    # ------------------------------------------------------------------

    def apply_edit(self, text: str) -> str | None:
        """Validate raw JSON text and make it the active, stored list.

        Returns None on success, otherwise the inline error to show next to
        the editor. Rejected text never reaches storage; a failed save keeps
        the previous list active.
        """
        try:
            decoded = decode_json(text)
        except (ValueError, RecursionError) as exc:
            logger.info("Edit rejected: invalid JSON (%s)", exc)
            return f"JSON: {exc}"

        result = parse_friend_list(decoded)
        if isinstance(result, Err):
            logger.info("Edit rejected: %s", result.error)
            return NOT_A_VALID_FRIEND

        friends = result.value
        unknown = unknown_timezones(friends)
        if unknown:
            logger.info("Edit rejected: unknown timezones %s", unknown)
            return f"Unknown timezone: {', '.join(unknown)}"

        try:
            self._store.save(friends)
        except StorageWriteFailure as exc:
            return str(exc)

        self._scheduler.replace(friends)
        logger.info("Edit applied: %d friends", len(friends))
        return None

    def friends_json(self) -> str:
        """The active list as the editor's initial text."""
        return json.dumps([f.to_dict() for f in self._scheduler.friends], indent=2)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget the stored list and show the default again."""
        self._store.clear()
        self._scheduler.replace(default_friends())
        self._message = RESET_MESSAGE
        logger.info("Friends reset to default")
