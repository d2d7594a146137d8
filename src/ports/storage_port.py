"""Storage port — abstract key/value interface for persisted state.

The friend store depends on this protocol, never on a specific backend.
Any method may raise; the store maps those failures to its own errors.
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStorage(Protocol):
    """Abstract string key/value storage used by the friend store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...
