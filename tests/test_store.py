"""Tests for src.data.store — FriendStore load/save/clear."""

import json
from unittest.mock import MagicMock

import pytest

from src.adapters.memory_storage import MemoryStorage
from src.data.models import Friend
from src.data.store import (
    DEFAULT_FRIENDS,
    FRIENDS_KEY,
    FriendStore,
    FriendStoreError,
    NoData,
    ParseError,
    SchemaInvalid,
    StorageUnavailable,
    StorageWriteFailure,
    default_friends,
)

FRIENDS = [
    Friend(name="Ana", location="Lisbon", tz="Europe/Lisbon"),
    Friend(name="Bo", location="Seattle", tz="America/Los_Angeles", focus=False),
    Friend(name="Me", location="Here", tz="Europe/Berlin", focus=True),
]


def _broken_storage(exc=OSError("storage disabled")):
    storage = MagicMock()
    storage.get_item.side_effect = exc
    storage.set_item.side_effect = exc
    storage.remove_item.side_effect = exc
    return storage


class TestDefaults:
    def test_default_list(self):
        assert default_friends() == [
            Friend(name="Me", location="Here", tz="Europe/Berlin", focus=True),
        ]

    def test_default_is_fresh_copy(self):
        first = default_friends()
        first.append(Friend(name="X", location="Y", tz="UTC"))
        assert default_friends() == list(DEFAULT_FRIENDS)


class TestLoad:
    def test_round_trip(self, friend_store):
        friend_store.save(FRIENDS)
        assert friend_store.load() == FRIENDS

    def test_round_trip_empty_list(self, friend_store):
        friend_store.save([])
        assert friend_store.load() == []

    def test_round_trip_sqlite(self, sqlite_storage):
        store = FriendStore(sqlite_storage)
        store.save(FRIENDS)
        assert store.load() == FRIENDS

    def test_no_data(self, friend_store):
        with pytest.raises(NoData, match="no friends in storage"):
            friend_store.load()

    def test_storage_unavailable(self):
        store = FriendStore(_broken_storage())
        with pytest.raises(StorageUnavailable, match="storage not available") as info:
            store.load()
        assert isinstance(info.value.__cause__, OSError)

    def test_parse_error(self):
        store = FriendStore(MemoryStorage({FRIENDS_KEY: "[{not json"}))
        with pytest.raises(ParseError, match="unable to parse JSON"):
            store.load()

    def test_deeply_nested_json_is_parse_error(self):
        stored = "[" * 100000 + "]" * 100000
        store = FriendStore(MemoryStorage({FRIENDS_KEY: stored}))
        with pytest.raises(ParseError, match="unable to parse JSON"):
            store.load()

    @pytest.mark.parametrize("stored", ["NaN", "[Infinity]", "[-Infinity]"])
    def test_non_standard_constants_are_parse_error(self, stored):
        store = FriendStore(MemoryStorage({FRIENDS_KEY: stored}))
        with pytest.raises(ParseError):
            store.load()

    @pytest.mark.parametrize("stored", [
        "{}",
        "null",
        '[{"name": "Ana"}]',
        '[{"name": "Ana", "location": "Lisbon", "tz": "Europe/Lisbon", "focus": 1}]',
    ])
    def test_schema_invalid(self, stored):
        store = FriendStore(MemoryStorage({FRIENDS_KEY: stored}))
        with pytest.raises(SchemaInvalid, match="not an array of friends"):
            store.load()

    def test_all_errors_share_base(self):
        for exc in (StorageUnavailable, NoData, ParseError, SchemaInvalid, StorageWriteFailure):
            assert issubclass(exc, FriendStoreError)

    def test_custom_key(self, memory_storage):
        store = FriendStore(memory_storage, key="other")
        store.save(FRIENDS)
        assert memory_storage.get_item("other") is not None
        assert memory_storage.get_item(FRIENDS_KEY) is None


class TestSave:
    def test_stores_plain_json_array(self, friend_store, memory_storage):
        friend_store.save(FRIENDS)
        stored = json.loads(memory_storage.get_item(FRIENDS_KEY))
        assert stored == [
            {"name": "Ana", "location": "Lisbon", "tz": "Europe/Lisbon"},
            {"name": "Bo", "location": "Seattle", "tz": "America/Los_Angeles", "focus": False},
            {"name": "Me", "location": "Here", "tz": "Europe/Berlin", "focus": True},
        ]

    def test_write_failure_surfaces(self):
        store = FriendStore(_broken_storage())
        with pytest.raises(StorageWriteFailure, match="unable to store friends"):
            store.save(FRIENDS)

    def test_save_overwrites(self, friend_store):
        friend_store.save(FRIENDS)
        friend_store.save(FRIENDS[:1])
        assert friend_store.load() == FRIENDS[:1]


class TestClear:
    def test_clear_removes_key(self, friend_store):
        friend_store.save(FRIENDS)
        friend_store.clear()
        with pytest.raises(NoData):
            friend_store.load()

    def test_clear_without_data(self, friend_store):
        friend_store.clear()

    def test_clear_failure_is_swallowed(self):
        storage = _broken_storage()
        FriendStore(storage).clear()
        storage.remove_item.assert_called_once_with(FRIENDS_KEY)
