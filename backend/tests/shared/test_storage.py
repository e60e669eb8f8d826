"""Tests for durable key-value store implementations."""

import json
from unittest.mock import patch

import pytest

from shared.config import Settings
from shared.exceptions import PersistenceError
from shared.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    get_key_value_store,
)


class TestInMemoryKeyValueStore:
    def test_implements_protocol(self):
        """Should satisfy the KeyValueStore protocol."""
        assert isinstance(InMemoryKeyValueStore(), KeyValueStore)

    def test_basic_operations(self):
        """Set, get, keys, remove and clear should behave like a dict."""
        store = InMemoryKeyValueStore()
        store.set_item("a", "1")
        store.set_item("b", "2")
        assert store.get_item("a") == "1"
        assert sorted(store.keys()) == ["a", "b"]

        store.remove_item("a")
        store.remove_item("a")
        assert store.get_item("a") is None

        store.clear()
        assert store.keys() == []

    def test_rejects_non_string(self):
        """Non-string values should be rejected."""
        with pytest.raises(PersistenceError):
            InMemoryKeyValueStore().set_item("a", 1)

    def test_quota(self):
        """Writes past the quota should fail and leave the store unchanged."""
        store = InMemoryKeyValueStore(quota_bytes=10)
        store.set_item("a", "123")
        with pytest.raises(PersistenceError) as exc_info:
            store.set_item("b", "x" * 10)
        assert exc_info.value.key == "b"
        assert store.keys() == ["a"]

    def test_quota_counts_replaced_value_once(self):
        """Replacing a value should only count the new size."""
        store = InMemoryKeyValueStore(quota_bytes=10)
        store.set_item("a", "123")
        store.set_item("a", "12345678")
        assert store.get_item("a") == "12345678"


class TestJsonFileKeyValueStore:
    def test_survives_reopen(self, tmp_path):
        """Values should persist across instances."""
        path = tmp_path / "store.json"
        JsonFileKeyValueStore(path).set_item("user", '{"id": "u1"}')

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get_item("user") == '{"id": "u1"}'
        assert json.loads(path.read_text()) == {"user": '{"id": "u1"}'}

    def test_missing_file_is_empty(self, tmp_path):
        """A missing file should start an empty store."""
        assert JsonFileKeyValueStore(tmp_path / "nested" / "store.json").keys() == []

    def test_corrupt_file(self, tmp_path):
        """An unreadable file should raise PersistenceError."""
        path = tmp_path / "store.json"
        path.write_text("not json")
        with pytest.raises(PersistenceError):
            JsonFileKeyValueStore(path)

    def test_non_string_map(self, tmp_path):
        """A file that is not a string map should raise PersistenceError."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"a": 1}))
        with pytest.raises(PersistenceError):
            JsonFileKeyValueStore(path)

    def test_failed_flush_rolls_back(self, tmp_path):
        """A failed write should leave the previous value in place."""
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set_item("a", "old")

        with patch("shared.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                store.set_item("a", "new")
            with pytest.raises(PersistenceError):
                store.remove_item("a")

        assert store.get_item("a") == "old"

    def test_clear(self, tmp_path):
        """Clear should empty the file too."""
        path = tmp_path / "store.json"
        store = JsonFileKeyValueStore(path)
        store.set_item("a", "1")
        store.clear()
        assert JsonFileKeyValueStore(path).keys() == []


class TestGetKeyValueStore:
    def test_memory_without_path(self):
        """No storage path should give an in-memory store."""
        store = get_key_value_store(Settings(_env_file=None))
        assert isinstance(store, InMemoryKeyValueStore)

    def test_file_with_path(self, tmp_path):
        """A storage path should give a file-backed store."""
        path = tmp_path / "store.json"
        store = get_key_value_store(Settings(_env_file=None, storage_path=path))
        assert isinstance(store, JsonFileKeyValueStore)
        assert store.path == path
