"""Tests for the BaseRepository JSON helpers."""

import pytest

from shared.exceptions import PersistenceError
from shared.repository import BaseRepository


class TestBaseRepository:
    @pytest.fixture
    def repo(self, store):
        return BaseRepository(store)

    def test_read_absent_key(self, repo):
        """Absent keys should read as None."""
        assert repo._read_json("missing") is None

    def test_write_then_read(self, repo, store):
        """Values should be stored as JSON text."""
        repo._write_json("doc", {"a": [1, 2]})
        assert store.get_item("doc") == '{"a": [1, 2]}'
        assert repo._read_json("doc") == {"a": [1, 2]}

    def test_read_malformed_json(self, repo, store):
        """Malformed JSON should raise ValueError for the caller to handle."""
        store.set_item("doc", "{not json")
        with pytest.raises(ValueError):
            repo._read_json("doc")

    def test_write_unserializable(self, repo, store):
        """Unserializable values should raise PersistenceError and write nothing."""
        with pytest.raises(PersistenceError) as exc_info:
            repo._write_json("doc", {"when": object()})
        assert exc_info.value.operation == "serialize"
        assert store.get_item("doc") is None
