"""
Unit tests for the local store backends and JSON helpers.
"""

import pytest

from campus_board.config import Settings
from campus_board.storage import MemoryStore, SQLAlchemyStore, create_store, read_json, write_json


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request):
    if request.param == "memory":
        yield MemoryStore()
    else:
        store = SQLAlchemyStore("sqlite:///:memory:")
        yield store
        store.close()


class TestLocalStoreContract:
    """Behaviour shared by every backend."""

    def test_missing_key_returns_none(self, any_store):
        assert any_store.get("nope") is None

    def test_set_then_get(self, any_store):
        any_store.set("k", '{"a": 1}')

        assert any_store.get("k") == '{"a": 1}'

    def test_set_overwrites(self, any_store):
        any_store.set("k", "1")
        any_store.set("k", "2")

        assert any_store.get("k") == "2"

    def test_remove(self, any_store):
        any_store.set("k", "1")
        any_store.remove("k")
        any_store.remove("k")

        assert any_store.get("k") is None


class TestMemoryStore:
    """Test cases for the in-memory backend."""

    def test_initial_values_and_keys(self):
        store = MemoryStore({"a": "1"})
        store.set("b", "2")

        assert sorted(store.keys()) == ["a", "b"]
        assert len(store) == 2


class TestSQLAlchemyStore:
    """Test cases for the SQLAlchemy backend."""

    def test_file_store_survives_reopen(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'board.db'}"
        store = SQLAlchemyStore(url)
        store.set("campus_board:records:feedback", "[]")
        store.close()

        reopened = SQLAlchemyStore(url)
        assert reopened.get("campus_board:records:feedback") == "[]"
        reopened.close()


class TestJsonHelpers:
    """Test cases for read_json and write_json."""

    def setup_method(self):
        self.store = MemoryStore()

    def test_round_trip_keeps_unicode(self):
        write_json(self.store, "k", {"title": "Café ☕"})

        assert "☕" in self.store.get("k")
        assert read_json(self.store, "k", {}) == {"title": "Café ☕"}

    def test_missing_key_returns_default(self):
        assert read_json(self.store, "k", []) == []

    def test_malformed_json_returns_default(self):
        self.store.set("k", "[{broken")

        assert read_json(self.store, "k", []) == []

    def test_wrong_shape_returns_default(self):
        self.store.set("k", '{"a": 1}')

        assert read_json(self.store, "k", []) == []


class TestCreateStore:
    """Test cases for backend selection."""

    def test_memory_backend(self):
        settings = Settings(_env_file=None, storage_backend="memory")

        assert isinstance(create_store(settings), MemoryStore)

    def test_sqlite_backend(self, tmp_path):
        settings = Settings(_env_file=None, storage_backend="sqlite", storage_url=f"sqlite:///{tmp_path / 'x.db'}")

        store = create_store(settings)
        try:
            assert isinstance(store, SQLAlchemyStore)
        finally:
            store.close()
