"""Tests for the keyed storage backends and typed documents."""

import json

import pytest
from pydantic import TypeAdapter

from budget_tracker.audit import AuditLogger
from budget_tracker.models.audit import AuditEventType
from budget_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    load_document,
    save_document,
)


class TestInMemoryStore:
    """Tests for InMemoryKeyValueStore."""

    def test_set_and_get(self):
        """Test basic round trip."""
        store = InMemoryKeyValueStore()
        store.set("users", "[]")
        assert store.get("users") == "[]"
        assert "users" in store

    def test_missing_key_is_none(self):
        """Test absent keys."""
        store = InMemoryKeyValueStore()
        assert store.get("session") is None
        assert "session" not in store

    def test_delete_is_idempotent(self):
        """Test deleting an absent key."""
        store = InMemoryKeyValueStore({"a": "1"})
        store.delete("a")
        store.delete("a")
        assert list(store.keys()) == []


class TestJsonFileStore:
    """Tests for JsonFileKeyValueStore."""

    def test_values_survive_reopen(self, tmp_path):
        """Test that writes are durable."""
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("transactions:abc", '[{"x": 1}]')

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get("transactions:abc") == '[{"x": 1}]'

    def test_file_is_plain_json(self, tmp_path):
        """Test the on-disk format is a string-to-string object."""
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("session", "{}")
        assert json.loads(path.read_text(encoding="utf-8")) == {"session": "{}"}

    def test_creates_parent_directory(self, tmp_path):
        """Test writing into a directory that does not exist yet."""
        path = tmp_path / "nested" / "dir" / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("users", "[]")
        assert path.exists()

    def test_delete_persists(self, tmp_path):
        """Test delete is written through."""
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("session", "{}")
        store.delete("session")
        assert JsonFileKeyValueStore(path).get("session") is None

    def test_corrupt_file_fails_closed(self, tmp_path):
        """Test an unparseable file is moved aside and the store starts empty."""
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")

        store = JsonFileKeyValueStore(path)

        assert list(store.keys()) == []
        assert (tmp_path / "data.json.corrupt").read_text(encoding="utf-8") == "{not json"

    def test_wrong_shape_fails_closed(self, tmp_path):
        """Test a JSON file that is not a string map is treated as empty."""
        path = tmp_path / "data.json"
        path.write_text('{"users": [1, 2, 3]}', encoding="utf-8")

        store = JsonFileKeyValueStore(path)

        assert store.get("users") is None

    def test_no_temp_files_left_behind(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        path = tmp_path / "data.json"
        store = JsonFileKeyValueStore(path)
        store.set("a", "1")
        store.set("b", "2")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["data.json"]


class TestTypedDocuments:
    """Tests for load_document / save_document."""

    def test_save_then_load(self):
        """Test a typed round trip."""
        store = InMemoryKeyValueStore()
        adapter = TypeAdapter(list[int])
        save_document(store, "numbers", adapter, [1, 2, 3])
        assert load_document(store, "numbers", adapter) == [1, 2, 3]

    def test_absent_key_loads_none(self):
        """Test missing documents."""
        store = InMemoryKeyValueStore()
        assert load_document(store, "numbers", TypeAdapter(list[int])) is None

    def test_invalid_document_loads_none_and_is_audited(self):
        """Test fail-closed loading."""
        store = InMemoryKeyValueStore({"numbers": "definitely not json"})
        audit = AuditLogger()

        result = load_document(store, "numbers", TypeAdapter(list[int]), audit)

        assert result is None
        events = audit.recent_events()
        assert len(events) == 1
        assert events[0].event_type == AuditEventType.STORAGE_RECOVERED
        assert events[0].details["key"] == "numbers"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
