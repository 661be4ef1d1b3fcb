"""Unit tests for the key-value stores."""

import json

import pytest

from mcp_playground.config import Settings
from mcp_playground.infrastructure.storage.kv_store import (
    InMemoryStore,
    JsonFileStore,
    build_store,
)
from mcp_playground.shared.exceptions import StorageError


class TestInMemoryStore:
    """Tests for the process-local store."""

    def test_get_default(self):
        """Test that a missing key returns the default."""
        store = InMemoryStore()
        assert store.get("missing") is None
        assert store.get("missing", {}) == {}

    def test_values_are_copies(self):
        """Test that mutating a read value does not change the store."""
        store = InMemoryStore({"files": {"/a": "1"}})

        files = store.get("files")
        files["/b"] = "2"

        assert store.get("files") == {"/a": "1"}

    def test_delete_and_keys(self):
        """Test delete and prefix listing."""
        store = InMemoryStore({"mcp_a": 1, "mcp_b": 2, "other": 3})

        store.delete("mcp_a")
        store.delete("never-there")

        assert store.keys("mcp_") == ["mcp_b"]
        assert sorted(store.keys()) == ["mcp_b", "other"]


class TestJsonFileStore:
    """Tests for the JSON-file store."""

    def test_persists_across_instances(self, tmp_path):
        """Test that values survive reopening the file."""
        path = tmp_path / "store.json"
        JsonFileStore(path).set("mcp_playground_files", {"/a": "hi"})

        reopened = JsonFileStore(path)

        assert reopened.get("mcp_playground_files") == {"/a": "hi"}
        assert json.loads(path.read_text())["mcp_playground_files"] == {"/a": "hi"}

    def test_missing_file_is_empty(self, tmp_path):
        """Test that a missing file starts empty and creates parents on write."""
        store = JsonFileStore(tmp_path / "nested" / "store.json")

        assert store.keys() == []
        store.set("k", [1, 2])
        assert (tmp_path / "nested" / "store.json").exists()

    def test_delete_rewrites_file(self, tmp_path):
        """Test that delete is persisted."""
        path = tmp_path / "store.json"
        store = JsonFileStore(path)
        store.set("k", 1)

        store.delete("k")

        assert json.loads(path.read_text()) == {}

    def test_corrupt_file_raises(self, tmp_path):
        """Test that unreadable JSON raises StorageError."""
        path = tmp_path / "store.json"
        path.write_text("{not json")

        with pytest.raises(StorageError):
            JsonFileStore(path)

    def test_non_object_file_raises(self, tmp_path):
        """Test that a JSON document that is not an object is rejected."""
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")

        with pytest.raises(StorageError) as exc_info:
            JsonFileStore(path)
        assert "JSON object" in exc_info.value.message


class TestBuildStore:
    """Tests for store selection from settings."""

    def test_in_memory_by_default(self):
        """Test that an empty STORE_PATH gives an in-memory store."""
        settings = Settings(_env_file=None, store_path="")
        assert isinstance(build_store(settings), InMemoryStore)

    def test_file_store_when_path_set(self, tmp_path):
        """Test that STORE_PATH selects the JSON-file store."""
        settings = Settings(_env_file=None, store_path=str(tmp_path / "s.json"))
        assert isinstance(build_store(settings), JsonFileStore)
