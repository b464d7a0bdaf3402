"""Tests for the document store backends."""

import json

import pytest

from app.adapters.storage.in_memory import InMemoryDocumentStore
from app.adapters.storage.json_file import JsonFileDocumentStore
from app.core.app_factory import build_store
from app.core.config import StorageSettings
from app.core.errors import StorageAppError


class TestInMemoryDocumentStore:
    """CRUD semantics shared by every backend."""

    def test_insert_assigns_id_and_returns_copy(self) -> None:
        store = InMemoryDocumentStore()

        doc = store.insert("projects", {"slug": "a", "stack": ["Python"]})
        doc["stack"].append("mutated")

        assert doc["id"]
        assert store.find_one("projects", "slug", "a")["stack"] == ["Python"]

    def test_find_with_predicate(self) -> None:
        store = InMemoryDocumentStore()
        store.insert("tech", {"key": "a", "category": "tool"})
        store.insert("tech", {"key": "b", "category": "backend"})

        assert [d["key"] for d in store.find("tech", lambda d: d["category"] == "tool")] == ["a"]
        assert store.count("tech") == 2
        assert store.find("missing") == []

    def test_update_merges_changes(self) -> None:
        store = InMemoryDocumentStore()
        store.insert("projects", {"slug": "a", "title": "Old", "order": 1})

        updated = store.update("projects", "slug", "a", {"title": "New"})

        assert updated["title"] == "New"
        assert updated["order"] == 1
        assert store.update("projects", "slug", "missing", {"title": "x"}) is None

    def test_upsert_creates_missing_document(self) -> None:
        store = InMemoryDocumentStore()

        doc = store.update("sections", "key", "hero", {"title": "Hi"}, upsert=True)

        assert doc["key"] == "hero"
        assert doc["title"] == "Hi"
        assert store.count("sections") == 1

    def test_delete_returns_removed_document(self) -> None:
        store = InMemoryDocumentStore()
        store.insert("projects", {"slug": "a"})

        assert store.delete("projects", "slug", "a")["slug"] == "a"
        assert store.delete("projects", "slug", "a") is None
        assert store.count("projects") == 0

    def test_clear_one_or_all_collections(self) -> None:
        store = InMemoryDocumentStore({"projects": [{"slug": "a"}], "tech": [{"key": "b"}]})

        store.clear("projects")
        assert store.snapshot() == {"tech": [{"key": "b"}]}

        store.clear()
        assert store.snapshot() == {}


class TestJsonFileDocumentStore:
    """Writes are flushed to disk and reloaded on startup."""

    def test_missing_file_starts_empty(self, tmp_path) -> None:
        store = JsonFileDocumentStore(str(tmp_path / "data.json"))

        assert store.find("projects") == []

    def test_writes_persist_across_instances(self, tmp_path) -> None:
        path = tmp_path / "nested" / "data.json"
        store = JsonFileDocumentStore(str(path))
        store.insert("projects", {"slug": "a", "title": "A"})
        store.update("projects", "slug", "a", {"title": "B"})

        reloaded = JsonFileDocumentStore(str(path))

        assert reloaded.find_one("projects", "slug", "a")["title"] == "B"
        assert json.loads(path.read_text(encoding="utf-8"))["projects"][0]["title"] == "B"
        assert not list(path.parent.glob("*.tmp"))

    def test_corrupt_file_raises_storage_error(self, tmp_path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageAppError) as exc_info:
            JsonFileDocumentStore(str(path))

        assert exc_info.value.status_code == 500

    def test_non_object_file_raises_storage_error(self, tmp_path) -> None:
        path = tmp_path / "data.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(StorageAppError):
            JsonFileDocumentStore(str(path))


class TestBuildStore:
    def test_memory_backend(self) -> None:
        assert isinstance(build_store(StorageSettings(backend="memory")), InMemoryDocumentStore)

    def test_json_backend(self, tmp_path) -> None:
        store = build_store(StorageSettings(backend="json", path=str(tmp_path / "d.json")))

        assert isinstance(store, JsonFileDocumentStore)
        assert store.path == str(tmp_path / "d.json")

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError):
            build_store(StorageSettings(backend="mongo"))
