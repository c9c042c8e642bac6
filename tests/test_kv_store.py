"""Tests for the flat-file key-value stores."""

import json

import pytest

from jobcv.storage.kv_store import JsonFileStore, MemoryStore


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "data" / "templates.json")


class TestJsonFileStore:
    def test_set_and_get(self, store):
        store.set("backend", "CV text")
        assert store.get("backend") == "CV text"

    def test_get_nonexistent(self, store):
        assert store.get("missing") is None

    def test_creates_parent_directory(self, tmp_path):
        JsonFileStore(tmp_path / "a" / "b" / "store.json").set("k", "v")
        assert (tmp_path / "a" / "b" / "store.json").exists()

    def test_overwrite_on_name_collision(self, store):
        store.set("backend", "old")
        store.set("backend", "new")
        assert store.get("backend") == "new"
        assert store.all() == {"backend": "new"}

    def test_delete(self, store):
        store.set("backend", "CV")
        assert store.delete("backend") is True
        assert store.get("backend") is None

    def test_delete_missing_returns_false(self, store):
        assert store.delete("nope") is False

    def test_all(self, store):
        store.set("a", "1")
        store.set("b", "2")
        assert store.all() == {"a": "1", "b": "2"}

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "s.json"
        JsonFileStore(path).set("name", "zażółć gęślą jaźń")
        assert JsonFileStore(path).get("name") == "zażółć gęślą jaźń"

    def test_file_is_plain_json(self, store):
        store.set("x", "y")
        assert json.loads(store.path.read_text(encoding="utf-8")) == {"x": "y"}

    def test_corrupt_file_reads_as_empty(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        assert store.all() == {}
        store.set("fresh", "start")
        assert store.all() == {"fresh": "start"}

    def test_non_object_file_reads_as_empty(self, store):
        store.path.write_text("[1, 2]", encoding="utf-8")
        assert store.all() == {}


class TestMemoryStore:
    def test_round_trip(self):
        store = MemoryStore({"a": "1"})
        store.set("b", "2")
        assert store.all() == {"a": "1", "b": "2"}
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("b") == "2"

    def test_all_returns_copy(self):
        store = MemoryStore()
        store.all()["x"] = "y"
        assert store.get("x") is None
