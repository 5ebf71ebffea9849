"""Tests for the keyed store and JSON collections."""

from __future__ import annotations

import json
from pathlib import Path

from lantern.store import (
    UNREADABLE_SUFFIX,
    JsonFileStore,
    MemoryStore,
    read_collection,
    upsert_item,
    write_collection,
)


def _decode(item: dict) -> dict:
    return dict(item)


def test_memory_store_get_set():
    store = MemoryStore()
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"


def test_json_file_store_persists_across_instances(tmp_path: Path):
    path = tmp_path / "data" / "lantern.json"
    JsonFileStore(path).set("a", "[1, 2]")
    JsonFileStore(path).set("b", "[]")

    reopened = JsonFileStore(path)
    assert reopened.get("a") == "[1, 2]"
    assert reopened.get("b") == "[]"
    assert reopened.get("missing") is None
    assert [p.name for p in path.parent.iterdir()] == ["lantern.json"]


def test_json_file_store_missing_file_reads_none(tmp_path: Path):
    assert JsonFileStore(tmp_path / "nope.json").get("a") is None


def test_corrupt_file_reads_empty_and_is_replaced_on_write(tmp_path: Path):
    path = tmp_path / "lantern.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)

    assert read_collection(store, "items", _decode) == []

    store.set("items", "[]")
    assert json.loads(path.read_text(encoding="utf-8")) == {"items": "[]"}


def test_read_collection_rejects_non_list_payload():
    store = MemoryStore({"items": '{"a": 1}'})
    assert read_collection(store, "items", _decode) == []


def test_read_collection_survives_store_errors():
    class BrokenStore:
        def get(self, key: str) -> str | None:
            raise OSError("disk gone")

        def set(self, key: str, value: str) -> None:
            raise OSError("disk gone")

    assert read_collection(BrokenStore(), "items", _decode) == []


def test_upsert_replaces_by_identity_and_appends():
    store = MemoryStore()
    write_collection(store, "items", [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}], dict)

    items = upsert_item(store, "items", {"id": 1, "v": "c"}, lambda i: i["id"], _decode, dict)

    assert items == [{"id": 2, "v": "b"}, {"id": 1, "v": "c"}]
    assert read_collection(store, "items", _decode) == items


def test_read_collection_survives_deep_nesting():
    store = MemoryStore({"items": "[" * 100000 + "]" * 100000})
    assert read_collection(store, "items", _decode) == []


def test_upsert_keeps_unreadable_payload_before_replacing():
    raw = '[{"id": 1}, {"id": 2, "bad": true}]'
    store = MemoryStore({"items": raw})

    def strict(item: dict) -> dict:
        if set(item) != {"id"}:
            raise ValueError("unexpected field")
        return dict(item)

    items = upsert_item(store, "items", {"id": 3}, lambda i: i["id"], strict, dict)

    assert items == [{"id": 3}]
    assert store.get(f"items{UNREADABLE_SUFFIX}") == raw
