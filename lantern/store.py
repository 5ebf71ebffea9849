"""Keyed string store and the JSON-array collections kept inside it.

The core only ever talks to a ``get``/``set`` store. Two backings ship
here: an in-process dict and a JSON file on disk. Collections are stored as
JSON arrays under fixed keys and are rewritten whole on every upsert.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Hashable
from pathlib import Path
from typing import Any, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNREADABLE_SUFFIX = ".unreadable"

# Upsert is read-filter-append-write; one process-wide lock keeps that
# sequence whole across every store when several threads share a process.
_upsert_lock = threading.RLock()


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store, mostly for tests and embedding."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Persist all keys in one JSON object file.

    Writes go to a temp file in the same directory and are moved into place,
    so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Store file {self._path} does not hold a JSON object")
        return raw

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError as exc:
            logger.warning("Store file %s unreadable (%s); starting fresh", self._path, exc)
            data = {}
        data[key] = value

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=self._path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved key %s to %s", key, self._path)


def _decode_collection(raw: str | None, key: str, decode: Callable[[Any], T]) -> list[T]:
    if not raw:
        return []
    parsed = json.loads(raw)
    if not isinstance(parsed, list):
        raise ValueError(f"Payload under {key} is not a list")
    return [decode(item) for item in parsed]


def read_collection(store: KeyValueStore, key: str, decode: Callable[[Any], T]) -> list[T]:
    """Decode the JSON array under ``key``; [] when absent or malformed."""
    try:
        return _decode_collection(store.get(key), key, decode)
    except (OSError, ValueError, RecursionError) as exc:
        logger.warning("Could not read %s: %s", key, exc)
        return []


def write_collection(store: KeyValueStore, key: str, items: list[T], encode: Callable[[T], dict]) -> None:
    store.set(key, json.dumps([encode(item) for item in items]))


def upsert_item(
    store: KeyValueStore,
    key: str,
    item: T,
    identity: Callable[[T], Hashable],
    decode: Callable[[Any], T],
    encode: Callable[[T], dict],
) -> list[T]:
    """Replace any item with the same identity, append ``item``, write back.

    An unreadable payload is copied to ``<key>.unreadable`` before the
    collection is rewritten, so replacing it never loses the old text.
    """
    with _upsert_lock:
        raw = store.get(key)
        try:
            existing = _decode_collection(raw, key, decode)
        except (ValueError, RecursionError) as exc:
            backup_key = f"{key}{UNREADABLE_SUFFIX}"
            logger.warning("Payload under %s is unreadable (%s); keeping it under %s", key, exc, backup_key)
            store.set(backup_key, raw)
            existing = []

        target = identity(item)
        items = [record for record in existing if identity(record) != target]
        items.append(item)
        write_collection(store, key, items, encode)
    return items
