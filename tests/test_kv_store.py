# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from tracktime.storage.kv_store import SqliteKVStore, StorageFullError
from tracktime.tracking.task_store import TaskStore


def test_get_set_replace(tmp_path: Path) -> None:
    kv = SqliteKVStore(tmp_path / "kv.sqlite3")

    assert kv.get("missing") is None
    kv.set("k", "v1")
    kv.set("k", "v2")
    assert kv.get("k") == "v2"

    # A second instance sees the same data.
    assert SqliteKVStore(tmp_path / "kv.sqlite3").get("k") == "v2"


def test_quota_rejects_oversized_write(tmp_path: Path) -> None:
    kv = SqliteKVStore(tmp_path / "kv.sqlite3", quota_bytes=10)

    kv.set("k", "12345")
    with pytest.raises(StorageFullError):
        kv.set("k", "x" * 11)
    assert kv.get("k") == "12345"

    # Replacing a key only counts the new value.
    kv.set("k", "x" * 10)
    with pytest.raises(StorageFullError):
        kv.set("other", "y")


def test_task_store_keeps_working_when_quota_is_hit(tmp_path: Path) -> None:
    kv = SqliteKVStore(tmp_path / "kv.sqlite3", quota_bytes=300)
    store = TaskStore(kv)

    first = store.create_task("fits")
    assert first is not None
    assert store.persistence_error is None

    for i in range(10):
        store.create_task(f"task number {i} with a fairly long name")

    assert len(store) == 11
    assert store.persistence_error is not None

    # The last successful write survives.
    assert len(TaskStore(kv)) >= 1
