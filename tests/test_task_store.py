# tests/test_task_store.py

from __future__ import annotations

import json
import random
from datetime import datetime, timedelta

from tracktime.tracking.engine import TrackingEngine
from tracktime.tracking.models import Category, Record
from tracktime.tracking.task_store import COLOR_PALETTE, DEFAULT_STORAGE_KEY, TaskStore

from .fakes import BrokenKVStore, FailingKVStore, FakeClock, MemoryKVStore


def _record(start: datetime, duration: int) -> Record:
    return Record(
        id=f"r{duration}",
        start_time=start,
        end_time=start + timedelta(seconds=duration),
        duration=duration,
        date=start.strftime("%Y-%m-%d"),
    )


def test_create_task_rejects_blank_names(store: TaskStore, kv: MemoryKVStore) -> None:
    assert store.create_task("") is None
    assert store.create_task("   ") is None
    assert len(store) == 0
    assert kv.writes == []


def test_create_task_defaults(store: TaskStore) -> None:
    task = store.create_task("  Deep work  ", Category.STUDY)

    assert task is not None
    assert task.name == "Deep work"
    assert task.category == Category.STUDY
    assert task.color in COLOR_PALETTE
    assert task.records == []
    assert task.total_time == 0
    assert task.id


def test_ids_are_unique_and_order_is_insertion(store: TaskStore) -> None:
    names = [f"t{i}" for i in range(20)]
    tasks = [store.create_task(n) for n in names]

    assert len({t.id for t in tasks if t is not None}) == 20
    assert [t.name for t in store.list_tasks()] == names
    assert [t.name for t in store] == names


def test_color_comes_from_injected_rng(kv: MemoryKVStore) -> None:
    first = TaskStore(kv, rng=random.Random(7)).create_task("x")
    second = TaskStore(MemoryKVStore(), rng=random.Random(7)).create_task("x")
    assert first is not None and second is not None
    assert first.color == second.color


def test_delete_is_idempotent(store: TaskStore) -> None:
    task = store.create_task("Cleanup")
    assert task is not None

    assert store.delete_task(task.id) is True
    assert store.delete_task(task.id) is False
    assert store.get_task(task.id) is None
    assert store.count_tasks() == 0


def test_every_mutation_writes_full_collection(store: TaskStore, kv: MemoryKVStore) -> None:
    a = store.create_task("a", Category.HEALTH)
    b = store.create_task("b")
    assert a is not None and b is not None
    store.append_record(a.id, _record(datetime(2024, 6, 10, 9), 90))
    store.delete_task(b.id)

    assert len(kv.writes) == 4
    key, raw = kv.writes[-1]
    assert key == DEFAULT_STORAGE_KEY

    data = json.loads(raw)
    assert [t["name"] for t in data] == ["a"]
    item = data[0]
    assert set(item) == {"id", "name", "records", "totalTime", "category", "color"}
    assert item["category"] == "Health"
    assert item["totalTime"] == 90
    assert set(item["records"][0]) == {"id", "startTime", "endTime", "duration", "date"}
    assert item["records"][0]["date"] == "2024-06-10"


def test_append_record_to_missing_task(store: TaskStore, kv: MemoryKVStore) -> None:
    assert store.append_record("gone", _record(datetime(2024, 6, 10, 9), 5)) is False
    assert kv.writes == []


def test_reload_round_trip(kv: MemoryKVStore) -> None:
    clock = FakeClock()
    store = TaskStore(kv)
    engine = TrackingEngine(store, clock=clock)
    task = store.create_task("Piano", Category.LEISURE)
    assert task is not None
    engine.start_tracking(task.id)
    clock.advance(42)
    engine.stop_tracking()

    reloaded = TaskStore(kv)
    again = reloaded.get_task(task.id)

    assert again is not None
    assert again.name == "Piano"
    assert again.category == Category.LEISURE
    assert again.color == task.color
    assert again.total_time == 42
    assert again.records == task.records


def test_load_missing_or_malformed_gives_empty() -> None:
    assert len(TaskStore(MemoryKVStore())) == 0
    assert len(TaskStore(MemoryKVStore({DEFAULT_STORAGE_KEY: ""}))) == 0
    assert len(TaskStore(MemoryKVStore({DEFAULT_STORAGE_KEY: "{not json"}))) == 0
    assert len(TaskStore(MemoryKVStore({DEFAULT_STORAGE_KEY: '{"a": 1}'}))) == 0
    assert len(TaskStore(None)) == 0


def test_load_recomputes_totals_and_skips_bad_entries() -> None:
    raw = json.dumps(
        [
            {
                "id": 1718000000000,
                "name": "Legacy",
                "records": [
                    {
                        "id": 1,
                        "startTime": "2024-06-10T01:00:00.000Z",
                        "endTime": "2024-06-10T01:10:00.000Z",
                        "duration": 600,
                        "date": "2024-06-10",
                    },
                    {"id": 2, "startTime": "garbage"},
                ],
                "totalTime": 99999,
                "category": "学习",
                "color": "bg-pink-500",
            },
            {"id": 2, "name": "   "},
            "not a task",
            {"id": "a", "name": "No records", "records": 5, "totalTime": 30},
            {"id": "b", "name": "Odd category", "records": [], "category": 3},
            {"id": "c", "name": "Bad record", "records": [{"id": 9, "startTime": "2024-06-10T09:00:00", "endTime": "2024-06-10T09:01:00", "duration": [60]}]},
        ]
    )
    store = TaskStore(MemoryKVStore({DEFAULT_STORAGE_KEY: raw}))

    tasks = store.list_tasks()
    assert [t.name for t in tasks] == ["Legacy", "No records", "Odd category", "Bad record"]
    no_records, odd_category, bad_record = tasks[1:]
    assert no_records.records == []
    assert no_records.total_time == 0
    assert odd_category.category == Category.WORK
    assert bad_record.records == []
    task = tasks[0]
    assert task.id == "1718000000000"
    assert task.category == Category.STUDY
    assert task.total_time == 600
    assert [r.duration for r in task.records] == [600]


def test_write_failure_degrades_to_memory() -> None:
    kv = FailingKVStore()
    store = TaskStore(kv)

    task = store.create_task("Offline")
    assert task is not None
    assert store.get_task(task.id) is task
    assert store.persistence_error is not None
    assert kv.data == {}

    store.create_task("Still works")
    assert len(store) == 2
    assert kv.attempts == 2

    kv.failing = False
    store.create_task("Back online")
    assert store.persistence_error is None
    assert len(json.loads(kv.data[DEFAULT_STORAGE_KEY])) == 3


def test_read_failure_starts_empty() -> None:
    store = TaskStore(BrokenKVStore())
    assert len(store) == 0
    assert store.persistence_error == "store offline"
    assert store.create_task("fresh") is not None


def test_custom_storage_key(kv: MemoryKVStore) -> None:
    store = TaskStore(kv, storage_key="other")
    store.create_task("x")
    assert "other" in kv.data
    assert DEFAULT_STORAGE_KEY not in kv.data


def test_category_parsing_ignores_non_strings() -> None:
    assert Category.from_raw(3) is Category.WORK
    assert Category.from_raw(None) is Category.WORK
    assert Category.from_raw(" leisure ") is Category.LEISURE
