# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tracktime.cli.bootstrap import create_initial_state
from tracktime.core.state import AppState
from tracktime.tracking.engine import TrackingEngine
from tracktime.tracking.task_store import TaskStore

from .fakes import FakeClock, MemoryKVStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tracktime-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        store_db_path=tmp_path / "tracktime.sqlite3",
        storage_key="timeTrackerTasks",
        storage_quota_bytes=0,
        default_view="today",
        default_category="Work",
        tick_interval_seconds=0.01,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def kv() -> MemoryKVStore:
    return MemoryKVStore()


@pytest.fixture()
def store(kv: MemoryKVStore) -> TaskStore:
    return TaskStore(kv)


@pytest.fixture()
def engine(store: TaskStore, clock: FakeClock) -> TrackingEngine:
    return TrackingEngine(store, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, kv: MemoryKVStore, clock: FakeClock) -> AppState:
    """AppState wired with an in-memory key-value store and a fake clock."""
    return create_initial_state(settings=settings, kv=kv, clock=clock)
