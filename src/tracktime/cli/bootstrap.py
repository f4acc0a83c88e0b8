# src/tracktime/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (key-value store, task store, engine, clock).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Clock, KeyValueStore, SystemClock
from ..core.state import AppState
from ..storage.kv_store import SqliteKVStore, StorageError
from ..tracking.engine import TrackingEngine
from ..tracking.models import Category, View
from ..tracking.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)


def _open_kv_store(settings) -> KeyValueStore | None:
    try:
        return SqliteKVStore(settings.store_db_path, quota_bytes=settings.storage_quota_bytes)
    except (OSError, StorageError):
        # No usable storage: run in memory only rather than refusing to start.
        logger.exception("Cannot open task storage at %s; running in memory only.", settings.store_db_path)
        return None


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/kv/clock injectable makes the app easier to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = _open_kv_store(settings)

    clock = clock or SystemClock()
    store = TaskStore(kv, storage_key=settings.storage_key)
    if kv is None:
        store.persistence_error = "storage unavailable"

    return AppState(
        settings=settings,
        task_store=store,
        engine=TrackingEngine(store, clock=clock),
        clock=clock,
        view=View.from_raw(getattr(settings, "default_view", None)) or View.TODAY,
        category=Category.from_raw(getattr(settings, "default_category", None)),
    )


def shutdown(state: AppState) -> None:
    """
    Best-effort shutdown (no exceptions should escape).

    A running session is committed so time tracked so far is not lost.
    """
    try:
        record = state.engine.stop_tracking()
        if record is not None:
            logger.info("Committed running session on shutdown (%ss).", record.duration)
    except Exception:
        logger.exception("Failed to stop tracking on shutdown.")
