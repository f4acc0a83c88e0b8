# src/tracktime/tracking/engine.py

from __future__ import annotations

"""
Tracking engine.

Owns the one process-wide tracking session:
- IDLE     -> start_tracking(task_id) -> TRACKING
- TRACKING -> stop_tracking()         -> IDLE (commits a Record to the task)

At most one task is tracked at a time, across all tasks. Calls that do not fit
the current state are no-ops and report it through their return value.
Elapsed time of the running session is never cached; it is recomputed from
the session start on every read.
"""

import logging
import math
import threading
import uuid
from datetime import datetime

from ..core.ports import Clock, SystemClock
from .aggregate import to_date_string
from .models import IDLE_SESSION, EngineState, Record, Task, TrackingSession
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, floored, never negative."""
    return max(0, math.floor((end - start).total_seconds()))


class TrackingEngine:
    def __init__(self, store: TaskStore, *, clock: Clock | None = None) -> None:
        self._store = store
        self._clock: Clock = clock or SystemClock()
        self._session: TrackingSession = IDLE_SESSION
        # Re-entrant: delete_task stops the session while holding the lock.
        self._lock = threading.RLock()

    # ---- read accessors ----

    @property
    def session(self) -> TrackingSession:
        return self._session

    @property
    def state(self) -> EngineState:
        return EngineState.TRACKING if self._session.is_tracking else EngineState.IDLE

    @property
    def is_tracking(self) -> bool:
        return self._session.is_tracking

    def active_task(self) -> Task | None:
        session = self._session
        if not session.is_tracking or session.active_task_id is None:
            return None
        return self._store.get_task(session.active_task_id)

    def get_live_elapsed(self, now: datetime | None = None) -> int:
        """
        Committed total of the active task plus the running session.

        Returns 0 when idle, or when the active task has been removed.
        """
        session = self._session
        if not session.is_tracking or session.start_time is None or session.active_task_id is None:
            return 0
        task = self._store.get_task(session.active_task_id)
        if task is None:
            return 0
        current = now if now is not None else self._clock.now()
        return task.total_time + elapsed_seconds(session.start_time, current)

    # ---- transitions ----

    def start_tracking(self, task_id: str) -> bool:
        with self._lock:
            if self._session.is_tracking:
                logger.debug(
                    "start_tracking ignored: already tracking task_id=%s",
                    self._session.active_task_id,
                )
                return False
            if self._store.get_task(task_id) is None:
                logger.debug("start_tracking ignored: unknown task_id=%s", task_id)
                return False

            start = self._clock.now()
            self._session = TrackingSession(active_task_id=task_id, start_time=start)
            logger.info("Tracking started task_id=%s at=%s", task_id, start.isoformat())
            return True

    def stop_tracking(self) -> Record | None:
        """
        Finish the running session and commit it to its task.

        Returns the committed Record; None when idle or when the task vanished
        meanwhile (the record is dropped, the session is cleared either way).
        """
        with self._lock:
            session = self._session
            if not session.is_tracking or session.start_time is None or session.active_task_id is None:
                logger.debug("stop_tracking ignored: idle")
                return None

            end = self._clock.now()
            record = Record(
                id=uuid.uuid4().hex,
                start_time=session.start_time,
                end_time=end,
                duration=elapsed_seconds(session.start_time, end),
                date=to_date_string(session.start_time),
            )
            self._session = IDLE_SESSION

            if not self._store.append_record(session.active_task_id, record):
                logger.warning(
                    "Task %s no longer exists; discarding record of %ss",
                    session.active_task_id,
                    record.duration,
                )
                return None

            logger.info(
                "Tracking stopped task_id=%s duration=%ss date=%s",
                session.active_task_id,
                record.duration,
                record.date,
            )
            return record

    def delete_task(self, task_id: str) -> bool:
        """Remove a task, stopping (and committing) its session first if it is the active one."""
        with self._lock:
            if self._session.active_task_id == task_id:
                self.stop_tracking()
            return self._store.delete_task(task_id)
