# src/tracktime/tracking/task_store.py

from __future__ import annotations

import json
import logging
import random
import uuid
from collections.abc import Iterator
from datetime import datetime
from typing import Any

from ..core.ports import KeyValueStore
from ..storage.kv_store import StorageError
from .models import Category, Record, Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "timeTrackerTasks"

COLOR_PALETTE: tuple[str, ...] = (
    "bg-blue-500",
    "bg-green-500",
    "bg-red-500",
    "bg-yellow-500",
    "bg-purple-500",
    "bg-pink-500",
    "bg-indigo-500",
)


class TaskStore:
    """
    In-memory task collection persisted as one JSON blob.

    Persistence model:
    - the whole collection is loaded once, at construction
    - every mutation rewrites the whole collection under `storage_key` (last write wins)
    - a failing write is logged and remembered in `persistence_error`;
      the store keeps working in memory and retries on the next mutation

    Tracking sessions are not known here; stop-before-delete ordering lives in
    TrackingEngine.delete_task.
    """

    def __init__(
        self,
        kv: KeyValueStore | None,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        rng: random.Random | None = None,
    ) -> None:
        self._kv = kv
        self._key = storage_key
        self._rng = rng or random.Random()
        self._tasks: list[Task] = []
        self.persistence_error: str | None = None
        self.load()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- serialization ----

    @staticmethod
    def _record_to_dict(r: Record) -> dict[str, Any]:
        return {
            "id": r.id,
            "startTime": r.start_time.isoformat(),
            "endTime": r.end_time.isoformat(),
            "duration": r.duration,
            "date": r.date,
        }

    @staticmethod
    def _dict_to_record(d: dict[str, Any]) -> Record:
        start = datetime.fromisoformat(str(d["startTime"]).replace("Z", "+00:00"))
        end = datetime.fromisoformat(str(d["endTime"]).replace("Z", "+00:00"))
        return Record(
            id=str(d["id"]),
            start_time=start,
            end_time=end,
            duration=max(0, int(d.get("duration") or 0)),
            date=str(d.get("date") or start.astimezone().strftime("%Y-%m-%d")),
        )

    def _task_to_dict(self, t: Task) -> dict[str, Any]:
        return {
            "id": t.id,
            "name": t.name,
            "records": [self._record_to_dict(r) for r in t.records],
            "totalTime": t.total_time,
            "category": t.category.value,
            "color": t.color,
        }

    def _dict_to_task(self, d: dict[str, Any]) -> Task | None:
        name = str(d.get("name") or "").strip()
        if not name or d.get("id") is None:
            return None

        raw_records = d.get("records") or []
        if not isinstance(raw_records, list):
            logger.warning("Task id=%s has non-list records %r; loading it without records.", d.get("id"), raw_records)
            raw_records = []

        records: list[Record] = []
        for raw in raw_records:
            if not isinstance(raw, dict):
                continue
            try:
                records.append(self._dict_to_record(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed record in task id=%s: %r", d.get("id"), raw)

        return Task(
            id=str(d["id"]),
            name=name,
            category=Category.from_raw(d.get("category")),
            color=str(d.get("color") or self._pick_color()),
            records=records,
            # Recomputed so the total always matches the records actually loaded.
            total_time=sum(r.duration for r in records),
        )

    def serialize(self) -> str:
        return json.dumps([self._task_to_dict(t) for t in self._tasks], ensure_ascii=False)

    # ---- persistence ----

    def load(self) -> None:
        """Replace the in-memory collection with what the key-value store holds."""
        self._tasks = []
        if self._kv is None:
            return

        try:
            raw = self._kv.get(self._key)
        except StorageError as e:
            self.persistence_error = str(e)
            logger.exception("Failed to read tasks key=%s; starting empty.", self._key)
            return

        if not raw:
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.exception("Stored tasks key=%s are not valid JSON; starting empty.", self._key)
            return

        if not isinstance(data, list):
            logger.warning("Stored tasks key=%s are not a list; starting empty.", self._key)
            return

        seen: set[str] = set()
        for item in data:
            try:
                task = self._dict_to_task(item) if isinstance(item, dict) else None
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping unreadable task entry: %r", item, exc_info=True)
                continue
            if task is None or task.id in seen:
                logger.warning("Skipping malformed task entry: %r", item)
                continue
            seen.add(task.id)
            self._tasks.append(task)

        logger.info("Loaded %d tasks from key=%s", len(self._tasks), self._key)

    def _persist(self) -> None:
        if self._kv is None:
            return
        try:
            self._kv.set(self._key, self.serialize())
        except StorageError as e:
            if self.persistence_error is None:
                logger.warning("Persisting tasks failed; continuing in memory only: %s", e)
            else:
                logger.debug("Persisting tasks still failing: %s", e)
            self.persistence_error = str(e)
            return

        if self.persistence_error is not None:
            logger.info("Persisting tasks works again key=%s", self._key)
        self.persistence_error = None

    # ---- helpers ----

    def _pick_color(self) -> str:
        return self._rng.choice(COLOR_PALETTE)

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    # ---- public API ----

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def count_tasks(self) -> int:
        return len(self._tasks)

    def list_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def create_task(self, name: str, category: Category | str = Category.WORK) -> Task | None:
        clean = (name or "").strip()
        if not clean:
            logger.debug("create_task ignored: empty name")
            return None

        task = Task(
            id=uuid.uuid4().hex,
            name=clean,
            category=category if isinstance(category, Category) else Category.from_raw(category),
            color=self._pick_color(),
        )
        self._tasks.append(task)
        logger.info("Task created id=%s name=%r category=%s", task.id, task.name, task.category.value)
        self._persist()
        return task

    def delete_task(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete_task ignored: unknown id=%s", task_id)
            return False
        task = self._tasks.pop(idx)
        logger.info("Task deleted id=%s name=%r", task.id, task.name)
        self._persist()
        return True

    def append_record(self, task_id: str, record: Record) -> bool:
        """Attach a finished record to its task. False if the task is gone."""
        task = self.get_task(task_id)
        if task is None:
            return False
        task.records.append(record)
        task.total_time += record.duration
        logger.debug(
            "Record appended task_id=%s record_id=%s duration=%s total=%s",
            task_id,
            record.id,
            record.duration,
            task.total_time,
        )
        self._persist()
        return True
