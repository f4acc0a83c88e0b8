# src/tracktime/tracking/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class Category(StrEnum):
    """Task category chosen when the task is created."""

    WORK = "Work"
    STUDY = "Study"
    LEISURE = "Leisure"
    HEALTH = "Health"
    PERSONAL = "Personal"

    @classmethod
    def from_raw(cls, raw: object) -> Category:
        if not isinstance(raw, str) or not raw.strip():
            return cls.WORK
        text = raw.strip()
        for cat in cls:
            if cat.value.lower() == text.lower():
                return cat
        return _LEGACY_CATEGORY_LABELS.get(text, cls.WORK)


# Labels written by older exports of the task list.
_LEGACY_CATEGORY_LABELS: dict[str, Category] = {
    "工作": Category.WORK,
    "学习": Category.STUDY,
    "娱乐": Category.LEISURE,
    "健康": Category.HEALTH,
    "个人": Category.PERSONAL,
}


class View(StrEnum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def from_raw(cls, raw: object) -> View | None:
        if not isinstance(raw, str) or not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class EngineState(StrEnum):
    IDLE = "idle"
    TRACKING = "tracking"


@dataclass(slots=True, frozen=True)
class Record:
    """
    One finished tracking session.

    `date` is the local calendar day of `start_time` (YYYY-MM-DD) and is what
    view filtering compares against.
    """

    id: str
    start_time: datetime
    end_time: datetime
    duration: int
    date: str


@dataclass(slots=True)
class Task:
    id: str
    name: str
    category: Category
    color: str
    records: list[Record] = field(default_factory=list)
    total_time: int = 0


@dataclass(slots=True, frozen=True)
class TrackingSession:
    active_task_id: str | None = None
    start_time: datetime | None = None

    @property
    def is_tracking(self) -> bool:
        return self.active_task_id is not None and self.start_time is not None


IDLE_SESSION = TrackingSession()
