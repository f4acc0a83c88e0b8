# src/tracktime/tracking/aggregate.py

"""
View filtering and time rollups.

Everything here is a pure function of its arguments. "Now" is always passed in
explicitly, so results never depend on the system clock.

Filtering compares calendar-date strings (YYYY-MM-DD), which sort the same way
the dates do:
- today -> record date equals today
- week  -> record date >= (now - 7 days)
- month -> record date >= (now - 1 calendar month)
Week/month have no upper bound, so future-dated records still count.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from .models import Record, Task, View


@dataclass(slots=True, frozen=True)
class Summary:
    task_count: int
    total_seconds: int


def to_date_string(dt: datetime) -> str:
    """Local calendar date of `dt` as YYYY-MM-DD (naive datetimes are taken as local)."""
    return dt.astimezone().strftime("%Y-%m-%d")


def view_cutoff(view: View | str, now: datetime) -> str | None:
    """Lowest date string included by `view`, or None for an unknown view."""
    if view == View.TODAY:
        return to_date_string(now)
    if view == View.WEEK:
        return to_date_string(now - timedelta(days=7))
    if view == View.MONTH:
        # Calendar-month step; day is clamped (Mar 31 -> Feb 28/29).
        return to_date_string(now - relativedelta(months=1))
    return None


def _matches(date: str, view: View | str, cutoff: str | None) -> bool:
    if cutoff is None:
        return True
    if view == View.TODAY:
        return date == cutoff
    return date >= cutoff


def is_in_view(date: str, view: View | str, now: datetime) -> bool:
    return _matches(date, view, view_cutoff(view, now))


def filter_records(records: Iterable[Record], view: View | str, now: datetime) -> list[Record]:
    """Records inside `view`, in their original chronological order."""
    cutoff = view_cutoff(view, now)
    return [r for r in records if _matches(r.date, view, cutoff)]


def total_duration(records: Iterable[Record]) -> int:
    return sum(r.duration for r in records)


def task_filtered_total(task: Task, view: View | str, now: datetime) -> int:
    return total_duration(filter_records(task.records, view, now))


def grand_total(tasks: Iterable[Task], view: View | str, now: datetime) -> int:
    return sum(task_filtered_total(t, view, now) for t in tasks)


def summarize(tasks: Iterable[Task], view: View | str, now: datetime) -> Summary:
    items = list(tasks)
    return Summary(task_count=len(items), total_seconds=grand_total(items, view, now))


def format_time(seconds: int) -> str:
    """Seconds -> HH:MM:SS (hours keep growing past 99)."""
    seconds = max(0, int(seconds))
    hrs, rem = divmod(seconds, 3600)
    mins, secs = divmod(rem, 60)
    return f"{hrs:02d}:{mins:02d}:{secs:02d}"
