# src/tracktime/connectors/render.py

from __future__ import annotations

"""
Plain-text rendering of tracker state for the console.

Ordering for display (newest record first) is decided here; the tracking core
keeps records chronological.
"""

from datetime import datetime

from ..tracking.aggregate import filter_records, format_time, summarize, task_filtered_total
from ..tracking.engine import TrackingEngine
from ..tracking.models import Record, Task, View
from ..tracking.ticker import TickSnapshot

VIEW_LABELS = {
    View.TODAY: "Today",
    View.WEEK: "This week",
    View.MONTH: "This month",
}


def _ts(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def render_record(record: Record) -> str:
    end = record.end_time.astimezone().strftime("%H:%M:%S")
    return f"{_ts(record.start_time)} - {end}  {format_time(record.duration)}"


def render_task(
    index: int,
    task: Task,
    view: View,
    now: datetime,
    *,
    active: bool = False,
    history_limit: int = 5,
) -> str:
    marker = "*" if active else " "
    head = (
        f"{marker}{index:>2}. {task.name} [{task.category.value}]  "
        f"{format_time(task_filtered_total(task, view, now))}"
    )
    records = filter_records(task.records, view, now)
    if not records or history_limit <= 0:
        return head

    lines = [head]
    for r in list(reversed(records))[:history_limit]:
        lines.append(f"       {render_record(r)}")
    hidden = len(records) - history_limit
    if hidden > 0:
        lines.append(f"       ... {hidden} older record(s)")
    return "\n".join(lines)


def render_task_list(tasks: list[Task], engine: TrackingEngine, view: View, now: datetime) -> str:
    if not tasks:
        return "No tasks yet. Add one with /add <name>."

    active_id = engine.session.active_task_id
    lines = [f"{VIEW_LABELS.get(view, str(view))}:"]
    for i, task in enumerate(tasks, start=1):
        lines.append(render_task(i, task, view, now, active=task.id == active_id))
    return "\n".join(lines)


def render_summary(tasks: list[Task], view: View, now: datetime) -> str:
    summary = summarize(tasks, view, now)
    return (
        f"Summary ({VIEW_LABELS.get(view, str(view))}):\n"
        f"  Tasks: {summary.task_count}\n"
        f"  Tracked: {format_time(summary.total_seconds)}"
    )


def render_tick(snapshot: TickSnapshot) -> str:
    if not snapshot.session.is_tracking or snapshot.session.start_time is None:
        return "Not tracking."
    name = snapshot.active_task_name or "(deleted task)"
    started = snapshot.session.start_time.astimezone().strftime("%H:%M:%S")
    return f"Tracking: {name} (since {started})  {format_time(snapshot.live_elapsed)}"
