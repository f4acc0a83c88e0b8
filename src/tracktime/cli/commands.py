# src/tracktime/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..connectors.render import VIEW_LABELS, render_summary, render_task_list, render_tick
from ..core.state import AppState
from ..tracking.aggregate import format_time
from ..tracking.models import Category, Task, View
from ..tracking.ticker import TickSnapshot, run_ticker

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

MAX_WATCH_SECONDS = 3600


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /start, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task(state: AppState, ref: str) -> Task | None:
    """
    Find a task by 1-based list position, full id, or unique id prefix (4+ chars).
    """
    ref = ref.strip()
    if not ref:
        return None

    tasks = state.task_store.list_tasks()
    if ref.isdigit():
        pos = int(ref)
        if 1 <= pos <= len(tasks):
            return tasks[pos - 1]

    exact = state.task_store.get_task(ref)
    if exact is not None:
        return exact

    if len(ref) >= 4:
        matches = [t for t in tasks if t.id.startswith(ref)]
        if len(matches) == 1:
            return matches[0]
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <name>              -> add a task in the selected category
    /add <name> @<category>  -> add a task in the given category
    """
    category = state.category
    if args and args[-1].startswith("@"):
        category = Category.from_raw(args[-1][1:])
        args = args[:-1]

    task = state.task_store.create_task(" ".join(args), category)
    if task is None:
        return "Usage: /add <name> [@category]. The name cannot be empty."
    return f"Added task {len(state.task_store)}: {task.name} [{task.category.value}]"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <number|id>."
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}."

    was_active = state.engine.session.active_task_id == task.id
    state.engine.delete_task(task.id)
    suffix = " (tracking stopped)" if was_active else ""
    return f"Deleted task: {task.name}{suffix}"


def cmd_start(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /start <number|id>."

    active = state.engine.active_task()
    if state.engine.is_tracking:
        name = active.name if active is not None else state.engine.session.active_task_id
        return f"Already tracking {name}. Use /stop first."

    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}."

    if not state.engine.start_tracking(task.id):
        return f"Could not start tracking {task.name}."
    return f"Tracking started: {task.name}"


def cmd_stop(state: AppState, args: list[str]) -> str:
    if not state.engine.is_tracking:
        return "Not tracking."

    task = state.engine.active_task()
    record = state.engine.stop_tracking()
    if record is None:
        return "Tracking stopped; the task was deleted so nothing was recorded."
    name = task.name if task is not None else "task"
    return f"Tracking stopped: {name} +{format_time(record.duration)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list        -> tasks with totals for the selected view
    /list <view> -> same, for another view (selection unchanged)
    """
    view = state.view
    if args:
        parsed = View.from_raw(args[0])
        if parsed is None:
            return "Usage: /list [today|week|month]."
        view = parsed
    return render_task_list(state.task_store.list_tasks(), state.engine, view, state.clock.now())


def cmd_view(state: AppState, args: list[str]) -> str:
    if not args:
        return f"View: {VIEW_LABELS[state.view]}. Use /view today|week|month."
    parsed = View.from_raw(args[0])
    if parsed is None:
        return "Usage: /view today|week|month."
    state.view = parsed
    return f"View set to {VIEW_LABELS[parsed]}."


def cmd_category(state: AppState, args: list[str]) -> str:
    choices = ", ".join(c.value for c in Category)
    if not args:
        return f"Category for new tasks: {state.category.value}. Choices: {choices}."
    raw = " ".join(args)
    if raw.strip().lower() not in {c.value.lower() for c in Category}:
        return f"Unknown category: {raw}. Choices: {choices}."
    state.category = Category.from_raw(raw)
    return f"New tasks will use category {state.category.value}."


def cmd_status(state: AppState, args: list[str]) -> str:
    now = state.clock.now()
    engine = state.engine
    if engine.is_tracking:
        task = engine.active_task()
        name = task.name if task is not None else "(deleted task)"
        tracking = f"{name} {format_time(engine.get_live_elapsed(now))}"
    else:
        tracking = "idle"

    err = state.task_store.persistence_error
    storage = "OK" if err is None else f"in-memory only ({err})"
    return (
        "Status:\n"
        f"  Tracking: {tracking}\n"
        f"  View: {VIEW_LABELS[state.view]}\n"
        f"  Category for new tasks: {state.category.value}\n"
        f"  Tasks: {state.task_store.count_tasks()}\n"
        f"  Storage: {storage}"
    )


def cmd_summary(state: AppState, args: list[str]) -> str:
    return render_summary(state.task_store.list_tasks(), state.view, state.clock.now())


def cmd_watch(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /watch [seconds] -> print the live timer once per tick (default 10s)
    """
    seconds = 10
    if args:
        try:
            seconds = int(args[0])
        except ValueError:
            return "Usage: /watch [seconds]."
    seconds = max(1, min(MAX_WATCH_SECONDS, seconds))

    interval = float(getattr(state.settings, "tick_interval_seconds", 1.0) or 1.0)
    max_ticks = max(1, int(seconds / interval))
    last: list[str] = []

    def on_tick(snapshot: TickSnapshot) -> None:
        line = render_tick(snapshot)
        last[:] = [line]
        if emit:
            emit(line)

    try:
        asyncio.run(
            run_ticker(
                state.engine,
                on_tick,
                clock=state.clock,
                interval_seconds=interval,
                max_ticks=max_ticks,
            )
        )
    except KeyboardInterrupt:
        logger.debug("watch interrupted")

    if emit is not None:
        return "Watch finished."
    return last[0] if last else "Not tracking."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <name> [@category].")
registry.register("del", cmd_delete, help_text="Delete a task: /del <number|id>.", aliases=["delete", "rm"])
registry.register("start", cmd_start, help_text="Start tracking a task: /start <number|id>.")
registry.register("stop", cmd_stop, help_text="Stop tracking and record the session.")
registry.register("list", cmd_list, help_text="List tasks with totals: /list [today|week|month].", aliases=["ls"])
registry.register("view", cmd_view, help_text="Select the view: /view today|week|month.")
registry.register("category", cmd_category, help_text="Category for new tasks: /category <name>.", aliases=["cat"])
registry.register("status", cmd_status, help_text="Show tracking, view and storage status.")
registry.register("summary", cmd_summary, help_text="Task count and total time for the view.")
registry.register("watch", cmd_watch, help_text="Show the live timer: /watch [seconds].")
