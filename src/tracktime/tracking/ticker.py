# src/tracktime/tracking/ticker.py

from __future__ import annotations

"""
Display ticker.

A small polling loop that, once per interval:
- reads the clock,
- samples the engine's live elapsed time,
- hands a TickSnapshot to the presentation callback.

The ticker only reads. Starting, stopping and committing sessions happen in
response to user actions, never here.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..core.ports import Clock, SystemClock
from .engine import TrackingEngine
from .models import TrackingSession

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TickSnapshot:
    now: datetime
    session: TrackingSession
    active_task_name: str | None
    live_elapsed: int


TickCallback = Callable[[TickSnapshot], None]


def take_snapshot(engine: TrackingEngine, now: datetime) -> TickSnapshot:
    task = engine.active_task()
    return TickSnapshot(
        now=now,
        session=engine.session,
        active_task_name=task.name if task is not None else None,
        live_elapsed=engine.get_live_elapsed(now),
    )


async def run_ticker(
        engine: TrackingEngine,
        on_tick: TickCallback,
        *,
        clock: Clock | None = None,
        interval_seconds: float = 1.0,
        max_ticks: int | None = None,
) -> int:
    """
    Call `on_tick` every `interval_seconds` until cancelled or `max_ticks` is reached.

    A failing callback is logged and the loop keeps going.
    Returns the number of ticks delivered.
    """
    clock = clock or SystemClock()
    sleep_s = max(0.01, float(interval_seconds))
    ticks = 0

    while max_ticks is None or ticks < max_ticks:
        snapshot = take_snapshot(engine, clock.now())
        try:
            on_tick(snapshot)
        except Exception:
            logger.exception("tick callback failed")
        ticks += 1

        if max_ticks is not None and ticks >= max_ticks:
            break
        await asyncio.sleep(sleep_s)

    return ticks
