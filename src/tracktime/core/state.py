# src/tracktime/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tracking.engine import TrackingEngine
from ..tracking.models import Category, View
from ..tracking.task_store import TaskStore
from .ports import Clock


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: Any

    task_store: TaskStore
    engine: TrackingEngine
    clock: Clock

    # Front-end selections.
    view: View = View.TODAY
    category: Category = Category.WORK

    lock: threading.RLock = field(default_factory=threading.RLock)
