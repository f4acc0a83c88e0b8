# src/tracktime/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The tracking core depends on Protocols instead of concrete implementations.
This keeps storage and the clock swappable and makes testing deterministic.
"""

from datetime import datetime
from typing import Protocol


class KeyValueStore(Protocol):
    """
    Blob store holding serialized values under string keys.

    Implementations raise storage.kv_store.StorageError when a read or write
    cannot be completed (including quota exhaustion).
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class Clock(Protocol):
    """Wall clock. Returned datetimes should be timezone-aware local time."""
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now().astimezone()
