# src/tracktime/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TRACKTIME"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_db_path: Path

    # ---- Persistence ----
    storage_key: str
    storage_quota_bytes: int

    # ---- Front-end defaults ----
    default_view: str
    default_category: str
    tick_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tracktime") or "tracktime"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tracktime"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "tracktime.sqlite3")

        storage_key = _env(_k("STORAGE_KEY"), "timeTrackerTasks").strip() or "timeTrackerTasks"
        storage_quota_bytes = max(0, _env_int(_k("STORAGE_QUOTA_BYTES"), 0))

        default_view = _env(_k("DEFAULT_VIEW"), "today").strip().lower() or "today"
        default_category = _env(_k("DEFAULT_CATEGORY"), "Work").strip() or "Work"
        tick_interval_seconds = max(0.1, _env_float(_k("TICK_INTERVAL_SECONDS"), 1.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            store_db_path=store_db_path,
            storage_key=storage_key,
            storage_quota_bytes=storage_quota_bytes,
            default_view=default_view,
            default_category=default_category,
            tick_interval_seconds=tick_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
