# src/tracktime/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

CONSOLE_THRESHOLDS: dict[str, int] = {
    # Every save and every "ready" line; the file log keeps them.
    "tracktime.storage": logging.WARNING,
    # Task create/delete and start/stop: the REPL already prints a reply for each.
    "tracktime.tracking.task_store": logging.WARNING,
    "tracktime.tracking.engine": logging.WARNING,
    # /watch runs the ticker under asyncio.run().
    "asyncio": logging.ERROR,
    "py.warnings": logging.ERROR,
}


def _console_threshold(name: str) -> int:
    """Longest matching prefix in CONSOLE_THRESHOLDS wins."""
    best = ""
    for prefix in CONSOLE_THRESHOLDS:
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > len(best):
            best = prefix
    if best:
        return CONSOLE_THRESHOLDS[best]
    if name == "tracktime" or name.startswith("tracktime."):
        return logging.NOTSET
    # Any other 3rd party: only errors to console.
    return logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable while the tracker is in use.

    Thresholds per logger come from CONSOLE_THRESHOLDS; the file handler is
    not filtered.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_threshold(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/tracktime",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tracktime.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
