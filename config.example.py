# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TRACKTIME_APP_NAME": "App display name (default: tracktime).",
    "TRACKTIME_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TRACKTIME_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Paths (gitignored)
    "TRACKTIME_DATA_DIR": "Local data directory for the database and log (default: .local/tracktime).",
    "TRACKTIME_STORE_DB_PATH": "Key-value SQLite path (default: <data_dir>/tracktime.sqlite3).",
    # Persistence
    "TRACKTIME_STORAGE_KEY": "Key the task list is stored under (default: timeTrackerTasks).",
    "TRACKTIME_STORAGE_QUOTA_BYTES": "Max stored bytes; 0 means unlimited (default: 0).",
    # Front-end defaults
    "TRACKTIME_DEFAULT_VIEW": "Initial view: today | week | month (default: today).",
    "TRACKTIME_DEFAULT_CATEGORY": "Initial category: Work | Study | Leisure | Health | Personal.",
    "TRACKTIME_TICK_INTERVAL_SECONDS": "Refresh interval of /watch in seconds (default: 1.0).",
}
