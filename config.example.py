# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Local machine overrides may live in config_local.py (gitignored).

This file exists to make the repo self-documenting even without opening the code.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO).",
    # Front-end
    "TASKBOARD_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory (default: .local/taskboard).",
    "TASKBOARD_STORAGE_DB_PATH": "Key-value SQLite path (default: <data_dir>/storage.sqlite3).",
    "TASKBOARD_EXPORT_DIR": "Default /export target directory (default: <data_dir>/exports).",
    # Task storage
    "TASKBOARD_STORAGE_KEY": "Storage key holding the task list (default: tasks).",
    "TASKBOARD_SEED_SAMPLE_TASKS": "Seed sample tasks when storage is empty (true/false, default: true).",
}
