# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "OFFLINE_TASKS_APP_NAME": "App display name (default: offline-tasks).",
    "OFFLINE_TASKS_LOG_LEVEL": "Logging level (default: INFO).",
    # Paths (gitignored)
    "OFFLINE_TASKS_DATA_DIR": "Local data directory (default: .local/offline_tasks).",
    "OFFLINE_TASKS_DB_PATH": "SQLite queue path (default: <data_dir>/offline_tasks.sqlite3).",
    # Queue
    "OFFLINE_TASKS_AUTORUN": "Run the queue after every save (true/false, default: false).",
    "OFFLINE_TASKS_TIMEOUT_SECONDS": "Seconds between connection retries while offline (default: 10).",
    # Connectivity probe
    "OFFLINE_TASKS_PROBE_URL": "URL probed for connectivity (default: https://www.google.com/generate_204).",
    "OFFLINE_TASKS_PROBE_TIMEOUT_SECONDS": "HTTP probe timeout in seconds (default: 5).",
}
