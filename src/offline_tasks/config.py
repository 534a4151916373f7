# src/offline_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

- One Settings object for the whole app.
- Nothing is required at import time; the queue's collaborators are built in cli/bootstrap.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "OFFLINE_TASKS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# A local .env never overrides variables already set in the environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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

    # ---- Local data paths ----
    data_dir: Path
    db_path: Path

    # ---- Queue ----
    autorun: bool
    timeout_seconds: float

    # ---- Connectivity probe ----
    probe_url: str
    probe_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "offline-tasks")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/offline_tasks"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "offline_tasks.sqlite3")

        autorun = _env_bool(_k("AUTORUN"), False)
        # Non-positive intervals would spin; fall back to the default.
        timeout_seconds = _env_float(_k("TIMEOUT_SECONDS"), 10.0)
        if timeout_seconds <= 0:
            timeout_seconds = 10.0

        probe_url = _env(_k("PROBE_URL"), "https://www.google.com/generate_204")
        probe_timeout_seconds = _env_float(_k("PROBE_TIMEOUT_SECONDS"), 5.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            autorun=autorun,
            timeout_seconds=timeout_seconds,
            probe_url=probe_url,
            probe_timeout_seconds=probe_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
