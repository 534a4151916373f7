# src/offline_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- wires the SQLite provider and HTTP probe into an OfflineTasks queue.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..probes.http_probe import AsyncHttpConnectionTest, HttpConnectionTest
from ..storage.sqlite_store import SQLiteProvider
from ..tasks.offline_queue import OfflineTasks

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_queue(
    *,
    settings: Settings | None = None,
    connection_test=None,
    asynchronous: bool = False,
) -> OfflineTasks:
    """
    Create an OfflineTasks queue from the provided settings.

    Keeping settings injectable makes the CLI easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). If connection_test is None,
    an HTTP check against settings.probe_url is used: AsyncHttpConnectionTest when
    `asynchronous` is set (create the queue inside the running loop), otherwise
    the blocking HttpConnectionTest.

    Offline retries need a running asyncio loop. Without one, autorun and run()
    check once and leave the tasks queued until the next call.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if connection_test is None:
        test_cls = AsyncHttpConnectionTest if asynchronous else HttpConnectionTest
        connection_test = test_cls(
            settings.probe_url,
            timeout_seconds=settings.probe_timeout_seconds,
        )

    queue = OfflineTasks(
        provider=SQLiteProvider(settings.db_path),
        connection_test=connection_test,
        autorun=settings.autorun,
        timeout=settings.timeout_seconds,
    )
    logger.debug("Queue created db=%s probe=%s", settings.db_path, settings.probe_url)
    return queue
