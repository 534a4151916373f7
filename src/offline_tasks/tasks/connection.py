# src/offline_tasks/tasks/connection.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..core.events import CONNECTION_OPENED, EventBus
from ..core.ports import ConnectionTest, Scheduler
from .task_models import ConnectionStatus, close_awaitable

logger = logging.getLogger(__name__)

ResultCallback = Callable[[ConnectionStatus], Any]


class ConnectionMonitor:
    """
    Runs the connectivity probe and caches the outcome in `connected`.

    Probe styles:
    - sync: returns a bool
    - callback: returns None, later calls callback(error, status)
    - async: returns an awaitable resolving to a bool (scheduled on the loop)

    Whatever the style, on_result receives exactly one ConnectionStatus per check().
    """

    def __init__(
        self,
        connection_test: ConnectionTest,
        events: EventBus,
        *,
        loop: Scheduler | None = None,
    ) -> None:
        self._test = connection_test
        self._events = events
        self._loop = loop
        self.connected = False
        self._inflight: set[Any] = set()

    @property
    def inflight(self) -> int:
        """Async probes still running."""
        return len(self._inflight)

    def check(self, on_result: ResultCallback | None = None) -> Any:
        """Invoke the probe; returns whatever the probe returned."""
        fired = False

        def _normalize(error: Any = None, status: Any = None) -> None:
            nonlocal fired
            if fired:
                logger.debug("Ignoring repeated probe callback status=%s", status)
                return
            fired = True

            result = ConnectionStatus.from_probe(status)
            self.connected = result == ConnectionStatus.SUCCESS
            if self.connected:
                self._events.emit(CONNECTION_OPENED)
            else:
                logger.debug("Connection probe failed error=%r", error)
            if on_result is not None:
                on_result(result)

        self.connected = False
        result = self._test(_normalize)

        if isinstance(result, bool):
            _normalize(None, ConnectionStatus.SUCCESS if result else ConnectionStatus.ERROR)
        elif inspect.isawaitable(result):
            self._schedule(result, _normalize)
        return result

    def _schedule(self, awaitable: Any, callback: Callable[[Any, Any], None]) -> None:
        async def _await_probe() -> None:
            try:
                ok = bool(await awaitable)
            except Exception as e:
                logger.debug("Connection probe raised", exc_info=True)
                callback(e, ConnectionStatus.ERROR)
                return
            callback(None, ConnectionStatus.SUCCESS if ok else ConnectionStatus.ERROR)

        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                close_awaitable(awaitable)
                logger.warning("No running event loop for async connection test; treating as offline")
                callback(e, ConnectionStatus.ERROR)
                return

        task = loop.create_task(_await_probe())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
