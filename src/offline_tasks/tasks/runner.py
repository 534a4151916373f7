# src/offline_tasks/tasks/runner.py

from __future__ import annotations

"""
Runner.

Drives one run of the queue:
- accumulates the requested keys across calls,
- checks connectivity,
- when offline: arms a single retry timer (a new run() supersedes it),
- when online: hands every pending slot of every requested key to its handler
  and removes slots as their handlers report success.

Known constraint: run() over a key whose previous dispatch still has
outstanding handlers dispatches those pending slots again. Callers should not
overlap runs over the same key.
"""

import asyncio
import inspect
import logging
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from ..core.events import TASK_CHANNEL_COMPLETE, EventBus
from ..core.ports import Done, Scheduler
from .connection import ConnectionMonitor
from .handlers import HandlerFn, HandlerRegistry
from .key_registry import KeyRegistry, as_key_list
from .task_models import ConnectionStatus, TaskSlot, close_awaitable, is_error_status
from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class RunnerState(StrEnum):
    IDLE = "idle"
    CHECKING_CONNECTION = "checking_connection"
    DISPATCHING = "dispatching"
    AWAITING_RETRY = "awaiting_retry"


class Runner:
    def __init__(
        self,
        store: TaskStore,
        registry: KeyRegistry,
        monitor: ConnectionMonitor,
        handlers: HandlerRegistry,
        events: EventBus,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        loop: Scheduler | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._monitor = monitor
        self._handlers = handlers
        self._events = events
        self._timeout = float(timeout)
        self._loop = loop

        self.state = RunnerState.IDLE
        self._pending_keys: dict[str, None] = {}
        self._timer: Any = None
        self._generation = 0
        self._inflight: set[Any] = set()

    @property
    def pending_keys(self) -> list[str]:
        return list(self._pending_keys)

    @property
    def inflight(self) -> int:
        """Async handler invocations still running."""
        return len(self._inflight)

    @property
    def retry_scheduled(self) -> bool:
        return self._timer is not None

    def _get_loop(self) -> Scheduler | None:
        """The injected loop, else the running asyncio loop, else None."""
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _merge_keys(self, keys: str | Iterable[str] | None) -> list[str]:
        if keys is None:
            keys = self._registry.keys()
        for key in as_key_list(keys):
            self._pending_keys.setdefault(key, None)
        return list(self._pending_keys)

    # ---- scheduling ----

    def cancel_retry(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            if self.state == RunnerState.AWAITING_RETRY:
                self.state = RunnerState.IDLE

    def run(self, keys: str | Iterable[str] | None = None) -> None:
        """Process `keys` (default: every registered key) once the connection is up."""
        self.cancel_retry()

        resolved = self._merge_keys(keys)
        if not resolved:
            self.state = RunnerState.IDLE
            return

        self._generation += 1
        generation = self._generation
        self.state = RunnerState.CHECKING_CONNECTION
        logger.debug("Run requested keys=%s", resolved)

        def _on_result(result: ConnectionStatus) -> None:
            if generation != self._generation:
                logger.debug("Ignoring connection result from a superseded run")
                return
            if result == ConnectionStatus.SUCCESS:
                self._dispatch(resolved)
            else:
                self._schedule_retry(resolved)

        self._monitor.check(_on_result)

    def _schedule_retry(self, keys: list[str]) -> None:
        loop = self._get_loop()
        if loop is None:
            logger.warning("No running event loop; retry for keys=%s not scheduled", keys)
            self.state = RunnerState.IDLE
            return

        self._timer = loop.call_later(self._timeout, self._retry, keys)
        self.state = RunnerState.AWAITING_RETRY
        logger.info("Offline; retrying keys=%s in %.1fs", keys, self._timeout)

    def _retry(self, keys: list[str]) -> None:
        self._timer = None
        self.run(keys)

    # ---- dispatch ----

    def _dispatch(self, keys: list[str]) -> None:
        self.state = RunnerState.DISPATCHING
        try:
            self._dispatch_keys(keys)
        finally:
            if self.state == RunnerState.DISPATCHING:
                self.state = RunnerState.IDLE

    def _dispatch_keys(self, keys: list[str]) -> None:
        loaded = self._store.ensure_loaded(keys)
        loop = self._get_loop()

        for key in keys:
            task_list = loaded.get(key)
            if task_list is None:
                # Not registered: nothing queued under this key.
                self._pending_keys.pop(key, None)
                continue

            if task_list.drained:
                self._drain(key)
                continue

            handler = self._handlers.get(key)
            if handler is None:
                logger.debug("No handler for key=%s; %d task(s) stay queued", key, task_list.pending_count)
                continue

            logger.info("Dispatching key=%s pending=%d", key, task_list.pending_count)
            for index, slot in list(task_list.pending_items()):
                self._dispatch_one(key, index, slot, handler, loop)

    def _dispatch_one(
        self,
        key: str,
        index: int,
        slot: TaskSlot,
        handler: HandlerFn,
        loop: Scheduler | None,
    ) -> None:
        done = self._completion(key, index, slot)
        try:
            result = handler(slot.task, done)
        except Exception:
            logger.exception("Handler failed key=%s index=%d; task stays queued", key, index)
            return

        if not inspect.isawaitable(result):
            return
        if loop is None:
            close_awaitable(result)
            logger.warning(
                "No running event loop for async handler key=%s index=%d; task stays queued", key, index
            )
            return
        task = loop.create_task(self._await_handler(result, key, index))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    @staticmethod
    async def _await_handler(awaitable: Any, key: str, index: int) -> None:
        try:
            await awaitable
        except Exception:
            logger.exception("Async handler failed key=%s index=%d; task stays queued", key, index)

    def _completion(self, key: str, index: int, slot: TaskSlot) -> Done:
        def done(status: Any = None) -> None:
            if is_error_status(status):
                logger.info("Task reported error key=%s index=%d; keeping it queued", key, index)
                return

            task_list = self._store.tasks.get(key)
            if task_list is None or index >= len(task_list) or task_list.slots[index] is not slot:
                logger.debug("Stale completion ignored key=%s index=%d", key, index)
                return

            if not self._store.remove_slot(key, index):
                return
            if task_list.drained:
                self._drain(key)

        return done

    def _drain(self, key: str) -> None:
        self._store.remove_key(key)
        self._pending_keys.pop(key, None)
        logger.info("Task channel complete key=%s", key)
        self._events.emit(TASK_CHANNEL_COMPLETE, key)
