# src/offline_tasks/tasks/offline_queue.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..core.events import EventBus, EventCallback
from ..core.ports import ConnectionTest, Scheduler, StorageProvider, TaskHandler
from ..errors import ConfigurationError
from .connection import ConnectionMonitor
from .handlers import HandlerRegistry
from .key_registry import KeyRegistry
from .runner import DEFAULT_TIMEOUT_SECONDS, Runner
from .task_models import ConnectionStatus, TaskList
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class OfflineTasks:
    """
    Persistent, connectivity-gated task queue.

    Work is saved under a channel key, persisted through `provider`, and handed
    to the channel's handler once `connection_test` reports the connection is up.
    A task leaves the queue only when its handler calls done() with a non-error status.

    Events: "connection-opened", "task-channel-complete" (key), "tasks-pending" (keys).
    """

    def __init__(
        self,
        *,
        provider: StorageProvider | None,
        connection_test: ConnectionTest | None,
        autorun: bool = False,
        timeout: float | None = None,
        loop: Scheduler | None = None,
    ) -> None:
        if provider is None:
            raise ConfigurationError("provider")
        if connection_test is None:
            raise ConfigurationError("connection_test")

        self.provider = provider
        self.autorun = bool(autorun)
        self.timeout = float(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS

        self.events = EventBus()
        self.registry = KeyRegistry(provider, self.events)
        self.store = TaskStore(provider, self.registry)
        self.monitor = ConnectionMonitor(connection_test, self.events, loop=loop)
        self.handlers = HandlerRegistry()
        self.runner = Runner(
            self.store,
            self.registry,
            self.monitor,
            self.handlers,
            self.events,
            timeout=self.timeout,
            loop=loop,
        )
        logger.debug("OfflineTasks ready autorun=%s timeout=%.1fs", self.autorun, self.timeout)

    # ---- events ----

    def on(self, event: str, callback: EventCallback) -> None:
        self.events.on(event, callback)

    def off(self, event: str, callback: EventCallback) -> None:
        self.events.off(event, callback)

    # ---- state ----

    @property
    def connection_state(self) -> bool:
        return self.monitor.connected

    @property
    def keys(self) -> list[str]:
        return self.registry.keys()

    def has_tasks(self) -> bool:
        return self.registry.has_any()

    def check_connection(self, callback: Callable[[ConnectionStatus], Any] | None = None) -> Any:
        return self.monitor.check(callback)

    # ---- queue operations ----

    def save(self, key: str, data: Any, overwrite: bool = False) -> None:
        self.store.save(key, data, overwrite=overwrite)
        if self.autorun:
            self.run(key)

    def save_many(self, items: Mapping[str, Any], overwrite: bool = False) -> None:
        self.store.save_many(items, overwrite=overwrite)
        if self.autorun and items:
            self.run(list(items))

    def load(self, keys: str | Iterable[str] | None = None) -> list[Any] | dict[str, list[Any]] | None:
        """
        Pending payloads.

        A single str key returns a list (None if the key is not registered);
        a sequence or None (every key) returns {key: [payload, ...]}.
        Returns None when nothing is queued at all.
        """
        loaded = self.store.load(keys)
        if loaded is None:
            return None
        if isinstance(loaded, TaskList):
            return loaded.payloads()
        return {key: task_list.payloads() for key, task_list in loaded.items()}

    def remove(self, key: str) -> bool:
        return self.store.remove_key(key)

    def run(self, keys: str | Iterable[str] | None = None) -> None:
        self.runner.run(keys)

    def cancel(self) -> None:
        """Cancel a pending retry (in-flight handlers are not interrupted)."""
        self.runner.cancel_retry()

    # ---- handlers ----

    def register_handler(self, key: str, handler: TaskHandler) -> None:
        self.handlers.register(key, handler)

    def register_handlers(self, handlers: Mapping[str, TaskHandler]) -> None:
        self.handlers.register_many(handlers)

    def unregister_handler(self, key: str) -> bool:
        return self.handlers.unregister(key)
