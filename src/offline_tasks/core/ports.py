# src/offline_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the queue.

The queue depends on Protocols instead of concrete implementations.
This keeps storage backends, connectivity probes and task handlers swappable
and makes testing easier.
"""

from typing import Any, Callable, Protocol

Done = Callable[..., None]
# done(status=None): status "error" keeps the task queued, anything else completes it.

ProbeCallback = Callable[[Any, Any], None]
# callback(error, status): status "error" means offline, anything else means online.


class StorageProvider(Protocol):
    """
    Key/value persistence (localStorage-like).

    Values are JSON-compatible Python objects. Missing keys read as None.
    Errors are expected to propagate to the caller.
    """

    def get_item(self, key: str) -> Any | None: ...
    def set_item(self, key: str, value: Any) -> None: ...
    def remove_item(self, key: str) -> None: ...


class ConnectionTest(Protocol):
    """
    Connectivity probe.

    Either returns a bool right away, or returns None and calls
    callback(error, status) later, or returns an awaitable resolving to a bool.
    """

    def __call__(self, callback: ProbeCallback) -> Any: ...


class TaskHandlerObject(Protocol):
    """Object-style handler: executes one task and reports through done(status)."""

    def handle(self, task: Any, done: Done) -> Any: ...


TaskHandler = Callable[[Any, Done], Any] | TaskHandlerObject


class Scheduler(Protocol):
    """The subset of asyncio.AbstractEventLoop the runner needs."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any: ...
    def create_task(self, coro: Any) -> Any: ...
