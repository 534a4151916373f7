# src/offline_tasks/core/events.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

CONNECTION_OPENED = "connection-opened"
TASK_CHANNEL_COMPLETE = "task-channel-complete"
TASKS_PENDING = "tasks-pending"

EventCallback = Callable[..., Any]


class EventBus:
    """
    Minimal publish/subscribe.

    - on(): a callback is registered at most once per event name
    - off(): unknown callbacks are ignored
    - emit(): subscribers run synchronously in subscription order;
      a raising subscriber is logged and the rest still run
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventCallback]] = {}

    def on(self, event: str, callback: EventCallback) -> None:
        callbacks = self._subscribers.setdefault(event, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def off(self, event: str, callback: EventCallback) -> None:
        callbacks = self._subscribers.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, *args: Any) -> None:
        # Copy: subscribers may unsubscribe while being notified.
        for callback in list(self._subscribers.get(event, ())):
            try:
                callback(*args)
            except Exception:
                logger.exception("Subscriber for %s failed", event)

    def subscribers(self, event: str) -> list[EventCallback]:
        return list(self._subscribers.get(event, ()))
