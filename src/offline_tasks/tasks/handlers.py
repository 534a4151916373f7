# src/offline_tasks/tasks/handlers.py

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..core.ports import Done, TaskHandler

logger = logging.getLogger(__name__)

HandlerFn = Callable[[Any, Done], Any]


def _as_callable(handler: TaskHandler) -> HandlerFn:
    method = getattr(handler, "handle", None)
    if callable(method):
        return method
    if callable(handler):
        return handler
    raise TypeError(f"Handler must be callable or expose handle(task, done): {handler!r}")


class HandlerRegistry:
    """Channel -> handler mapping (at most one handler per channel)."""

    def __init__(self) -> None:
        self._handlers: dict[str, HandlerFn] = {}

    def register(self, key: str, handler: TaskHandler) -> None:
        fn = _as_callable(handler)
        if key in self._handlers:
            logger.info("Replacing handler for key=%s", key)
        self._handlers[key] = fn

    def register_many(self, handlers: Mapping[str, TaskHandler]) -> None:
        for key, handler in handlers.items():
            self.register(key, handler)

    def unregister(self, key: str) -> bool:
        return self._handlers.pop(key, None) is not None

    def get(self, key: str) -> HandlerFn | None:
        return self._handlers.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._handlers
