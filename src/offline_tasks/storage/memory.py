# src/offline_tasks/storage/memory.py

from __future__ import annotations

import copy
from typing import Any


class InMemoryProvider:
    """
    Dict-backed StorageProvider.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with what is "persisted" (same as a serializing backend).
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._items: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get_item(self, key: str) -> Any | None:
        if key not in self._items:
            return None
        return copy.deepcopy(self._items[key])

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = copy.deepcopy(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
