# src/offline_tasks/tasks/key_registry.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.events import TASKS_PENDING, EventBus
from ..core.ports import StorageProvider
from .task_models import KEYS_NAME, storage_key

logger = logging.getLogger(__name__)


def as_key_list(keys: str | Iterable[str]) -> list[str]:
    """Wrap a single key into a list; keep sequences as lists."""
    if isinstance(keys, str):
        return [keys]
    return list(keys)


class KeyRegistry:
    """
    Persisted set of channels that still have unprocessed tasks.

    Stored as a JSON list under "offline_tasks_keys". Uniqueness is enforced on write,
    order of first insertion is kept.
    """

    def __init__(self, provider: StorageProvider, events: EventBus) -> None:
        self._provider = provider
        self._events = events
        self._storage_key = storage_key(KEYS_NAME)

    def keys(self) -> list[str]:
        raw = self._provider.get_item(self._storage_key)
        if not raw:
            return []
        if isinstance(raw, str):
            return [raw]
        return [str(k) for k in raw]

    def add(self, keys: str | Iterable[str]) -> set[str]:
        """
        Register keys and persist the union.

        Returns the subset of the supplied keys that were already registered.
        """
        current = self.keys()
        present = set(current)
        already: set[str] = set()

        for key in as_key_list(keys):
            if key in present:
                already.add(key)
                continue
            current.append(key)
            present.add(key)

        self._provider.set_item(self._storage_key, current)
        logger.debug("Key registry add keys=%s already=%s", keys, sorted(already))
        return already

    def remove(self, key: str) -> bool:
        """Unregister a key. Returns False when the key was not registered."""
        current = self.keys()
        if key not in current:
            return False
        current.remove(key)
        self._provider.set_item(self._storage_key, current)
        logger.debug("Key registry removed key=%s remaining=%d", key, len(current))
        return True

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def has_any(self) -> bool:
        """True if any key is registered; publishes tasks-pending with the key list if so."""
        keys = self.keys()
        if not keys:
            return False
        self._events.emit(TASKS_PENDING, keys)
        return True
