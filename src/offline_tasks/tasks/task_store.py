# src/offline_tasks/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, overload

from ..core.ports import StorageProvider
from ..errors import ReservedKeyError
from .key_registry import KeyRegistry, as_key_list
from .task_models import KEYS_NAME, TaskList, storage_key

logger = logging.getLogger(__name__)


def as_payload_list(data: Any) -> list[Any]:
    """Wrap a bare payload into a single-element list."""
    if isinstance(data, list):
        return list(data)
    return [data]


class TaskStore:
    """
    Per-channel task lists on top of a StorageProvider.

    Save policy:
    - key newly registered      -> payload becomes the whole list
    - key registered, overwrite -> payload replaces the persisted list
    - key registered, otherwise -> payload is appended to the persisted list

    `tasks` is the run snapshot: lists loaded for dispatch, keyed by channel.
    Once a key is in the snapshot it is the source of truth for slot positions;
    every slot transition is written through to the provider.
    """

    def __init__(self, provider: StorageProvider, registry: KeyRegistry) -> None:
        self._provider = provider
        self._registry = registry
        self.tasks: dict[str, TaskList] = {}

    # ---- low-level helpers ----

    def _read(self, key: str) -> TaskList:
        return TaskList.from_records(self._provider.get_item(storage_key(key)))

    def _write(self, key: str, task_list: TaskList) -> None:
        self._provider.set_item(storage_key(key), task_list.to_records())

    @staticmethod
    def _check_key(key: str) -> None:
        if key == KEYS_NAME:
            raise ReservedKeyError(key)

    # ---- saving ----

    def save(self, key: str, data: Any, overwrite: bool = False) -> None:
        self.save_many({key: data}, overwrite=overwrite)

    def save_many(self, items: Mapping[str, Any], overwrite: bool = False) -> None:
        """Register all keys with one registry write, then persist each list."""
        if not items:
            return
        for key in items:
            self._check_key(key)

        already = self._registry.add(list(items))
        for key, data in items.items():
            self._save_one(key, data, replace=overwrite or key not in already)

    def _save_one(self, key: str, data: Any, *, replace: bool) -> None:
        payloads = as_payload_list(data)

        if replace:
            task_list = TaskList.from_payloads(payloads)
        elif key in self.tasks:
            # Append in place: in-flight completions hold positions in this list.
            task_list = self.tasks[key]
            task_list.extend(payloads)
        else:
            task_list = self._read(key)
            task_list.extend(payloads)

        if key in self.tasks:
            self.tasks[key] = task_list

        self._write(key, task_list)
        logger.debug(
            "Saved key=%s added=%d pending=%d replace=%s",
            key,
            len(payloads),
            task_list.pending_count,
            replace,
        )

    # ---- loading ----

    @overload
    def load(self, keys: str) -> TaskList | None: ...

    @overload
    def load(self, keys: Iterable[str] | None = None) -> dict[str, TaskList] | None: ...

    def load(self, keys: str | Iterable[str] | None = None) -> TaskList | dict[str, TaskList] | None:
        """
        Task lists for `keys`, read from the provider on first use.

        A key already in the snapshot is returned as is: once loaded, the snapshot
        is the source of truth for slot positions.

        A single str key returns that key's TaskList (None if unregistered);
        a sequence (or None = every registered key) returns a mapping.
        Keys that are not registered are skipped. Returns None when nothing
        is registered at all.
        """
        registered = self._registry.keys()
        if not registered:
            return None

        single = isinstance(keys, str)
        wanted = registered if keys is None else as_key_list(keys)

        loaded: dict[str, TaskList] = {}
        for key in wanted:
            if key not in registered:
                continue
            if key not in self.tasks:
                self.tasks[key] = self._read(key)
            loaded[key] = self.tasks[key]

        if single:
            return loaded.get(wanted[0])
        return loaded

    def ensure_loaded(self, keys: Iterable[str]) -> dict[str, TaskList]:
        """Snapshot entries for the registered subset of `keys`, loading missing ones."""
        return self.load(list(keys)) or {}

    # ---- removal ----

    def remove_slot(self, key: str, index: int) -> bool:
        """Mark one slot removed in place and persist. False if there is nothing to remove."""
        task_list = self.tasks.get(key)
        if task_list is None or not 0 <= index < len(task_list):
            return False
        slot = task_list.slots[index]
        if not slot.pending:
            return False
        slot.mark_removed()
        self._write(key, task_list)
        logger.debug("Removed slot key=%s index=%d pending=%d", key, index, task_list.pending_count)
        return True

    def remove_key(self, key: str) -> bool:
        """Delete a channel's list and unregister it. False if the key was not registered."""
        self.tasks.pop(key, None)
        if not self._registry.remove(key):
            return False
        self._provider.remove_item(storage_key(key))
        logger.info("Removed task channel key=%s", key)
        return True
