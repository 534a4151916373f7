# src/offline_tasks/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

STORAGE_PREFIX = "offline_tasks"
KEYS_NAME = "keys"

ERROR_STATUS = "error"


def storage_key(key: str) -> str:
    """Namespace a logical key for the storage provider."""
    return f"{STORAGE_PREFIX}_{key}"


def is_error_status(status: Any) -> bool:
    return status == ERROR_STATUS


def close_awaitable(awaitable: Any) -> None:
    """Discard an awaitable that will never be awaited (closes coroutines, cancels futures)."""
    close = getattr(awaitable, "close", None) or getattr(awaitable, "cancel", None)
    if callable(close):
        close()


class SlotState(StrEnum):
    PENDING = "pending"
    REMOVED = "removed"


class ConnectionStatus(StrEnum):
    SUCCESS = "success"
    ERROR = "error"

    @classmethod
    def from_probe(cls, status: Any) -> ConnectionStatus:
        """Anything other than "error" counts as connected."""
        return cls.ERROR if is_error_status(status) else cls.SUCCESS


@dataclass(slots=True, eq=False)
class TaskSlot:
    """
    One position of a channel's task list.

    Slots are emptied in place (state -> removed) so indices held by
    in-flight completion callbacks stay valid.
    """

    state: SlotState
    task: Any = None

    @property
    def pending(self) -> bool:
        return self.state == SlotState.PENDING

    def mark_removed(self) -> None:
        self.state = SlotState.REMOVED
        self.task = None

    def to_record(self) -> dict[str, Any]:
        if self.pending:
            return {"state": SlotState.PENDING.value, "task": self.task}
        return {"state": SlotState.REMOVED.value}

    @classmethod
    def from_record(cls, raw: Any) -> TaskSlot:
        """
        Decode a persisted slot.

        Tagged records are the normal format. Untagged values come from lists
        written before slots carried a state: falsy holes read as removed,
        anything else as a pending payload.
        """
        if isinstance(raw, dict) and raw.get("state") in (SlotState.PENDING, SlotState.REMOVED):
            if raw["state"] == SlotState.REMOVED:
                return cls(SlotState.REMOVED)
            return cls(SlotState.PENDING, raw.get("task"))
        if raw is None or raw == "":
            return cls(SlotState.REMOVED)
        return cls(SlotState.PENDING, raw)


@dataclass(slots=True)
class TaskList:
    """Ordered slots of a single channel."""

    slots: list[TaskSlot] = field(default_factory=list)

    @classmethod
    def from_payloads(cls, payloads: list[Any]) -> TaskList:
        return cls([TaskSlot(SlotState.PENDING, p) for p in payloads])

    @classmethod
    def from_records(cls, records: Any) -> TaskList:
        if not records:
            return cls()
        if not isinstance(records, list):
            records = [records]
        return cls([TaskSlot.from_record(r) for r in records])

    def to_records(self) -> list[dict[str, Any]]:
        return [s.to_record() for s in self.slots]

    def extend(self, payloads: list[Any]) -> None:
        self.slots.extend(TaskSlot(SlotState.PENDING, p) for p in payloads)

    def pending_items(self) -> Iterator[tuple[int, TaskSlot]]:
        for index, slot in enumerate(self.slots):
            if slot.pending:
                yield index, slot

    def payloads(self) -> list[Any]:
        """Payloads of the pending slots, in order."""
        return [slot.task for _, slot in self.pending_items()]

    @property
    def pending_count(self) -> int:
        return sum(1 for s in self.slots if s.pending)

    @property
    def drained(self) -> bool:
        return all(not s.pending for s in self.slots)

    def __len__(self) -> int:
        return len(self.slots)
