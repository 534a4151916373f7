"""Persistent, connectivity-gated task re-submission queue."""

from .core.events import CONNECTION_OPENED, TASK_CHANNEL_COMPLETE, TASKS_PENDING, EventBus
from .errors import ConfigurationError, OfflineTasksError, ReservedKeyError
from .storage import InMemoryProvider, SQLiteProvider
from .tasks.offline_queue import OfflineTasks
from .tasks.task_models import ConnectionStatus, SlotState

__all__ = [
    "CONNECTION_OPENED",
    "TASK_CHANNEL_COMPLETE",
    "TASKS_PENDING",
    "ConfigurationError",
    "ConnectionStatus",
    "EventBus",
    "InMemoryProvider",
    "OfflineTasks",
    "OfflineTasksError",
    "ReservedKeyError",
    "SQLiteProvider",
    "SlotState",
]
