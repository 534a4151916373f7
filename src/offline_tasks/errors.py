# src/offline_tasks/errors.py

"""Exceptions raised by the queue."""

from __future__ import annotations


class OfflineTasksError(Exception):
    """Base exception for queue errors."""


class ConfigurationError(OfflineTasksError, ValueError):
    """Raised when a required collaborator (provider, connection test) is missing."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"{option} can not be None")


class ReservedKeyError(OfflineTasksError, ValueError):
    """Raised when a channel name collides with the registry's own storage slot."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"'{key}' is reserved for the key registry")
