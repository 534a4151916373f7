# tests/test_key_registry.py

from __future__ import annotations

from offline_tasks.core.events import TASKS_PENDING, EventBus
from offline_tasks.storage.memory import InMemoryProvider
from offline_tasks.tasks.key_registry import KeyRegistry


def test_add_reports_already_present(provider: InMemoryProvider) -> None:
    registry = KeyRegistry(provider, EventBus())

    assert registry.add("upload") == set()
    assert registry.add(["upload", "mail"]) == {"upload"}
    assert registry.keys() == ["upload", "mail"]


def test_remove_missing_key(provider: InMemoryProvider) -> None:
    registry = KeyRegistry(provider, EventBus())
    registry.add(["upload", "mail"])

    assert registry.remove("upload") is True
    assert registry.remove("upload") is False
    assert registry.keys() == ["mail"]
    assert "mail" in registry


def test_has_any_publishes_keys(provider: InMemoryProvider) -> None:
    events = EventBus()
    seen: list[list[str]] = []
    events.on(TASKS_PENDING, seen.append)
    registry = KeyRegistry(provider, events)

    assert registry.has_any() is False
    assert seen == []

    registry.add(["upload", "mail"])
    assert registry.has_any() is True
    assert seen == [["upload", "mail"]]
