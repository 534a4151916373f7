# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from offline_tasks.storage.memory import InMemoryProvider
from offline_tasks.tasks.offline_queue import OfflineTasks

from .fakes import FakeLoop, SwitchProbe


@pytest.fixture()
def provider() -> InMemoryProvider:
    return InMemoryProvider()


@pytest.fixture()
def loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture()
def probe() -> SwitchProbe:
    return SwitchProbe(online=True)


@pytest.fixture()
def make_queue(provider: InMemoryProvider, loop: FakeLoop, probe: SwitchProbe) -> Callable[..., OfflineTasks]:
    """
    Build OfflineTasks wired with in-memory storage, the switchable probe and a fake loop.

    Keyword arguments override any constructor argument.
    """

    def _make(**overrides: Any) -> OfflineTasks:
        kwargs: dict[str, Any] = {
            "provider": provider,
            "connection_test": probe,
            "timeout": 10.0,
            "loop": loop,
        }
        kwargs.update(overrides)
        return OfflineTasks(**kwargs)

    return _make


@pytest.fixture()
def queue(make_queue: Callable[..., OfflineTasks]) -> OfflineTasks:
    return make_queue()
