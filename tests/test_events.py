# tests/test_events.py

from __future__ import annotations

import logging

import pytest

from offline_tasks.core.events import EventBus


def test_on_registers_once_and_off_ignores_unknown() -> None:
    bus = EventBus()
    calls: list[str] = []

    def cb(key: str) -> None:
        calls.append(key)

    bus.on("x", cb)
    bus.on("x", cb)
    bus.off("x", lambda key: None)
    bus.off("missing", cb)

    bus.emit("x", "k")
    assert calls == ["k"]

    bus.off("x", cb)
    bus.emit("x", "k")
    assert calls == ["k"]


def test_failing_subscriber_does_not_stop_others(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()
    calls: list[int] = []

    def boom() -> None:
        raise RuntimeError("boom")

    bus.on("x", boom)
    bus.on("x", lambda: calls.append(1))

    with caplog.at_level(logging.ERROR):
        bus.emit("x")

    assert calls == [1]
    assert "Subscriber for x failed" in caplog.text
