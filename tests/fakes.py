# tests/fakes.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class FakeTimer:
    delay: float
    callback: Callable[..., Any]
    args: tuple[Any, ...]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTask:
    """
    Holds a scheduled coroutine until the test calls finish().

    finish() drives the coroutine step by step, so it must only await
    bare yields such as asyncio.sleep(0).
    """

    def __init__(self, coro: Any) -> None:
        self.coro = coro
        self.callbacks: list[Callable[[Any], Any]] = []
        self.finished = False

    def add_done_callback(self, callback: Callable[[Any], Any]) -> None:
        self.callbacks.append(callback)

    def finish(self) -> None:
        try:
            while True:
                self.coro.send(None)
        except StopIteration:
            pass
        self.finished = True
        for callback in self.callbacks:
            callback(self)


class FakeLoop:
    """
    Deterministic stand-in for the asyncio loop.

    Timers only fire when the test calls fire_timers().
    """

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []
        self.tasks: list[FakeTask] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimer:
        timer = FakeTimer(delay, callback, args)
        self.timers.append(timer)
        return timer

    def create_task(self, coro: Any) -> FakeTask:
        task = FakeTask(coro)
        self.tasks.append(task)
        return task

    @property
    def active_timers(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_timers(self) -> int:
        ready = self.active_timers
        for timer in ready:
            timer.fired = True
            timer.callback(*timer.args)
        return len(ready)


class SwitchProbe:
    """Sync connection test whose answer the test flips."""

    def __init__(self, online: bool = True) -> None:
        self.online = online
        self.calls = 0

    def __call__(self, callback: Any) -> bool:
        self.calls += 1
        return self.online


class DeferredProbe:
    """Callback-style connection test: answers only when the test calls resolve()."""

    def __init__(self) -> None:
        self.callbacks: list[Callable[[Any, Any], None]] = []

    def __call__(self, callback: Callable[[Any, Any], None]) -> None:
        self.callbacks.append(callback)
        return None

    def resolve(self, status: str = "success", error: Any = None) -> None:
        self.callbacks.pop(0)(error, status)


@dataclass(slots=True)
class RecordingHandler:
    """
    Handler double.

    - auto=True: calls done() right away with status_for(task) (default "success")
    - auto=False: keeps (task, done) pairs so the test completes them later
    """

    auto: bool = True
    status_for: Callable[[Any], Any] = field(default=lambda task: "success")
    calls: list[tuple[Any, Callable[..., None]]] = field(default_factory=list)

    def __call__(self, task: Any, done: Callable[..., None]) -> None:
        self.calls.append((task, done))
        if self.auto:
            done(self.status_for(task))

    @property
    def tasks(self) -> list[Any]:
        return [task for task, _ in self.calls]


class ObjectHandler:
    """Object-style handler exposing handle(task, done)."""

    def __init__(self) -> None:
        self.handled: list[Any] = []

    def handle(self, task: Any, done: Callable[..., None]) -> None:
        self.handled.append(task)
        done()
