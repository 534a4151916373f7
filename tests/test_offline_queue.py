# tests/test_offline_queue.py

from __future__ import annotations

import pytest

from offline_tasks import (
    CONNECTION_OPENED,
    TASKS_PENDING,
    ConfigurationError,
    InMemoryProvider,
    OfflineTasks,
    ReservedKeyError,
)

from .fakes import FakeLoop, RecordingHandler, SwitchProbe


def test_provider_and_connection_test_are_required(provider: InMemoryProvider) -> None:
    with pytest.raises(ConfigurationError, match="provider"):
        OfflineTasks(provider=None, connection_test=lambda cb: True)
    with pytest.raises(ConfigurationError, match="connection_test"):
        OfflineTasks(provider=provider, connection_test=None)


def test_defaults(provider: InMemoryProvider) -> None:
    queue = OfflineTasks(provider=provider, connection_test=lambda cb: True)
    assert queue.autorun is False
    assert queue.timeout == 10.0
    assert queue.connection_state is False


def test_save_then_load_merges(queue: OfflineTasks) -> None:
    queue.save("upload", {"file": "a"})
    queue.save("upload", {"file": "b"})

    assert queue.load("upload") == [{"file": "a"}, {"file": "b"}]


def test_overwrite(queue: OfflineTasks) -> None:
    queue.save("upload", {"file": "a"})
    queue.save("upload", {"file": "b"}, overwrite=True)

    assert queue.load("upload") == [{"file": "b"}]


def test_load_shapes(queue: OfflineTasks) -> None:
    assert queue.load() is None

    queue.save_many({"upload": ["a", "b"], "mail": "m"})

    assert queue.load() == {"upload": ["a", "b"], "mail": ["m"]}
    assert queue.load(["mail"]) == {"mail": ["m"]}
    assert queue.load("mail") == ["m"]
    assert queue.load("nope") is None


def test_remove_channel(queue: OfflineTasks) -> None:
    queue.save("upload", "a")

    assert queue.remove("upload") is True
    assert queue.remove("upload") is False
    assert queue.keys == []


def test_has_tasks_publishes_pending_keys(queue: OfflineTasks) -> None:
    seen: list[list[str]] = []
    queue.on(TASKS_PENDING, seen.append)

    assert queue.has_tasks() is False
    queue.save("upload", "a")
    assert queue.has_tasks() is True
    assert seen == [["upload"]]

    queue.off(TASKS_PENDING, seen.append)
    queue.has_tasks()
    assert seen == [["upload"]]


def test_check_connection_emits_open(queue: OfflineTasks, probe: SwitchProbe) -> None:
    opened: list[bool] = []
    queue.on(CONNECTION_OPENED, lambda: opened.append(True))

    assert queue.check_connection() is True
    assert queue.connection_state is True

    probe.online = False
    queue.check_connection()
    assert queue.connection_state is False
    assert opened == [True]


def test_autorun_runs_after_save(make_queue) -> None:
    queue = make_queue(autorun=True)
    handler = RecordingHandler()
    queue.register_handler("upload", handler)

    queue.save("upload", "a")
    queue.save_many({"upload": "b"})

    assert handler.tasks == ["a", "b"]
    assert queue.keys == []


def test_autorun_offline_schedules_retry(make_queue, probe: SwitchProbe, loop: FakeLoop) -> None:
    probe.online = False
    queue = make_queue(autorun=True, timeout=3.5)

    queue.save("upload", "a")

    assert [t.delay for t in loop.active_timers] == [3.5]

    queue.cancel()
    assert loop.active_timers == []
    assert queue.runner.retry_scheduled is False


def test_reserved_key(queue: OfflineTasks) -> None:
    with pytest.raises(ReservedKeyError):
        queue.save("keys", "a")
    with pytest.raises(ValueError):
        queue.save_many({"keys": "a"})


def test_register_handlers_mapping(queue: OfflineTasks) -> None:
    upload, mail = RecordingHandler(), RecordingHandler()
    queue.register_handlers({"upload": upload, "mail": mail})
    queue.save_many({"upload": "u", "mail": "m"})

    assert queue.unregister_handler("mail") is True
    assert queue.unregister_handler("mail") is False
    queue.run()

    assert upload.tasks == ["u"]
    assert mail.calls == []
    assert queue.keys == ["mail"]


def test_register_rejects_non_callable(queue: OfflineTasks) -> None:
    with pytest.raises(TypeError):
        queue.register_handler("upload", object())


def test_storage_errors_propagate(probe: SwitchProbe) -> None:
    class BrokenProvider(InMemoryProvider):
        def set_item(self, key, value):
            raise OSError("disk full")

    queue = OfflineTasks(provider=BrokenProvider(), connection_test=probe)
    with pytest.raises(OSError, match="disk full"):
        queue.save("upload", "a")
