# tests/test_notifications.py

from __future__ import annotations

from taskboard.core.notifications import Notification, NotificationBus, NotificationKind

from .fakes import RecordingListener


def _notice() -> Notification:
    return Notification(kind=NotificationKind.CREATED, title="Task added", message="x")


def test_emit_reaches_every_listener_until_unsubscribed() -> None:
    bus = NotificationBus()
    a, b = RecordingListener(), RecordingListener()
    bus.subscribe(a)
    unsubscribe_b = bus.subscribe(b)

    bus.emit(_notice())
    unsubscribe_b()
    unsubscribe_b()
    bus.emit(_notice())

    assert len(a.received) == 2
    assert len(b.received) == 1
    assert len(bus) == 1


def test_failing_listener_is_logged_and_skipped(caplog) -> None:
    bus = NotificationBus()
    after = RecordingListener()

    def broken(_n: Notification) -> None:
        raise RuntimeError("listener bug")

    bus.subscribe(broken)
    bus.subscribe(after)
    bus.emit(_notice())

    assert len(after.received) == 1
    assert "Notification listener failed" in caplog.text


def test_emit_without_listeners_is_fine() -> None:
    NotificationBus().emit(_notice())
