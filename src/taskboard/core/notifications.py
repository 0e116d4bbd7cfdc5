# src/taskboard/core/notifications.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NotificationKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    TOGGLED = "toggled"
    MOVED = "moved"
    DUPLICATED = "duplicated"
    NOTE_ADDED = "note_added"
    ATTACHMENT_ADDED = "attachment_added"
    TAG_ADDED = "tag_added"
    CATEGORY_ADDED = "category_added"
    IMPORTED = "imported"
    IMPORT_FAILED = "import_failed"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str
    destructive: bool = False
    task_id: str | None = None


NotificationListener = Callable[[Notification], None]
# Called once per emitted notification (toast-style user feedback).


class NotificationBus:
    """
    Fan-out of store events to any number of listeners (zero is fine).

    A failing listener is logged and skipped; it never undoes the mutation
    that triggered the notification.
    """

    def __init__(self) -> None:
        self._listeners: list[NotificationListener] = []

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, notification: Notification) -> None:
        logger.debug("Notification kind=%s title=%s", notification.kind.value, notification.title)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed kind=%s", notification.kind.value)

    def __len__(self) -> int:
        return len(self._listeners)
