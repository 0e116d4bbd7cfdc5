# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_store import TaskStore
from .notifications import Notification, NotificationBus


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: object

    task_store: TaskStore
    notifications: NotificationBus

    # Recent notices for the console front-end (newest last).
    notices: list[Notification] = field(default_factory=list)
