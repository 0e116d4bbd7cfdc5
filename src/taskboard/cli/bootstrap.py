# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/persistence/store/notifications).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.notifications import NotificationBus
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.task_persistence import TaskPersistence
from ..tasks.task_seed import sample_tasks
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

MAX_NOTICES = 50


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.export_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    notifications = NotificationBus()
    persistence = TaskPersistence(
        SqliteKeyValueStore(settings.storage_db_path),
        key=settings.storage_key,
        seed=sample_tasks if settings.seed_sample_tasks else None,
    )
    state = AppState(
        settings=settings,
        task_store=TaskStore(persistence, notifications=notifications),
        notifications=notifications,
    )

    def _remember(notice) -> None:
        state.notices.append(notice)
        del state.notices[:-MAX_NOTICES]

    notifications.subscribe(_remember)
    return state
