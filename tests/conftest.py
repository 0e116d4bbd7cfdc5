# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.notifications import NotificationBus
from taskboard.core.state import AppState
from taskboard.tasks.task_persistence import TaskPersistence
from taskboard.tasks.task_store import TaskStore

from .fakes import FakeClock, InMemoryKeyValueStorage, RecordingListener


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        export_dir=tmp_path / "exports",
        storage_key="tasks",
        seed_sample_tasks=False,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture()
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture()
def store(storage: InMemoryKeyValueStorage, clock: FakeClock, listener: RecordingListener) -> TaskStore:
    """Empty store (no seed) wired to in-memory storage and a fixed clock."""
    bus = NotificationBus()
    bus.subscribe(listener)
    return TaskStore(TaskPersistence(storage, seed=None), notifications=bus, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store, notifications=store.notifications)
