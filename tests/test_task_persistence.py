# tests/test_task_persistence.py

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from taskboard.storage.kv_store import SqliteKeyValueStore
from taskboard.tasks.task_io import export_tasks
from taskboard.tasks.task_models import TaskStatus
from taskboard.tasks.task_persistence import TaskPersistence
from taskboard.tasks.task_seed import sample_tasks
from taskboard.tasks.task_store import TaskStore

from .fakes import InMemoryKeyValueStorage

TODAY = date(2026, 10, 19)


def test_first_run_seeds_and_persists(storage) -> None:
    tasks = TaskPersistence(storage).load(TODAY)
    assert [t.id for t in tasks] == ["1", "2", "3", "4", "5", "6", "7"]
    assert json.loads(storage.items["tasks"])[0]["id"] == "1"
    assert storage.writes == 1


def test_seed_is_consistent_and_relative_to_today() -> None:
    tasks = sample_tasks(TODAY)
    for t in tasks:
        assert t.completed == (t.status == TaskStatus.DONE)
    due = {t.due_date for t in tasks}
    assert due == {"2026-10-19", "2026-10-20", "2026-10-26"}
    assert {t.category for t in tasks} == {"Work", "Personal", "Health", "Learning"}


def test_corrupt_payload_falls_back_to_seed(caplog) -> None:
    storage = InMemoryKeyValueStorage({"tasks": "{not json"})
    tasks = TaskPersistence(storage).load(TODAY)
    assert len(tasks) == 7
    assert json.loads(storage.items["tasks"])[6]["id"] == "7"
    assert "corrupt" in caplog.text


def test_non_task_payload_falls_back_to_seed() -> None:
    storage = InMemoryKeyValueStorage({"tasks": json.dumps({"id": "1"})})
    assert len(TaskPersistence(storage).load(TODAY)) == 7


def test_no_seed_starts_empty() -> None:
    storage = InMemoryKeyValueStorage()
    assert TaskPersistence(storage, seed=None).load(TODAY) == []
    assert storage.items["tasks"] == "[]"


def test_existing_payload_is_loaded_untouched() -> None:
    stored = sample_tasks(TODAY)[:2]
    storage = InMemoryKeyValueStorage({"board": export_tasks(stored)})
    persistence = TaskPersistence(storage, key="board")
    assert persistence.load(TODAY) == stored
    assert storage.writes == 0


def test_store_on_sqlite_storage_round_trip(tmp_path: Path, clock) -> None:
    kv = SqliteKeyValueStore(tmp_path / "storage.sqlite3")
    store = TaskStore(TaskPersistence(kv), clock=clock)
    assert len(store) == 7

    store.add_task(title="From sqlite", tags=["db"])
    store.toggle_task("2")

    reopened = TaskStore(TaskPersistence(SqliteKeyValueStore(tmp_path / "storage.sqlite3")), clock=clock)
    assert reopened.tasks == store.tasks
    assert reopened.get_task("2").completed is True


@pytest.mark.parametrize("payload", ["NaN", "Infinity", "-Infinity", "0", "-3"])
def test_bad_minutes_in_storage_fall_back_to_seed(payload: str) -> None:
    storage = InMemoryKeyValueStorage({"tasks": f'[{{"id": "a", "title": "x", "estimatedTime": {payload}}}]'})
    tasks = TaskPersistence(storage).load(TODAY)
    assert [t.id for t in tasks] == ["1", "2", "3", "4", "5", "6", "7"]
