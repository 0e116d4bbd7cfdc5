# src/taskboard/tasks/task_persistence.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date

from ..core.ports import KeyValueStorage
from .task_io import export_tasks, parse_tasks_document
from .task_models import Task, TaskFormatError
from .task_seed import sample_tasks

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


class TaskPersistence:
    """
    Loads/saves the whole task collection under one storage key.

    - missing key -> seed data (persisted right away)
    - corrupt payload -> logged, seed data (persisted right away)
    - every save overwrites the previous snapshot
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        seed: Callable[[date], list[Task]] | None = sample_tasks,
    ) -> None:
        self._storage = storage
        self._key = key
        self._seed = seed

    @property
    def key(self) -> str:
        return self._key

    def load(self, today: date) -> list[Task]:
        raw = self._storage.get_item(self._key)
        if raw is None:
            logger.info("No stored tasks under key=%s; seeding.", self._key)
            return self._seed_and_save(today)

        try:
            tasks = parse_tasks_document(raw)
        except TaskFormatError:
            logger.exception("Stored tasks under key=%s are corrupt; falling back to seed.", self._key)
            return self._seed_and_save(today)

        logger.info("Loaded %d tasks from key=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        self._storage.set_item(self._key, export_tasks(tasks, indent=None))

    def _seed_and_save(self, today: date) -> list[Task]:
        tasks = self._seed(today) if self._seed is not None else []
        self.save(tasks)
        return tasks
