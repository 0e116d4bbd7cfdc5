# src/taskboard/tasks/task_io.py

"""
Import/export of the whole task collection as a JSON document.

The same record shape is used for local storage and for exports; exports are
just pretty-printed.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from .task_models import Task, TaskFormatError, task_from_dict, task_to_dict


def export_tasks(tasks: Iterable[Task], *, indent: int | None = 2) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False, indent=indent)


def parse_tasks_document(text: str) -> list[Task]:
    """
    Decode a document into tasks. All-or-nothing: any bad record rejects the
    whole document with TaskFormatError.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise TaskFormatError(f"not a JSON document: {e}") from e

    if not isinstance(data, list):
        raise TaskFormatError(f"expected a list of tasks, got {type(data).__name__}")

    tasks: list[Task] = []
    seen: set[str] = set()
    for idx, raw in enumerate(data):
        try:
            task = task_from_dict(raw)
        except TaskFormatError as e:
            raise TaskFormatError(f"record #{idx}: {e}") from e
        if task.id in seen:
            raise TaskFormatError(f"record #{idx}: duplicate id {task.id!r}")
        seen.add(task.id)
        tasks.append(task)
    return tasks
