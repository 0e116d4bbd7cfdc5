# src/taskboard/tasks/task_models.py

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskFormatError(ValueError):
    """Raised when a serialized record cannot be turned into a Task."""


class TaskStatus(StrEnum):
    """
    Workflow column of a task.

    Notes:
    - the board allows any transition, there is no terminal state
    - DONE is the only status that counts as completed
    """

    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        try:
            return cls(raw)
        except ValueError:
            raise TaskFormatError(f"unknown status: {raw!r}") from None


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        try:
            return cls(raw)
        except ValueError:
            raise TaskFormatError(f"unknown priority: {raw!r}") from None


class RecurringPattern(StrEnum):
    # Descriptive only: nothing regenerates recurring tasks.
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, raw: Any) -> RecurringPattern:
        try:
            return cls(raw)
        except ValueError:
            raise TaskFormatError(f"unknown recurring pattern: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    category: str
    priority: TaskPriority
    due_date: str  # YYYY-MM-DD, may be empty

    completed: bool
    status: TaskStatus

    created_at: str
    updated_at: str

    tags: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    attachments: tuple[str, ...] = ()

    estimated_time: int | None = None  # minutes
    actual_time: int | None = None  # minutes

    is_recurring: bool = False
    recurring_pattern: RecurringPattern | None = None
    assigned_to: str | None = None


# Wire name -> attribute name. Wire names are what storage and exports use.
WIRE_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "category": "category",
    "priority": "priority",
    "dueDate": "due_date",
    "completed": "completed",
    "status": "status",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "tags": "tags",
    "estimatedTime": "estimated_time",
    "actualTime": "actual_time",
    "attachments": "attachments",
    "notes": "notes",
    "isRecurring": "is_recurring",
    "recurringPattern": "recurring_pattern",
    "assignedTo": "assigned_to",
}


def unique_strings(values: Iterable[str]) -> tuple[str, ...]:
    """Drop duplicates, keep first-seen order."""
    return tuple(dict.fromkeys(values))


def completed_for(status: TaskStatus) -> bool:
    return status == TaskStatus.DONE


def task_to_dict(task: Task) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "category": task.category,
        "priority": task.priority.value,
        "dueDate": task.due_date,
        "completed": task.completed,
        "status": task.status.value,
        "createdAt": task.created_at,
        "updatedAt": task.updated_at,
        "tags": list(task.tags),
        "notes": list(task.notes),
        "attachments": list(task.attachments),
    }
    if task.is_recurring:
        out["isRecurring"] = True
    if task.estimated_time is not None:
        out["estimatedTime"] = task.estimated_time
    if task.actual_time is not None:
        out["actualTime"] = task.actual_time
    if task.recurring_pattern is not None:
        out["recurringPattern"] = task.recurring_pattern.value
    if task.assigned_to is not None:
        out["assignedTo"] = task.assigned_to
    return out


def _str(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    val = raw.get(key, default)
    if val is None:
        return default
    if not isinstance(val, str):
        raise TaskFormatError(f"{key} must be a string, got {type(val).__name__}")
    return val


def _str_seq(raw: Mapping[str, Any], key: str) -> tuple[str, ...]:
    val = raw.get(key)
    if val is None:
        return ()
    if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
        raise TaskFormatError(f"{key} must be a list of strings")
    return tuple(val)


def valid_minutes(val: Any) -> bool:
    """None, or a positive whole number of minutes (bool is an int subclass and is refused)."""
    if val is None:
        return True
    return isinstance(val, int) and not isinstance(val, bool) and val > 0


def _minutes(raw: Mapping[str, Any], key: str) -> int | None:
    val = raw.get(key)
    if val is None:
        return None
    if isinstance(val, bool) or not isinstance(val, int | float):
        raise TaskFormatError(f"{key} must be a number of minutes")
    # json.loads accepts NaN and Infinity.
    if not math.isfinite(val) or val != int(val):
        raise TaskFormatError(f"{key} must be a whole number of minutes")
    if val <= 0:
        raise TaskFormatError(f"{key} must be positive")
    return int(val)


_STR_FIELDS = ("id", "title", "description", "category", "due_date", "created_at", "updated_at")
_SEQ_FIELDS = ("tags", "notes", "attachments")


def check_task(task: Task) -> None:
    """
    Raise TaskFormatError unless every field has the type `task_from_dict` would produce.

    Anything that passes survives a save/load cycle unchanged.
    """
    for name in _STR_FIELDS:
        if not isinstance(getattr(task, name), str):
            raise TaskFormatError(f"{name} must be a string")
    for name in _SEQ_FIELDS:
        val = getattr(task, name)
        if not isinstance(val, tuple) or not all(isinstance(v, str) for v in val):
            raise TaskFormatError(f"{name} must be a list of strings")
    for name in ("completed", "is_recurring"):
        if not isinstance(getattr(task, name), bool):
            raise TaskFormatError(f"{name} must be a boolean")
    for name in ("estimated_time", "actual_time"):
        if not valid_minutes(getattr(task, name)):
            raise TaskFormatError(f"{name} must be a positive whole number of minutes")
    if not isinstance(task.priority, TaskPriority) or not isinstance(task.status, TaskStatus):
        raise TaskFormatError("priority and status must be enum members")
    if task.recurring_pattern is not None and not isinstance(task.recurring_pattern, RecurringPattern):
        raise TaskFormatError("recurring_pattern must be a RecurringPattern")
    if task.assigned_to is not None and not isinstance(task.assigned_to, str):
        raise TaskFormatError("assigned_to must be a string")


def task_from_dict(raw: Any) -> Task:
    """
    Build a Task from a wire record (camelCase keys).

    Only `id` and `title` are required; every other field gets the same default
    the store would give a fresh task. When `status` and `completed` disagree,
    `status` wins so the invariant holds for everything we load.
    """
    if not isinstance(raw, Mapping):
        raise TaskFormatError(f"task record must be an object, got {type(raw).__name__}")

    task_id = raw.get("id")
    if not isinstance(task_id, str) or not task_id:
        raise TaskFormatError("task record needs a non-empty string id")
    title = raw.get("title")
    if not isinstance(title, str):
        raise TaskFormatError(f"task {task_id} needs a string title")

    completed_raw = raw.get("completed")
    if completed_raw is not None and not isinstance(completed_raw, bool):
        raise TaskFormatError(f"task {task_id}: completed must be a boolean")

    if raw.get("status") is not None:
        status = TaskStatus.parse(raw["status"])
    else:
        status = TaskStatus.DONE if completed_raw else TaskStatus.TODO

    priority = TaskPriority.parse(raw.get("priority") or TaskPriority.MEDIUM.value)

    pattern_raw = raw.get("recurringPattern")
    pattern = RecurringPattern.parse(pattern_raw) if pattern_raw is not None else None

    recurring_raw = raw.get("isRecurring", False)
    if not isinstance(recurring_raw, bool):
        raise TaskFormatError(f"task {task_id}: isRecurring must be a boolean")

    assigned = raw.get("assignedTo")
    if assigned is not None and not isinstance(assigned, str):
        raise TaskFormatError(f"task {task_id}: assignedTo must be a string")

    return Task(
        id=task_id,
        title=title,
        description=_str(raw, "description"),
        category=_str(raw, "category"),
        priority=priority,
        due_date=_str(raw, "dueDate"),
        completed=completed_for(status),
        status=status,
        created_at=_str(raw, "createdAt"),
        updated_at=_str(raw, "updatedAt"),
        tags=unique_strings(_str_seq(raw, "tags")),
        notes=_str_seq(raw, "notes"),
        attachments=_str_seq(raw, "attachments"),
        estimated_time=_minutes(raw, "estimatedTime"),
        actual_time=_minutes(raw, "actualTime"),
        is_recurring=recurring_raw,
        recurring_pattern=pattern,
        assigned_to=assigned,
    )
