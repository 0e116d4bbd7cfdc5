# src/taskboard/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any

from ..core.notifications import Notification, NotificationBus, NotificationKind
from ..core.ports import Clock
from . import task_metrics
from .task_io import export_tasks, parse_tasks_document
from .task_models import (
    RecurringPattern,
    Task,
    TaskFormatError,
    TaskPriority,
    TaskStatus,
    check_task,
    completed_for,
    unique_strings,
    valid_minutes,
)
from .task_persistence import TaskPersistence

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"

_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})
_UPDATABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(Task)) - _IMMUTABLE_FIELDS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _normalize_seq(values: Any, *, unique: bool = False) -> Any:
    """
    Lists/tuples of strings become tuples (tags deduplicated); None becomes ().
    Anything else is returned as-is so check_task rejects it.
    """
    if values is None:
        return ()
    if isinstance(values, str) or not isinstance(values, Iterable):
        return values
    values = tuple(values)
    if unique and all(isinstance(v, str) for v in values):
        return unique_strings(values)
    return values


class TaskStore:
    """
    In-memory authoritative task collection.

    - every mutation persists the whole collection and emits a notification
    - `completed` and `status` are kept in sync (completed iff status == done)
    - categories / tags / filtered_tasks are recomputed on every read

    Failure signalling:
    - validation failure / unknown id -> None or False, nothing written
    - bad field names or statuses from callers -> ValueError
    """

    def __init__(
        self,
        persistence: TaskPersistence,
        *,
        notifications: NotificationBus | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        self._persistence = persistence
        self._notifications = notifications or NotificationBus()
        self._clock = clock
        self._search_term = ""
        self._tasks: list[Task] = persistence.load(self.today())
        logger.info("TaskStore ready key=%s total=%d", persistence.key, len(self._tasks))

    # ---- low-level helpers ----

    def _now_iso(self) -> str:
        return self._clock().isoformat()

    def today(self) -> date:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        return now.date()

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _commit(self) -> None:
        self._persistence.save(self._tasks)

    def _notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        *,
        destructive: bool = False,
        task_id: str | None = None,
    ) -> None:
        self._notifications.emit(
            Notification(kind=kind, title=title, message=message, destructive=destructive, task_id=task_id)
        )

    def _replace(self, idx: int, **changes: Any) -> Task:
        task = dataclasses.replace(self._tasks[idx], updated_at=self._now_iso(), **changes)
        self._tasks[idx] = task
        self._commit()
        return task

    @property
    def notifications(self) -> NotificationBus:
        return self._notifications

    # ---- read API ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    @property
    def categories(self) -> list[str]:
        return list(unique_strings(t.category for t in self._tasks))

    @property
    def tags(self) -> list[str]:
        return list(unique_strings(tag for t in self._tasks for tag in t.tags))

    @property
    def search_term(self) -> str:
        return self._search_term

    def set_search_term(self, term: str) -> None:
        self._search_term = term or ""

    @property
    def filtered_tasks(self) -> list[Task]:
        """Tasks whose title, description, category or any tag contains the search term."""
        needle = self._search_term.lower()
        if not needle:
            return list(self._tasks)

        def matches(t: Task) -> bool:
            return (
                needle in t.title.lower()
                or needle in t.description.lower()
                or needle in t.category.lower()
                or any(needle in tag.lower() for tag in t.tags)
            )

        return [t for t in self._tasks if matches(t)]

    def tasks_by_status(self, status: TaskStatus | str) -> list[Task]:
        wanted = TaskStatus(status)
        return [t for t in self.filtered_tasks if t.status == wanted]

    def tasks_due_on(self, day: date | str) -> list[Task]:
        wanted = task_metrics.as_date(day).isoformat()
        return [t for t in self.filtered_tasks if t.due_date == wanted]

    # ---- mutations ----

    def add_task(
        self,
        *,
        title: str,
        description: str = "",
        category: str = "",
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        due_date: str = "",
        tags: Iterable[str] = (),
        estimated_time: int | None = None,
        actual_time: int | None = None,
        notes: Iterable[str] = (),
        attachments: Iterable[str] = (),
        is_recurring: bool = False,
        recurring_pattern: RecurringPattern | str | None = None,
        assigned_to: str | None = None,
    ) -> Task | None:
        if not isinstance(title, str) or not title.strip():
            logger.warning("add_task rejected: blank title")
            return None
        for name, minutes in (("estimated_time", estimated_time), ("actual_time", actual_time)):
            if not valid_minutes(minutes):
                logger.warning("add_task rejected: %s must be a positive whole number, got %r", name, minutes)
                return None

        now = self._now_iso()
        try:
            task = Task(
                id=_new_id(),
                title=title,
                description=description,
                category=category,
                priority=TaskPriority.parse(priority),
                due_date=due_date,
                completed=False,
                status=TaskStatus.TODO,
                created_at=now,
                updated_at=now,
                tags=_normalize_seq(tags, unique=True),
                notes=_normalize_seq(notes),
                attachments=_normalize_seq(attachments),
                estimated_time=estimated_time,
                actual_time=actual_time,
                is_recurring=is_recurring,
                recurring_pattern=RecurringPattern.parse(recurring_pattern) if recurring_pattern is not None else None,
                assigned_to=assigned_to,
            )
            check_task(task)
        except TaskFormatError as e:
            logger.warning("add_task rejected: %s", e)
            return None

        self._tasks.append(task)
        self._commit()
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        self._notify(
            NotificationKind.CREATED,
            "Task added",
            f'"{task.title}" was added to your tasks.',
            task_id=task.id,
        )
        return task

    def update_task(self, task_id: str, **changes: Any) -> bool:
        """
        Merge `changes` into a task.

        completed/status stay in sync:
        - only status given -> completed follows it
        - only completed given -> status becomes done, or todo when reopening a done task
        - both given -> status wins
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update fields: {', '.join(sorted(unknown))}")

        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("update_task: id=%s not found", task_id)
            return False
        current = self._tasks[idx]

        if "title" in changes and (not isinstance(changes["title"], str) or not changes["title"].strip()):
            logger.warning("update_task rejected id=%s: blank title", task_id)
            return False

        try:
            if "priority" in changes:
                changes["priority"] = TaskPriority.parse(changes["priority"])
            if "status" in changes:
                changes["status"] = TaskStatus.parse(changes["status"])
            if changes.get("recurring_pattern") is not None:
                changes["recurring_pattern"] = RecurringPattern.parse(changes["recurring_pattern"])
        except TaskFormatError as e:
            logger.warning("update_task rejected id=%s: %s", task_id, e)
            return False

        for seq in ("tags", "notes", "attachments"):
            if seq in changes:
                changes[seq] = _normalize_seq(changes[seq], unique=seq == "tags")

        if "completed" in changes and not isinstance(changes["completed"], bool):
            logger.warning("update_task rejected id=%s: completed must be a boolean", task_id)
            return False

        if "status" in changes:
            if "completed" in changes and bool(changes["completed"]) != completed_for(changes["status"]):
                logger.warning("update_task id=%s: completed contradicts status; status wins", task_id)
            changes["completed"] = completed_for(changes["status"])
        elif "completed" in changes:
            completed = bool(changes["completed"])
            changes["completed"] = completed
            if completed:
                changes["status"] = TaskStatus.DONE
            elif current.status == TaskStatus.DONE:
                changes["status"] = TaskStatus.TODO

        # The merged record must round-trip through storage, or the next load drops every task.
        try:
            check_task(dataclasses.replace(current, **changes))
        except TaskFormatError as e:
            logger.warning("update_task rejected id=%s: %s", task_id, e)
            return False

        self._replace(idx, **changes)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        self._notify(
            NotificationKind.UPDATED,
            "Task updated",
            "Your changes to the task were saved.",
            task_id=task_id,
        )
        return True

    def delete_task(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete_task: id=%s not found", task_id)
            return False

        removed = self._tasks.pop(idx)
        self._commit()
        logger.debug("Task deleted id=%s", task_id)
        self._notify(
            NotificationKind.DELETED,
            "Task deleted",
            f'"{removed.title}" was removed from your tasks.',
            destructive=True,
            task_id=task_id,
        )
        return True

    def toggle_task(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("toggle_task: id=%s not found", task_id)
            return False

        completed = not self._tasks[idx].completed
        status = TaskStatus.DONE if completed else TaskStatus.TODO
        task = self._replace(idx, completed=completed, status=status)
        self._notify(
            NotificationKind.TOGGLED,
            "Task completed" if completed else "Task reopened",
            f'"{task.title}" is now {status.value}.',
            task_id=task_id,
        )
        return True

    def move_task(self, task_id: str, new_status: TaskStatus | str) -> bool:
        """Move to any column; no transition is forbidden."""
        try:
            status = TaskStatus.parse(new_status)
        except TaskFormatError as e:
            raise ValueError(str(e)) from None

        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("move_task: id=%s not found", task_id)
            return False

        task = self._replace(idx, status=status, completed=completed_for(status))
        self._notify(
            NotificationKind.MOVED,
            "Task moved",
            f'"{task.title}" moved to {status.value}.',
            task_id=task_id,
        )
        return True

    def duplicate_task(self, task_id: str) -> Task | None:
        source = self.get_task(task_id)
        if source is None:
            logger.debug("duplicate_task: id=%s not found", task_id)
            return None

        now = self._now_iso()
        copy = dataclasses.replace(
            source,
            id=_new_id(),
            title=f"{source.title}{COPY_SUFFIX}",
            created_at=now,
            updated_at=now,
            completed=False,
            status=TaskStatus.TODO,
        )
        self._tasks.append(copy)
        self._commit()
        self._notify(
            NotificationKind.DUPLICATED,
            "Task duplicated",
            f'"{copy.title}" was added to your tasks.',
            task_id=copy.id,
        )
        return copy

    def add_note(self, task_id: str, text: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("add_note: id=%s not found", task_id)
            return False
        task = self._replace(idx, notes=(*self._tasks[idx].notes, text))
        self._notify(NotificationKind.NOTE_ADDED, "Note added", f'Note added to "{task.title}".', task_id=task_id)
        return True

    def add_attachment(self, task_id: str, ref: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("add_attachment: id=%s not found", task_id)
            return False
        task = self._replace(idx, attachments=(*self._tasks[idx].attachments, ref))
        self._notify(
            NotificationKind.ATTACHMENT_ADDED,
            "Attachment added",
            f'Attachment added to "{task.title}".',
            task_id=task_id,
        )
        return True

    def add_tag(self, tag: str) -> bool:
        """
        Announce a new tag. The vocabulary is derived from tasks, so nothing is
        stored; returns False when the tag is blank or already known.
        """
        tag = (tag or "").strip()
        if not tag or tag in self.tags:
            return False
        self._notify(NotificationKind.TAG_ADDED, "Tag added", f'Tag "{tag}" was added.')
        return True

    def add_category(self, category: str) -> bool:
        category = (category or "").strip()
        if not category or category in self.categories:
            return False
        self._notify(NotificationKind.CATEGORY_ADDED, "Category added", f'Category "{category}" was added.')
        return True

    # ---- import / export ----

    def export_tasks(self) -> str:
        return export_tasks(self._tasks)

    def import_tasks(self, document: str) -> bool:
        """Replace the whole collection with `document`; on any error nothing changes."""
        try:
            imported = parse_tasks_document(document)
        except TaskFormatError as e:
            logger.warning("import_tasks rejected: %s", e)
            self._notify(
                NotificationKind.IMPORT_FAILED,
                "Import failed",
                "The data format is invalid.",
                destructive=True,
            )
            return False

        self._tasks = imported
        self._commit()
        logger.info("Imported %d tasks", len(imported))
        self._notify(NotificationKind.IMPORTED, "Tasks imported", f"{len(imported)} tasks were imported.")
        return True

    # ---- metrics (always computed on the live collection) ----

    def tasks_completed_by_date(self, start: date | str, end: date | str) -> list[task_metrics.DateCount]:
        return task_metrics.tasks_completed_by_date(self._tasks, start, end)

    def tasks_created_by_date(self, start: date | str, end: date | str) -> list[task_metrics.DateCount]:
        return task_metrics.tasks_created_by_date(self._tasks, start, end)

    def tasks_by_category(self) -> list[task_metrics.CategoryCount]:
        return task_metrics.tasks_by_category(self._tasks)

    def tasks_by_priority(self) -> list[task_metrics.PriorityCount]:
        return task_metrics.tasks_by_priority(self._tasks)

    def completion_rate(self) -> float:
        return task_metrics.completion_rate(self._tasks)

    def productivity_score(self) -> int:
        return task_metrics.productivity_score(self._tasks, self.today())

    def overdue_tasks(self) -> list[Task]:
        return task_metrics.overdue_tasks(self._tasks, self.today())
