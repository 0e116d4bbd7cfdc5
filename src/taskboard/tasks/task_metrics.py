# src/taskboard/tasks/task_metrics.py

"""
Derived metrics over a task collection.

Every function is pure and re-reads the tasks it is given; nothing is cached,
so results always match the live collection at the cost of O(n) per call.

Dates:
- timestamps carrying a zone are converted to UTC before taking the date
- a bare YYYY-MM-DD value is its own date
- values that do not parse are ignored
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from .task_models import Task, TaskPriority

# Exact constants of the productivity score.
OVERDUE_WEIGHT = 0.5
SCORE_MIN = 0
SCORE_MAX = 100

PRIORITY_ORDER: tuple[TaskPriority, ...] = (TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)


@dataclass(frozen=True, slots=True)
class DateCount:
    date: str
    count: int


@dataclass(frozen=True, slots=True)
class CategoryCount:
    category: str
    count: int


@dataclass(frozen=True, slots=True)
class PriorityCount:
    priority: TaskPriority
    count: int


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def timestamp_date(value: str) -> date | None:
    """Calendar (UTC) date of an ISO timestamp, or None when unparsable."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.date()


def due_date_of(task: Task) -> date | None:
    if not task.due_date:
        return None
    try:
        return date.fromisoformat(task.due_date)
    except ValueError:
        return None


def is_overdue(task: Task, today: date) -> bool:
    due = due_date_of(task)
    return due is not None and due < today and not task.completed


def overdue_tasks(tasks: Iterable[Task], today: date | None = None) -> list[Task]:
    today = today or utc_today()
    return [t for t in tasks if is_overdue(t, today)]


def _days(start: date | str, end: date | str) -> list[date]:
    first, last = as_date(start), as_date(end)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def _histogram(days: list[date], stamps: Iterable[date | None]) -> list[DateCount]:
    counts: dict[date, int] = {}
    for d in stamps:
        if d is not None:
            counts[d] = counts.get(d, 0) + 1
    return [DateCount(date=d.isoformat(), count=counts.get(d, 0)) for d in days]


def tasks_completed_by_date(tasks: Iterable[Task], start: date | str, end: date | str) -> list[DateCount]:
    """
    Completed tasks per day over [start, end], keyed on the date of `updated_at`.
    Every day of the range is present, zero days included.
    """
    days = _days(start, end)
    return _histogram(days, (timestamp_date(t.updated_at) for t in tasks if t.completed))


def tasks_created_by_date(tasks: Iterable[Task], start: date | str, end: date | str) -> list[DateCount]:
    days = _days(start, end)
    return _histogram(days, (timestamp_date(t.created_at) for t in tasks))


def tasks_by_category(tasks: Iterable[Task]) -> list[CategoryCount]:
    counts: dict[str, int] = {}
    for t in tasks:
        counts[t.category] = counts.get(t.category, 0) + 1
    return [CategoryCount(category=c, count=n) for c, n in counts.items()]


def tasks_by_priority(tasks: Iterable[Task]) -> list[PriorityCount]:
    counts = dict.fromkeys(PRIORITY_ORDER, 0)
    for t in tasks:
        counts[t.priority] = counts.get(t.priority, 0) + 1
    return [PriorityCount(priority=p, count=counts[p]) for p in PRIORITY_ORDER]


def completion_rate(tasks: Sequence[Task]) -> float:
    """Percentage of completed tasks; 0.0 for an empty collection."""
    if not tasks:
        return 0.0
    done = sum(1 for t in tasks if t.completed)
    return done / len(tasks) * 100


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def productivity_score(tasks: Sequence[Task], today: date | None = None) -> int:
    """
    0..100 score: 100 * (completed share - 0.5 * overdue share), rounded
    half-up and clamped. An empty collection scores 0.
    """
    if not tasks:
        return 0
    today = today or utc_today()

    total = len(tasks)
    done = sum(1 for t in tasks if t.completed)
    overdue = sum(1 for t in tasks if is_overdue(t, today))

    score = 100 * (done / total - OVERDUE_WEIGHT * (overdue / total))
    return max(SCORE_MIN, min(SCORE_MAX, _round_half_up(score)))
