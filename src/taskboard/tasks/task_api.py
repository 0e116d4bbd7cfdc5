# src/taskboard/tasks/task_api.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from enum import StrEnum

from .task_metrics import DateCount, is_overdue
from .task_models import Task, TaskPriority


class ListView(StrEnum):
    ALL = "all"
    TODAY = "today"
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class ScoreBand(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_IMPROVEMENT = "needs improvement"


def today_tasks(tasks: Iterable[Task], today: date) -> list[Task]:
    """Open tasks due today."""
    day = today.isoformat()
    return [t for t in tasks if t.due_date == day and not t.completed]


def upcoming_tasks(tasks: Iterable[Task], today: date) -> list[Task]:
    """Open tasks due after today (plain ISO string comparison)."""
    day = today.isoformat()
    return [t for t in tasks if t.due_date > day and not t.completed]


def completed_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.completed]


def open_high_priority(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.priority == TaskPriority.HIGH and not t.completed]


def recent_tasks(tasks: Iterable[Task], limit: int = 5) -> list[Task]:
    """Most recently touched tasks first."""
    return sorted(tasks, key=lambda t: t.updated_at, reverse=True)[: max(0, limit)]


def list_view(tasks: Iterable[Task], view: ListView | str, today: date) -> list[Task]:
    view = ListView(view)
    if view == ListView.TODAY:
        return today_tasks(tasks, today)
    if view == ListView.UPCOMING:
        return upcoming_tasks(tasks, today)
    if view == ListView.COMPLETED:
        return completed_tasks(tasks)
    if view == ListView.OVERDUE:
        return [t for t in tasks if is_overdue(t, today)]
    return list(tasks)


def score_band(score: int) -> ScoreBand:
    if score >= 80:
        return ScoreBand.EXCELLENT
    if score >= 60:
        return ScoreBand.GOOD
    if score >= 40:
        return ScoreBand.FAIR
    return ScoreBand.NEEDS_IMPROVEMENT


def greeting(now: datetime) -> str:
    hour = now.hour
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    if hour < 20:
        return "Good evening"
    return "Good night"


def weekly_trend(series: Sequence[DateCount]) -> float:
    """
    Percent change of the last 7 entries against the 7 before them.
    0.0 when the earlier week has nothing to compare against.
    """
    this_week = sum(item.count for item in series[-7:])
    last_week = sum(item.count for item in series[-14:-7])
    if last_week <= 0:
        return 0.0
    return (this_week - last_week) / last_week * 100
