# tests/test_task_metrics.py

from __future__ import annotations

from datetime import date

import pytest

from taskboard.tasks import task_metrics as m
from taskboard.tasks.task_models import Task, TaskPriority, TaskStatus

TODAY = date(2026, 10, 19)


def make_task(
    task_id: str,
    *,
    completed: bool = False,
    due: str = "",
    category: str = "Work",
    priority: TaskPriority = TaskPriority.MEDIUM,
    created: str = "2026-10-19T08:00:00+00:00",
    updated: str = "2026-10-19T08:00:00+00:00",
) -> Task:
    return Task(
        id=task_id,
        title=f"task {task_id}",
        description="",
        category=category,
        priority=priority,
        due_date=due,
        completed=completed,
        status=TaskStatus.DONE if completed else TaskStatus.TODO,
        created_at=created,
        updated_at=updated,
    )


def test_completion_rate_empty_is_zero() -> None:
    assert m.completion_rate([]) == 0
    assert m.productivity_score([], TODAY) == 0


def test_single_new_task_scores_zero() -> None:
    tasks = [make_task("1", due=TODAY.isoformat())]
    assert m.completion_rate(tasks) == 0
    assert m.productivity_score(tasks, TODAY) == 0


def test_single_overdue_incomplete_task_is_clamped_to_zero() -> None:
    tasks = [make_task("1", due="2026-10-18")]
    assert m.productivity_score(tasks, TODAY) == 0


def test_half_completed_none_overdue() -> None:
    tasks = [make_task("1", completed=True, due="2026-10-18"), make_task("2", due="2026-10-25")]
    assert m.completion_rate(tasks) == 50
    assert m.productivity_score(tasks, TODAY) == 50


def test_overdue_penalty_and_rounding() -> None:
    # 2 of 3 done, 1 overdue: 100 * (2/3 - 0.5/3) = 50.0
    tasks = [
        make_task("1", completed=True),
        make_task("2", completed=True),
        make_task("3", due="2026-01-01"),
    ]
    assert m.productivity_score(tasks, TODAY) == 50

    # 1 of 8 done, 0 overdue: 12.5 rounds half-up to 13
    eight = [make_task("d", completed=True)] + [make_task(str(i)) for i in range(7)]
    assert m.productivity_score(eight, TODAY) == 13


def test_completed_tasks_are_never_overdue() -> None:
    assert not m.is_overdue(make_task("1", completed=True, due="2020-01-01"), TODAY)
    assert m.is_overdue(make_task("2", due="2020-01-01"), TODAY)
    assert not m.is_overdue(make_task("3", due=TODAY.isoformat()), TODAY)
    assert not m.is_overdue(make_task("4", due=""), TODAY)
    assert not m.is_overdue(make_task("5", due="someday"), TODAY)


@pytest.mark.parametrize("total", [4, 10])
def test_score_monotonic_and_bounded(total: int) -> None:
    for overdue in range(total + 1):
        previous = -1
        for done in range(total - overdue + 1):
            tasks = (
                [make_task(f"d{i}", completed=True) for i in range(done)]
                + [make_task(f"o{i}", due="2026-01-01") for i in range(overdue)]
                + [make_task(f"p{i}") for i in range(total - done - overdue)]
            )
            score = m.productivity_score(tasks, TODAY)
            assert 0 <= score <= 100
            assert score >= previous
            previous = score

    for done in range(total + 1):
        previous = 101
        for overdue in range(total - done + 1):
            tasks = (
                [make_task(f"d{i}", completed=True) for i in range(done)]
                + [make_task(f"o{i}", due="2026-01-01") for i in range(overdue)]
                + [make_task(f"p{i}") for i in range(total - done - overdue)]
            )
            score = m.productivity_score(tasks, TODAY)
            assert score <= previous
            previous = score


def test_completed_by_date_single_day() -> None:
    result = m.tasks_completed_by_date([], TODAY, TODAY)
    assert result == [m.DateCount(date="2026-10-19", count=0)]


def test_completed_by_date_counts_updated_at_and_fills_gaps() -> None:
    tasks = [
        make_task("1", completed=True, updated="2026-10-17T10:00:00+00:00"),
        make_task("2", completed=True, updated="2026-10-19T23:30:00+00:00"),
        make_task("3", completed=True, updated="2026-10-19"),
        make_task("4", completed=False, updated="2026-10-19T10:00:00+00:00"),
        # 01:00 at +05:00 is still the 18th in UTC
        make_task("5", completed=True, updated="2026-10-19T01:00:00+05:00"),
    ]
    result = m.tasks_completed_by_date(tasks, "2026-10-16", "2026-10-19")
    assert [(d.date, d.count) for d in result] == [
        ("2026-10-16", 0),
        ("2026-10-17", 1),
        ("2026-10-18", 1),
        ("2026-10-19", 2),
    ]


def test_created_by_date_ignores_completion_and_bad_stamps() -> None:
    tasks = [
        make_task("1", created="2026-10-18T12:00:00+00:00"),
        make_task("2", completed=True, created="2026-10-18T13:00:00+00:00"),
        make_task("3", created="not a date"),
    ]
    result = m.tasks_created_by_date(tasks, date(2026, 10, 18), date(2026, 10, 19))
    assert [(d.date, d.count) for d in result] == [("2026-10-18", 2), ("2026-10-19", 0)]


def test_range_with_start_after_end_is_empty() -> None:
    assert m.tasks_created_by_date([], "2026-10-19", "2026-10-18") == []


def test_tasks_by_category_counts_all_tasks() -> None:
    tasks = [
        make_task("1", category="Work"),
        make_task("2", category="Home", completed=True),
        make_task("3", category="Work", completed=True),
    ]
    assert m.tasks_by_category(tasks) == [
        m.CategoryCount(category="Work", count=2),
        m.CategoryCount(category="Home", count=1),
    ]


def test_tasks_by_priority_always_three_entries() -> None:
    assert [(p.priority, p.count) for p in m.tasks_by_priority([])] == [
        (TaskPriority.HIGH, 0),
        (TaskPriority.MEDIUM, 0),
        (TaskPriority.LOW, 0),
    ]
    tasks = [make_task("1", priority=TaskPriority.LOW), make_task("2", priority=TaskPriority.LOW)]
    assert [(p.priority.value, p.count) for p in m.tasks_by_priority(tasks)] == [
        ("high", 0),
        ("medium", 0),
        ("low", 2),
    ]


def test_store_metrics_follow_mutations(store, clock) -> None:
    a = store.add_task(title="a", due_date="2026-10-25", priority="high")
    b = store.add_task(title="b", due_date="2026-10-25")
    assert store.completion_rate() == 0

    store.toggle_task(a.id)
    assert store.completion_rate() == 50
    assert store.productivity_score() == 50
    assert store.tasks_completed_by_date(clock().date(), clock().date())[0].count == 1

    store.update_task(b.id, due_date="2026-10-01")
    # 100 * (0.5 - 0.5 * 0.5) = 25
    assert store.productivity_score() == 25
    assert [t.id for t in store.overdue_tasks()] == [b.id]
    assert store.tasks_by_priority()[0].count == 1
