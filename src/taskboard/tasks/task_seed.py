# src/taskboard/tasks/task_seed.py

from __future__ import annotations

from datetime import date, timedelta

from .task_models import RecurringPattern, Task, TaskPriority, TaskStatus


def sample_tasks(today: date) -> list[Task]:
    """
    Fixed sample set used to populate an empty store on first run.

    Dates are relative to `today` so the dashboard has something due today,
    tomorrow and next week.
    """
    day = today.isoformat()
    tomorrow = (today + timedelta(days=1)).isoformat()
    next_week = (today + timedelta(days=7)).isoformat()

    return [
        Task(
            id="1",
            title="Finish the Q4 project report",
            description="Full report for the fourth quarter including performance analysis and recommendations",
            category="Work",
            priority=TaskPriority.HIGH,
            due_date=tomorrow,
            completed=False,
            status=TaskStatus.IN_PROGRESS,
            created_at=day,
            updated_at=day,
            tags=("report", "important", "deadline"),
            estimated_time=120,
            notes=(
                "Include the numbers from the marketing team",
                "Needs a manager review before submitting",
            ),
        ),
        Task(
            id="2",
            title="Weekly grocery shopping",
            description="Buy food for the week at the supermarket",
            category="Personal",
            priority=TaskPriority.MEDIUM,
            due_date=day,
            completed=False,
            status=TaskStatus.TODO,
            created_at=day,
            updated_at=day,
            tags=("shopping", "routine"),
            is_recurring=True,
            recurring_pattern=RecurringPattern.WEEKLY,
        ),
        Task(
            id="3",
            title="Morning workout",
            description="30 minute jog in the park",
            category="Health",
            priority=TaskPriority.LOW,
            due_date=day,
            completed=True,
            status=TaskStatus.DONE,
            created_at=day,
            updated_at=day,
            tags=("exercise", "routine"),
            is_recurring=True,
            recurring_pattern=RecurringPattern.DAILY,
        ),
        Task(
            id="4",
            title="Meeting with a new client",
            description="Discuss project requirements and timeline",
            category="Work",
            priority=TaskPriority.HIGH,
            due_date=tomorrow,
            completed=False,
            status=TaskStatus.TODO,
            created_at=day,
            updated_at=day,
            tags=("meeting", "client", "important"),
            estimated_time=60,
        ),
        Task(
            id="5",
            title="Learn React hooks",
            description="Study useContext and useReducer",
            category="Learning",
            priority=TaskPriority.MEDIUM,
            due_date=next_week,
            completed=False,
            status=TaskStatus.BACKLOG,
            created_at=day,
            updated_at=day,
            tags=("react", "programming", "online"),
        ),
        Task(
            id="6",
            title="Read 'Atomic Habits'",
            description="Finish chapters 5-7",
            category="Personal",
            priority=TaskPriority.LOW,
            due_date=next_week,
            completed=False,
            status=TaskStatus.IN_PROGRESS,
            created_at=day,
            updated_at=day,
            tags=("books", "self-improvement"),
        ),
        Task(
            id="7",
            title="Pay the electricity bill",
            description="Pay this month's electricity bill",
            category="Personal",
            priority=TaskPriority.HIGH,
            due_date=tomorrow,
            completed=False,
            status=TaskStatus.TODO,
            created_at=day,
            updated_at=day,
            tags=("bills", "monthly"),
            is_recurring=True,
            recurring_pattern=RecurringPattern.MONTHLY,
        ),
    ]
