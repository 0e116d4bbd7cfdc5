# tests/test_commands.py

from __future__ import annotations

import json
from pathlib import Path

from taskboard.cli.commands import CommandRegistry, registry
from taskboard.connectors.console_connector import dispatch_line
from taskboard.tasks.task_models import TaskPriority, TaskStatus


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert reg.handle(state, "/BEE y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert "Cannot parse" in (reg.handle(state, '/add "unclosed') or "")


def test_add_parses_tags_category_priority_and_due(state) -> None:
    reply = registry.handle(state, "/add Buy oat milk #errand @Personal !high due:2026-10-21")
    assert reply is not None and reply.startswith("Added")

    (task,) = state.task_store.tasks
    assert task.title == "Buy oat milk"
    assert task.tags == ("errand",)
    assert task.category == "Personal"
    assert task.priority == TaskPriority.HIGH
    assert task.due_date == "2026-10-21"


def test_add_rejects_blank_title_and_bad_due(state) -> None:
    assert "not added" in registry.handle(state, "/add #onlytag")
    assert "Invalid due date" in registry.handle(state, "/add Thing due:tomorrow")
    assert len(state.task_store) == 0


def test_lifecycle_by_id_prefix(state) -> None:
    task = state.task_store.add_task(title="Ship it")
    prefix = task.id[:6]

    registry.handle(state, f"/move {prefix} review")
    assert state.task_store.get_task(task.id).status == TaskStatus.REVIEW

    registry.handle(state, f"/done {prefix}")
    assert state.task_store.get_task(task.id).completed is True

    registry.handle(state, f"/note {prefix} remember the changelog")
    registry.handle(state, f"/attach {prefix} https://example.com/pr/1")
    details = registry.handle(state, f"/show {prefix}")
    assert "remember the changelog" in details
    assert "https://example.com/pr/1" in details

    assert "Added" in registry.handle(state, f"/dup {prefix}")
    assert len(state.task_store) == 2

    assert "Removed" in registry.handle(state, f"/rm {task.id}")
    assert state.task_store.get_task(task.id) is None
    assert "No task matches" in registry.handle(state, f"/rm {task.id}")


def test_move_unknown_status_is_reported(state) -> None:
    task = state.task_store.add_task(title="x")
    assert "Unknown status" in registry.handle(state, f"/move {task.id} archived")


def test_edit_updates_fields(state) -> None:
    task = state.task_store.add_task(title="Old")
    reply = registry.handle(
        state,
        f'/edit {task.id} title="New title" priority=low estimate=45 tags=a,b recurring=weekly status=done',
    )
    assert reply.startswith("Updated")
    now = state.task_store.get_task(task.id)
    assert now.title == "New title"
    assert now.priority == TaskPriority.LOW
    assert now.estimated_time == 45
    assert now.tags == ("a", "b")
    assert now.is_recurring is True
    assert now.completed is True

    assert "Cannot edit" in registry.handle(state, f"/edit {task.id} colour=red")
    assert "not updated" in registry.handle(state, f"/edit {task.id} priority=urgent")


def test_list_views_and_search(state) -> None:
    store = state.task_store
    today = store.today().isoformat()
    store.add_task(title="Due today", due_date=today)
    late = store.add_task(title="Late one", due_date="2020-01-01")
    store.add_task(title="Someday", due_date="2099-01-01")

    assert "Due today" in registry.handle(state, "/list today")
    assert "Someday" in registry.handle(state, "/list upcoming")
    assert late.id[:8] in registry.handle(state, "/list overdue")
    assert "Unknown view" in registry.handle(state, "/list later")

    assert "1 task(s)" in registry.handle(state, "/search late")
    assert "Due today" not in registry.handle(state, "/list")
    assert registry.handle(state, "/search") == "Search cleared."


def test_board_lists_every_status_column(state) -> None:
    reply = registry.handle(state, "/board")
    for status in TaskStatus:
        assert f"== {status.value.upper()} (0)" in reply


def test_stats_reports_score_and_histogram(state) -> None:
    task = state.task_store.add_task(title="a")
    state.task_store.add_task(title="b")
    state.task_store.toggle_task(task.id)

    reply = registry.handle(state, "/stats 3")
    assert "completion: 50%" in reply
    assert "Productivity score: 50/100 (fair)" in reply
    assert "By priority: high=0, medium=2, low=0" in reply
    assert reply.count("\n  20") == 3


def test_tags_and_categories(state) -> None:
    state.task_store.add_task(title="x", category="Work", tags=["deep"])
    assert registry.handle(state, "/tags") == "Tags: deep"
    assert "ready to use" in registry.handle(state, "/tags shallow")
    assert "already exists" in registry.handle(state, "/categories Work")


def test_export_then_import_file(state, tmp_path: Path) -> None:
    state.task_store.add_task(title="Exported")
    target = tmp_path / "out" / "tasks.json"

    assert "Exported 1 tasks" in registry.handle(state, f"/export {target}")
    assert json.loads(target.read_text("utf-8"))[0]["title"] == "Exported"

    state.task_store.add_task(title="Discarded by import")
    messages: list[str] = []
    reply = registry.handle(state, f"/import {target}", emit=messages.append)
    assert "Imported 1 tasks" in reply
    assert messages and "replaces" in messages[0]
    assert [t.title for t in state.task_store.tasks] == ["Exported"]


def test_export_default_path_and_bad_import(state, tmp_path: Path) -> None:
    reply = registry.handle(state, "/export")
    assert str(tmp_path / "exports") in reply

    bad = tmp_path / "bad.json"
    bad.write_text("{}", "utf-8")
    assert "Nothing was changed" in registry.handle(state, f"/import {bad}")
    assert "Cannot read" in registry.handle(state, f"/import {tmp_path / 'missing.json'}")


def test_stats_weekly_trend_compares_last_two_weeks(state, clock) -> None:
    store = state.task_store
    clock.advance(days=-9)
    earlier = store.add_task(title="last week")
    store.toggle_task(earlier.id)

    clock.advance(days=9)
    for title in ("this week 1", "this week 2"):
        store.toggle_task(store.add_task(title=title).id)

    assert "Weekly trend: +100%" in registry.handle(state, "/stats")
    assert "Weekly trend: +100%" in registry.handle(state, "/stats 1")


def test_console_quick_add_keeps_apostrophes(state) -> None:
    reply = dispatch_line(state, "Don't forget milk #errand")
    assert reply.startswith("Added")
    (task,) = state.task_store.tasks
    assert task.title == "Don't forget milk"
    assert task.tags == ("errand",)

    assert "Don't forget milk" in dispatch_line(state, "/list")
