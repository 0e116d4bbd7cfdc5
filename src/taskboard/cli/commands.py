# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import ListView, greeting, list_view, score_band, weekly_trend
from ..tasks.task_models import Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID = 8
TREND_DAYS = 14


class CommandRegistry:
    """Simple slash-command registry used by the console front-end (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    due = f", due {task.due_date}" if task.due_date else ""
    tags = " " + " ".join(f"#{t}" for t in task.tags) if task.tags else ""
    category = f" @{task.category}" if task.category else ""
    return (
        f"[{task.id[:SHORT_ID]}] [{mark}] {task.title} "
        f"({task.status.value}, {task.priority.value}{due}){category}{tags}"
    )


def format_task_details(task: Task) -> str:
    lines = [format_task(task)]
    if task.description:
        lines.append(f"  {task.description}")
    lines.append(f"  id: {task.id}")
    lines.append(f"  created: {task.created_at}  updated: {task.updated_at}")
    if task.estimated_time is not None or task.actual_time is not None:
        lines.append(f"  time: estimated={task.estimated_time} actual={task.actual_time} (minutes)")
    if task.is_recurring:
        pattern = task.recurring_pattern.value if task.recurring_pattern else "unspecified"
        lines.append(f"  recurring: {pattern}")
    if task.assigned_to:
        lines.append(f"  assigned to: {task.assigned_to}")
    for note in task.notes:
        lines.append(f"  note: {note}")
    for ref in task.attachments:
        lines.append(f"  attachment: {ref}")
    return "\n".join(lines)


def _format_list(tasks: list[Task], empty: str = "No tasks.") -> str:
    if not tasks:
        return empty
    return "\n".join(format_task(t) for t in tasks)


def resolve_task(state: AppState, ref: str) -> Task | str:
    """Find a task by full id or unique id prefix. Returns an error message otherwise."""
    exact = state.task_store.get_task(ref)
    if exact is not None:
        return exact
    matches = [t for t in state.task_store.tasks if t.id.startswith(ref)]
    if not matches:
        return f"No task matches id {ref!r}."
    if len(matches) > 1:
        return f"Id {ref!r} is ambiguous ({len(matches)} tasks)."
    return matches[0]


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> all tasks (search applied)
    /list today      -> open tasks due today
    /list upcoming   -> open tasks due later
    /list completed  -> completed tasks
    /list overdue    -> open tasks past their due date
    """
    view = args[0].lower() if args else ListView.ALL.value
    try:
        tasks = list_view(state.task_store.filtered_tasks, view, state.task_store.today())
    except ValueError:
        return f"Unknown view {view!r}. Use one of: {', '.join(v.value for v in ListView)}."
    return _format_list(tasks)


def cmd_board(state: AppState, args: list[str]) -> str:
    lines: list[str] = []
    for status in TaskStatus:
        column = state.task_store.tasks_by_status(status)
        lines.append(f"== {status.value.upper()} ({len(column)})")
        lines.extend(f"  {format_task(t)}" for t in column)
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk #errand @Personal !high due:2026-01-31
    Words starting with # are tags, @ sets the category, ! sets the priority.
    """
    title_words: list[str] = []
    tags: list[str] = []
    category = ""
    priority = "medium"
    due_date = ""
    for word in args:
        if word.startswith("#") and len(word) > 1:
            tags.append(word[1:])
        elif word.startswith("@") and len(word) > 1:
            category = word[1:]
        elif word.startswith("!") and len(word) > 1:
            priority = word[1:].lower()
        elif word.lower().startswith("due:"):
            due_date = word[4:]
        else:
            title_words.append(word)

    if due_date:
        try:
            date.fromisoformat(due_date)
        except ValueError:
            return f"Invalid due date {due_date!r}; expected YYYY-MM-DD."

    task = state.task_store.add_task(
        title=" ".join(title_words),
        category=category,
        priority=priority,
        due_date=due_date,
        tags=tags,
    )
    if task is None:
        return "Task not added: a title is required and priority must be low, medium or high."
    return f"Added {format_task(task)}"


_EDIT_FIELDS = {
    "title": "title",
    "description": "description",
    "desc": "description",
    "category": "category",
    "priority": "priority",
    "due": "due_date",
    "status": "status",
    "assigned": "assigned_to",
    "estimate": "estimated_time",
    "actual": "actual_time",
    "recurring": "recurring_pattern",
    "tags": "tags",
}


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> field=value ...
    Fields: title, desc, category, priority, due, status, assigned, estimate,
    actual, recurring (daily|weekly|monthly|none), tags (comma separated).
    """
    if len(args) < 2:
        return "Usage: /edit <id> field=value ..."
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found

    changes: dict[str, object] = {}
    for pair in args[1:]:
        key, sep, value = pair.partition("=")
        field_name = _EDIT_FIELDS.get(key.lower())
        if not sep or field_name is None:
            return f"Cannot edit {pair!r}. Fields: {', '.join(sorted(_EDIT_FIELDS))}."
        if field_name in ("estimated_time", "actual_time"):
            if not value:
                changes[field_name] = None
                continue
            try:
                changes[field_name] = int(value)
            except ValueError:
                return f"{key} must be a whole number of minutes."
        elif field_name == "tags":
            changes[field_name] = [t.strip() for t in value.split(",") if t.strip()]
        elif field_name == "recurring_pattern":
            if value.lower() in ("", "none", "off"):
                changes["recurring_pattern"] = None
                changes["is_recurring"] = False
            else:
                changes["recurring_pattern"] = value.lower()
                changes["is_recurring"] = True
        elif field_name == "assigned_to":
            changes[field_name] = value or None
        else:
            changes[field_name] = value

    if not state.task_store.update_task(found.id, **changes):
        return "Task not updated (check title, priority, status and time values)."
    updated = state.task_store.get_task(found.id)
    return f"Updated {format_task(updated)}" if updated else "Updated."


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    found = resolve_task(state, args[0])
    return found if isinstance(found, str) else format_task_details(found)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.task_store.toggle_task(found.id)
    now = state.task_store.get_task(found.id)
    return format_task(now) if now else "Toggled."


def cmd_move(state: AppState, args: list[str]) -> str:
    statuses = ", ".join(s.value for s in TaskStatus)
    if len(args) < 2:
        return f"Usage: /move <id> <status>  (status: {statuses})"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    try:
        state.task_store.move_task(found.id, args[1].lower())
    except ValueError:
        return f"Unknown status {args[1]!r}. Use one of: {statuses}."
    now = state.task_store.get_task(found.id)
    return format_task(now) if now else "Moved."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.task_store.delete_task(found.id)
    return f"Removed [{found.id[:SHORT_ID]}] {found.title}"


def cmd_dup(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /dup <id>"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    copy = state.task_store.duplicate_task(found.id)
    return f"Added {format_task(copy)}" if copy else "Task disappeared before it could be copied."


def cmd_note(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /note <id> <text>"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.task_store.add_note(found.id, " ".join(args[1:]))
    return f"Note added to [{found.id[:SHORT_ID]}] {found.title}"


def cmd_attach(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /attach <id> <reference>"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.task_store.add_attachment(found.id, " ".join(args[1:]))
    return f"Attachment added to [{found.id[:SHORT_ID]}] {found.title}"


def cmd_search(state: AppState, args: list[str]) -> str:
    term = " ".join(args)
    state.task_store.set_search_term(term)
    if not term:
        return "Search cleared."
    hits = state.task_store.filtered_tasks
    return f"Search {term!r}: {len(hits)} task(s).\n" + _format_list(hits, empty="Nothing matches.")


def cmd_tags(state: AppState, args: list[str]) -> str:
    if args:
        tag = " ".join(args)
        if state.task_store.add_tag(tag):
            return f"Tag {tag!r} is ready to use."
        return f"Tag {tag!r} already exists."
    tags = state.task_store.tags
    return "Tags: " + (", ".join(tags) if tags else "(none)")


def cmd_categories(state: AppState, args: list[str]) -> str:
    if args:
        category = " ".join(args)
        if state.task_store.add_category(category):
            return f"Category {category!r} is ready to use."
        return f"Category {category!r} already exists."
    categories = state.task_store.categories
    return "Categories: " + (", ".join(c or "(uncategorized)" for c in categories) if categories else "(none)")


def cmd_stats(state: AppState, args: list[str]) -> str:
    """
    /stats       -> last 7 days
    /stats 30    -> last 30 days
    """
    try:
        days = int(args[0]) if args else 7
    except ValueError:
        return "Usage: /stats [days]"
    days = max(1, min(days, 366))

    store = state.task_store
    today = store.today()
    start = today - timedelta(days=days - 1)
    completed = store.tasks_completed_by_date(start, today)
    created = store.tasks_created_by_date(start, today)
    score = store.productivity_score()
    # Trend always compares the last 7 days with the 7 before, whatever the window.
    trend_series = store.tasks_completed_by_date(today - timedelta(days=TREND_DAYS - 1), today)

    lines = [
        f"Tasks: {len(store)}  completion: {store.completion_rate():.0f}%  "
        f"overdue: {len(store.overdue_tasks())}",
        f"Productivity score: {score}/100 ({score_band(score).value})",
        f"Weekly trend: {weekly_trend(trend_series):+.0f}%",
        "By priority: " + ", ".join(f"{p.priority.value}={p.count}" for p in store.tasks_by_priority()),
        "By category: " + ", ".join(f"{c.category or '-'}={c.count}" for c in store.tasks_by_category()),
        f"Last {days} day(s) (date created/completed):",
    ]
    for made, done in zip(created, completed):
        lines.append(f"  {made.date}  {made.count:>3} / {done.count:>3}")
    return "\n".join(lines)


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    settings = state.settings
    if args:
        path = Path(args[0]).expanduser()
    else:
        export_dir = Path(getattr(settings, "export_dir", "."))
        path = export_dir / f"tasks-{state.task_store.today().isoformat()}.json"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(state.task_store.export_tasks(), "utf-8")
    except OSError as e:
        logger.exception("Export to %s failed", path)
        return f"Export failed: {e}"
    return f"Exported {len(state.task_store)} tasks to {path}"


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /import <path>"
    path = Path(args[0]).expanduser()
    try:
        document = path.read_text("utf-8")
    except OSError as e:
        return f"Cannot read {path}: {e}"
    if emit:
        emit(f"Importing {path} (replaces all current tasks)...")
    if not state.task_store.import_tasks(document):
        return "Import failed: the file is not a valid task export. Nothing was changed."
    return f"Imported {len(state.task_store)} tasks from {path}"


def cmd_hello(state: AppState, args: list[str]) -> str:
    name = str(getattr(state.settings, "app_name", "taskboard"))
    store = state.task_store
    due_today = list_view(store.tasks, ListView.TODAY, store.today())
    return f"{greeting(datetime.now())}! {name}: {len(due_today)} task(s) due today, {len(store)} in total."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("hello", cmd_hello, help_text="Greeting and today's summary.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|today|upcoming|completed|overdue].", aliases=["ls"])
registry.register("board", cmd_board, help_text="Show tasks grouped by status column.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [#tag] [@category] [!priority] [due:YYYY-MM-DD].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> field=value ...")
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("move", cmd_move, help_text="Move to a status: /move <id> <status>.", aliases=["mv"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("dup", cmd_dup, help_text="Duplicate a task: /dup <id>.")
registry.register("note", cmd_note, help_text="Add a note: /note <id> <text>.")
registry.register("attach", cmd_attach, help_text="Add an attachment reference: /attach <id> <ref>.")
registry.register("search", cmd_search, help_text="Filter tasks: /search <term> (empty clears).")
registry.register("tags", cmd_tags, help_text="List tags or announce a new one: /tags [name].")
registry.register("categories", cmd_categories, help_text="List categories or announce one: /categories [name].")
registry.register("stats", cmd_stats, help_text="Metrics and daily histogram: /stats [days].")
registry.register("export", cmd_export, help_text="Export all tasks as JSON: /export [path].")
registry.register("import", cmd_import, help_text="Replace all tasks from a JSON export: /import <path>.")
