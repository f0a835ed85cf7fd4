# src/taskvista/cli/commands.py

from __future__ import annotations

import functools
import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import date, datetime, tzinfo
from typing import cast

from ..core.state import AppState
from ..tasks import views
from ..tasks.task_models import Task, TaskPriority, TaskStatus
from ..tasks.task_store import MutationResult

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# /edit accepts these short names as well as the attribute names.
_EDIT_ALIASES = {
    "due": "due_date",
    "start": "start_date",
    "assignee": "assigned_to",
    "desc": "description",
}


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

    @staticmethod
    def _split_args(rest: str) -> list[str]:
        try:
            return shlex.split(rest)
        except ValueError:
            # Unbalanced quotes: fall back to plain whitespace split.
            return rest.split()

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].strip().split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = self._split_args(parts[1]) if len(parts) > 1 else []

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def requires_login(handler):
    """Auth gate: task screens are reachable only after /login."""

    @functools.wraps(handler)
    def wrapper(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
        if getattr(state.settings, "require_login", True) and not state.session.is_authenticated:
            return "Please sign in first: /login <email> <password>"
        return handler(state, args, emit)

    return wrapper


def _local_tz(state: AppState) -> tzinfo | None:
    return getattr(state.settings, "display_tz", None)


def parse_local_datetime(raw: str, tz: tzinfo | None = None) -> datetime:
    """
    Parse "YYYY-MM-DD" or "YYYY-MM-DDTHH:MM" typed by the user.

    Values without an offset are local time (midnight when only a date is given).
    """
    raw = (raw or "").strip()
    if not raw:
        raise ValueError("a date is required (YYYY-MM-DD or YYYY-MM-DDTHH:MM)")
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValueError(f"invalid date: {raw!r} (use YYYY-MM-DD or YYYY-MM-DDTHH:MM)") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz) if tz is not None else dt.astimezone()
    return dt


def format_task(task: Task, tz: tzinfo | None = None) -> str:
    due = task.due_date.astimezone(tz).strftime("%Y-%m-%d %H:%M")
    line = f"[{task.id}] {task.title} ({task.priority.value}, {task.status.value}) due {due}"
    if task.assigned_to:
        line += f" @{task.assigned_to}"
    return line


def _format_list(tasks: list[Task], tz: tzinfo | None, empty: str) -> list[str]:
    if not tasks:
        return [f"  {empty}"]
    return [f"  {format_task(t, tz)}" for t in tasks]


def _saved_suffix(result: MutationResult) -> str:
    return "" if result.persisted else " (not saved to storage)"


# ---- session ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /login <email> <password>"
    if not state.session.login(args[0], args[1]):
        return "Please enter both email and password."
    return f"Welcome, {state.session.username}!"


def cmd_logout(state: AppState, args: list[str]) -> str:
    state.session.logout()
    return "Signed out."


def cmd_status(state: AppState, args: list[str]) -> str:
    signed_in = state.session.is_authenticated
    user = state.session.username if signed_in else "-"
    return (
        "Status:\n"
        f"  Signed in: {'yes' if signed_in else 'no'} ({user})\n"
        f"  Tasks: {state.task_store.count()}\n"
        f"  Storage: {getattr(state.settings, 'storage_db_path', '-')}"
    )


# ---- task mutations ----


@requires_login
def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title> | <due> | <priority> [| <description>]
    """
    parts = [p.strip() for p in " ".join(args).split("|")]
    if len(parts) < 3 or not parts[0]:
        return "Usage: /add <title> | <due YYYY-MM-DD[THH:MM]> | <low|medium|high> [| <description>]"

    result = state.task_store.create(
        title=parts[0],
        due_date=parse_local_datetime(parts[1], _local_tz(state)),
        priority=TaskPriority(parts[2].lower()),
        description=parts[3] if len(parts) > 3 else "",
    )
    task = result.task
    if task is None:
        return "Task was not created."
    return f"Added {format_task(task, _local_tz(state))}{_saved_suffix(result)}"


@requires_login
def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> field=value [field=value ...]
    Fields: title, description|desc, due, start, priority, status, assignee.
    """
    if len(args) < 2:
        return "Usage: /edit <id> field=value [field=value ...]"

    task_id, assignments = args[0], args[1:]
    changes: dict[str, object] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep:
            return f"Expected field=value, got {item!r}."
        field = _EDIT_ALIASES.get(key.strip().lower(), key.strip().lower())
        if field in ("due_date", "start_date"):
            changes[field] = parse_local_datetime(value, _local_tz(state)) if value else None
        elif field in ("priority", "status"):
            changes[field] = value.strip().lower()
        else:
            changes[field] = value

    result = state.task_store.update(task_id, changes)
    task = result.task
    if task is None:
        return f"No task with id {task_id}."
    return f"Updated {format_task(task, _local_tz(state))}{_saved_suffix(result)}"


@requires_login
def cmd_move(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 2:
        return "Usage: /move <id> <todo|in-progress|done>"
    result = state.task_store.move(args[0], args[1].lower())
    task = result.task
    if task is None:
        return f"No task with id {args[0]}."
    if not result.changed:
        return "Task is already in that column."
    return f"Moved {format_task(task, _local_tz(state))}{_saved_suffix(result)}"


@requires_login
def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    result = state.task_store.delete(args[0])
    task = result.task
    if task is None:
        return f"No task with id {args[0]}."
    return f'Deleted "{task.title}".{_saved_suffix(result)}'


@requires_login
def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /show <id>"
    task = state.task_store.get_by_id(args[0])
    if task is None:
        return f"No task with id {args[0]}."

    tz = _local_tz(state)
    lines = [format_task(task, tz)]
    if task.description:
        lines.append(f"  {task.description}")
    if task.start_date is not None:
        lines.append(f"  Starts: {task.start_date.astimezone(tz).strftime('%Y-%m-%d %H:%M')}")
    lines.append(f"  Created: {task.created_at.astimezone(tz).strftime('%Y-%m-%d %H:%M')}")
    lines.append(f"  Bucket: {views.classify(task, state.clock(), tz).value}")
    return "\n".join(lines)


# ---- layouts ----


@requires_login
def cmd_board(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /board                 -> all tasks by column
    /board high            -> only high priority
    /board high report     -> high priority matching "report"
    """
    priority: str | None = None
    query_parts = list(args)
    if query_parts and query_parts[0].lower() in {p.value for p in TaskPriority}:
        priority = query_parts.pop(0).lower()

    tz = _local_tz(state)
    filtered = views.filter_board(state.task_store.tasks, " ".join(query_parts), priority)
    lines: list[str] = []
    for status, tasks in views.group_by_status(filtered).items():
        lines.append(f"{status.value.upper()} ({len(tasks)})")
        lines.extend(_format_list(tasks, tz, "No tasks"))
    return "\n".join(lines)


@requires_login
def cmd_table(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tasks = list(state.task_store.tasks)
    if not tasks:
        return "No tasks found. Create a new task to get started."
    tz = _local_tz(state)
    lines = [f"{'ID':<12}  {'TITLE':<32}  {'DUE':<10}  {'PRIORITY':<8}  STATUS"]
    for t in tasks:
        due = t.due_date.astimezone(tz).strftime("%Y-%m-%d")
        lines.append(f"{t.id:<12}  {t.title[:32]:<32}  {due:<10}  {t.priority.value:<8}  {t.status.value}")
    return "\n".join(lines)


@requires_login
def cmd_timeline(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tz = _local_tz(state)
    days = views.timeline(state.task_store.tasks, tz)
    if not days:
        return "No tasks scheduled."
    lines: list[str] = []
    for day, tasks in days.items():
        lines.append(day.strftime("%B %d, %Y"))
        for i, t in enumerate(tasks):
            # Alternating sides, as drawn on the timeline page.
            side = "<" if i % 2 == 0 else ">"
            lines.append(f"  {side} {t.due_date.astimezone(tz).strftime('%H:%M')} {t.title} [{t.id}]")
    return "\n".join(lines)


@requires_login
def cmd_calendar(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /calendar              -> today
    /calendar 2025-03-14   -> that day
    """
    tz = _local_tz(state)
    if args:
        try:
            day = date.fromisoformat(args[0])
        except ValueError as e:
            raise ValueError(f"invalid date: {args[0]!r} (use YYYY-MM-DD)") from e
    else:
        day = views.local_date(state.clock(), tz)

    tasks = views.tasks_on_date(state.task_store.tasks, day, tz)
    lines = [f"{day.strftime('%A, %B %d, %Y')}: {len(tasks)} task(s)"]
    lines.extend(_format_list(tasks, tz, "Nothing due."))
    return "\n".join(lines)


@requires_login
def cmd_dashboard(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tz = _local_tz(state)
    now = state.clock()
    tasks = state.task_store.tasks
    stats = views.task_stats(tasks, now, tz)

    lines = [
        f"Total: {stats.total}  Completed: {stats.by_status[TaskStatus.DONE]}  "
        f"In progress: {stats.by_status[TaskStatus.IN_PROGRESS]}  "
        f"To do: {stats.by_status[TaskStatus.TODO]}  "
        f"({stats.completion_rate:.0%} done)",
        "Priority: " + ", ".join(f"{p.value}={n}" for p, n in stats.by_priority.items()),
        f"Overdue: {stats.by_bucket[views.DueBucket.OVERDUE]}  "
        f"Due today: {stats.by_bucket[views.DueBucket.DUE_TODAY]}  "
        f"Upcoming: {stats.by_bucket[views.DueBucket.UPCOMING]}",
    ]
    overdue = views.sort_by_due_date(views.overdue_tasks(tasks, now, tz))
    if overdue:
        lines.append("Overdue tasks:")
        lines.extend(_format_list(overdue, tz, ""))
    return "\n".join(lines)


@requires_login
def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    query = " ".join(args)
    if not query.strip():
        return "Usage: /search <text>"
    results = views.search(state.task_store.tasks, query)
    if not results:
        return f'No results for "{query}".'
    lines = [f"Results ({len(results)}):"]
    lines.extend(_format_list(results, _local_tz(state), ""))
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("status", cmd_status, help_text="Show session and storage status.")
registry.register(
    "add",
    cmd_add,
    help_text="Create a task: /add <title> | <due> | <priority> [| <description>].",
    aliases=["new"],
)
registry.register("edit", cmd_edit, help_text="Edit fields: /edit <id> field=value ...")
registry.register("move", cmd_move, help_text="Move to a column: /move <id> <status>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("board", cmd_board, help_text="Kanban board: /board [priority] [query].")
registry.register("table", cmd_table, help_text="All tasks as a table.")
registry.register("timeline", cmd_timeline, help_text="Tasks by day in due order.")
registry.register("calendar", cmd_calendar, help_text="Tasks due on a day: /calendar [YYYY-MM-DD].")
registry.register("dashboard", cmd_dashboard, help_text="Counts by status, priority and due date.")
registry.register("search", cmd_search, help_text="Search titles and descriptions: /search <text>.")
