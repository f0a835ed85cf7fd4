# tests/test_commands.py

from __future__ import annotations

from taskvista.cli.commands import CommandRegistry, parse_local_datetime, registry
from taskvista.connectors.console_connector import handle_line
from taskvista.tasks.task_models import TaskStatus


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
    reg.register("b", h3, "b")

    assert reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_task_commands_require_login(state) -> None:
    reply = registry.handle(state, "/board")
    assert reply is not None and "sign in" in reply.lower()
    assert "Available commands" in (registry.handle(state, "/help") or "")


def test_login_requires_email_and_password(state) -> None:
    assert registry.handle(state, "/login alice@example.com") == "Usage: /login <email> <password>"
    assert registry.handle(state, "/login alice@example.com pw") == "Welcome, alice!"
    assert state.session.is_authenticated
    registry.handle(state, "/logout")
    assert not state.session.is_authenticated


def test_add_edit_move_delete_flow(logged_in, notifier) -> None:
    state = logged_in
    reply = registry.handle(state, "/add Write report | 2025-03-16T10:00 | high | Q1 numbers")
    assert reply is not None and reply.startswith("Added [")

    (task,) = state.task_store.tasks
    assert task.title == "Write report"
    assert task.description == "Q1 numbers"
    assert task.status is TaskStatus.TODO
    assert notifier.titles == ["Task added"]

    reply = registry.handle(state, f'/edit {task.id} title="Write final report" status=in-progress')
    assert reply is not None and "Write final report" in reply
    assert state.task_store.get_by_id(task.id).status is TaskStatus.IN_PROGRESS

    assert registry.handle(state, f"/move {task.id} in-progress") == "Task is already in that column."
    assert "Moved" in (registry.handle(state, f"/move {task.id} done") or "")

    assert registry.handle(state, f"/delete {task.id}") == 'Deleted "Write final report".'
    assert state.task_store.count() == 0
    assert registry.handle(state, f"/delete {task.id}") == f"No task with id {task.id}."


def test_invalid_input_is_reported_not_raised(logged_in) -> None:
    state = logged_in
    reply = registry.handle(state, "/add Task | tomorrow | high")
    assert reply is not None and reply.startswith("Error: invalid date")

    reply = registry.handle(state, "/add Task | 2025-03-16 | urgent")
    assert reply is not None and reply.startswith("Error:")
    assert state.task_store.count() == 0


def test_edit_unknown_task(logged_in) -> None:
    assert registry.handle(logged_in, "/edit nope title=x") == "No task with id nope."


def test_unknown_id_is_reported_before_bad_values(logged_in) -> None:
    assert registry.handle(logged_in, "/edit nope priority=urgent") == "No task with id nope."
    assert registry.handle(logged_in, "/move nope bogus") == "No task with id nope."
    assert registry.handle(logged_in, "/delete nope") == "No task with id nope."


def test_search_and_board_views(logged_in) -> None:
    state = logged_in
    registry.handle(state, "/add Write report | 2025-03-16 | high")
    registry.handle(state, "/add Lunch | 2025-03-14T13:00 | low | with the team")

    assert "Results (1)" in (registry.handle(state, "/search REPORT") or "")
    assert registry.handle(state, "/search") == "Usage: /search <text>"

    board = registry.handle(state, "/board low") or ""
    assert "TODO (1)" in board and "Lunch" in board and "Write report" not in board


def test_calendar_timeline_dashboard(logged_in) -> None:
    state = logged_in
    registry.handle(state, "/add Lunch | 2025-03-14T13:00 | low")
    registry.handle(state, "/add Old bug | 2025-03-13 | high")

    cal = registry.handle(state, "/calendar") or ""
    assert "1 task(s)" in cal and "Lunch" in cal

    timeline = (registry.handle(state, "/timeline") or "").splitlines()
    assert timeline[0] == "March 13, 2025"

    dash = registry.handle(state, "/dashboard") or ""
    assert "Overdue: 1" in dash and "Due today: 1" in dash


def test_console_handle_line(logged_in) -> None:
    assert handle_line(logged_in, "   ") is None
    assert "Commands start with" in (handle_line(logged_in, "hello") or "")
    assert "Status:" in (handle_line(logged_in, "/status") or "")


def test_parse_local_datetime_date_only_is_midnight() -> None:
    from datetime import UTC

    dt = parse_local_datetime("2025-03-16", UTC)
    assert (dt.hour, dt.minute, dt.tzinfo) == (0, 0, UTC)
