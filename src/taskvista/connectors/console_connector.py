# src/taskvista/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except Exception:
        print(line)


def console_emit(text: str) -> None:
    """Immediate user-visible output (notifications, progress)."""
    print(f"[{_ts_local()}] {text}", flush=True)


def handle_line(state: AppState, line: str) -> str | None:
    """
    Run one console line through the command registry under the state lock.

    Returns the reply to print, or None for an empty line.
    """
    line = line.strip()
    if not line:
        return None

    if not line.startswith("/"):
        return "Commands start with '/'. Use /help to list available commands."

    try:
        with state.lock:
            return command_registry.handle(state, line, emit=console_emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%s).", state.task_store.count())
    app_name = str(getattr(state.settings, "app_name", "TaskVista"))
    console_emit(f"[{app_name}] Use /help for commands, /login to sign in, /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            print(f"[{_ts_local()}] {reply}")

    logger.info("Console connector finished.")
