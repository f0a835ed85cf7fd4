# src/taskvista/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console front-end.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import console_emit, run_console_loop
from ..core.notifications import CallbackNotificationSink, LoggingNotificationSink
from ..logging_setup import resolve_level, setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # Every mutation is persisted as it happens; these are compatibility hooks.
    for name in ("task_store", "kv"):
        try:
            obj = getattr(state, name, None)
            if obj is not None and hasattr(obj, "close"):
                obj.close()
        except Exception:
            logger.debug("%s close failed.", name, exc_info=True)


def main() -> None:
    settings = get_settings()

    console_level = resolve_level(getattr(settings, "log_level", "INFO"))
    log_dir = getattr(settings, "data_dir", ".local/taskvista")
    log_file = setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s (log file: %s)...", getattr(settings, "app_name", "TaskVista"), log_file)

    notifier = (
        CallbackNotificationSink(console_emit)
        if settings.console_enabled
        else LoggingNotificationSink()
    )
    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings, notifier=notifier)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run. Tasks stored at %s", settings.storage_db_path)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
