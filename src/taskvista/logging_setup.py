# src/taskvista/logging_setup.py

from __future__ import annotations

"""
Logging for the TaskVista console app.

The console shows what a person at the prompt cares about. The log file under
the data directory keeps everything, including per-save storage details.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskvista.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console thresholds by logger-name prefix; the longest matching prefix wins.
# Storage and persistence log every save at DEBUG/INFO, which only matters in the file.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "taskvista": logging.NOTSET,
    "taskvista.storage": logging.WARNING,
    "taskvista.tasks.persistence": logging.WARNING,
    "py.warnings": logging.ERROR,
}
_DEFAULT_CONSOLE_THRESHOLD = logging.ERROR


def resolve_level(name: str | int | None, default: int = logging.INFO) -> int:
    """Map "debug" / "INFO" / 10 to a logging level; unknown names give `default`."""
    if isinstance(name, int):
        return name
    if not name:
        return default
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def _console_threshold(logger_name: str) -> int:
    best = ""
    for prefix in _CONSOLE_THRESHOLDS:
        if (logger_name == prefix or logger_name.startswith(prefix + ".")) and len(prefix) > len(best):
            best = prefix
    return _CONSOLE_THRESHOLDS[best] if best else _DEFAULT_CONSOLE_THRESHOLD


class ConsoleNoiseFilter(logging.Filter):
    """Drop records below the per-prefix console threshold (third-party code: ERROR+)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_threshold(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskvista",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Install a filtered stderr handler and a rotating file handler on the root logger.

    Existing root handlers are replaced, so calling this twice does not duplicate
    output. Returns the path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
