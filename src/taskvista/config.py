# src/taskvista/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Components receive settings by injection; get_settings() is for the entrypoint.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

ENV_PREFIX = "TASKVISTA"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_tz(name: str) -> ZoneInfo | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return ZoneInfo(raw.strip())
    except Exception:
        return None


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Front-end ----
    console_enabled: bool
    require_login: bool
    display_tz: ZoneInfo | None  # None -> system local zone

    # ---- Local data (ignored by git) ----
    data_dir: Path
    storage_db_path: Path
    tasks_key: str

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskvista"))
        tasks_key = _env(_k("TASKS_KEY"), "tasks").strip() or "tasks"

        return Settings(
            app_name=_env(_k("APP_NAME"), "TaskVista"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
            require_login=_env_bool(_k("REQUIRE_LOGIN"), True),
            display_tz=_env_tz(_k("TZ")),
            data_dir=data_dir,
            storage_db_path=_env_path(_k("STORAGE_DB_PATH"), data_dir / "storage.sqlite3"),
            tasks_key=tasks_key,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_dotenv_if_available()
    return Settings.from_env()
