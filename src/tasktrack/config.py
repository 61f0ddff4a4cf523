# src/tasktrack/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Malformed values fall back to defaults instead of crashing the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKTRACK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    log_dir: Path

    # ---- Database ----
    db_pool_size: int
    db_max_overflow: int
    db_timeout_seconds: float

    # ---- Credentials ----
    bcrypt_rounds: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasktrack").strip() or "tasktrack"
        # Console level only; the log file always gets DEBUG.
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasktrack"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "tasktrack.sqlite3")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        db_pool_size = max(1, _env_int(_k("DB_POOL_SIZE"), 4))
        db_max_overflow = max(0, _env_int(_k("DB_MAX_OVERFLOW"), 10))
        db_timeout_seconds = max(0.0, _env_float(_k("DB_TIMEOUT_SECONDS"), 30.0))

        # bcrypt accepts 4..31
        bcrypt_rounds = min(31, max(4, _env_int(_k("BCRYPT_ROUNDS"), 12)))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            log_dir=log_dir,
            db_pool_size=db_pool_size,
            db_max_overflow=db_max_overflow,
            db_timeout_seconds=db_timeout_seconds,
            bcrypt_rounds=bcrypt_rounds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
