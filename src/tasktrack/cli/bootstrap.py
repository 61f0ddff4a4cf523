# src/tasktrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the SQLite gateway and makes sure the schema is in place,
- wires stores and services into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..db.gateway import SqliteGateway
from ..db.schema import ensure_schema
from ..tasks.task_service import TaskService
from ..tasks.task_store import SqliteTaskStore
from ..users.auth_service import AuthService
from ..users.credentials import BcryptHasher
from ..users.user_store import SqliteIdentityStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.log_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    gateway = SqliteGateway(
        settings.db_path,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        timeout=settings.db_timeout_seconds,
    )
    ensure_schema(gateway)

    identities = SqliteIdentityStore(gateway)
    tasks = SqliteTaskStore(gateway)

    state = AppState(
        settings=settings,
        identities=identities,
        tasks=tasks,
        auth=AuthService(identities, BcryptHasher(rounds=settings.bcrypt_rounds)),
        task_service=TaskService(tasks),
        gateway=gateway,
    )
    logger.info(
        "State ready db=%s users=%s tasks=%s",
        settings.db_path,
        identities.count_users(),
        tasks.count_tasks(),
    )
    return state


def shutdown_state(state: AppState) -> None:
    """Release pooled connections. Safe to call more than once."""
    gateway = state.gateway
    if gateway is not None:
        gateway.close()
