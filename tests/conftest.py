# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktrack.core.state import AppState
from tasktrack.db.gateway import SqliteGateway
from tasktrack.db.schema import ensure_schema
from tasktrack.tasks.task_service import TaskService
from tasktrack.tasks.task_store import SqliteTaskStore
from tasktrack.users.auth_service import AuthService
from tasktrack.users.credentials import BcryptHasher
from tasktrack.users.user_store import SqliteIdentityStore

from .fakes import InMemoryIdentityStore, InMemoryTaskStore, TickingClock

# bcrypt minimum cost keeps the suite fast
FAST_ROUNDS = 4


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasktrack-test",
        log_level="WARNING",
        data_dir=tmp_path,
        db_path=tmp_path / "tasktrack.sqlite3",
        log_dir=tmp_path / "logs",
        db_pool_size=2,
        db_max_overflow=4,
        db_timeout_seconds=5.0,
        bcrypt_rounds=FAST_ROUNDS,
    )


@pytest.fixture()
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture()
def hasher() -> BcryptHasher:
    return BcryptHasher(rounds=FAST_ROUNDS)


# ---- in-memory wiring (service logic) ----


@pytest.fixture()
def identities(clock: TickingClock) -> InMemoryIdentityStore:
    return InMemoryIdentityStore(clock)


@pytest.fixture()
def task_store(identities: InMemoryIdentityStore, clock: TickingClock) -> InMemoryTaskStore:
    return InMemoryTaskStore(identities, clock)


@pytest.fixture()
def auth(identities: InMemoryIdentityStore, hasher: BcryptHasher) -> AuthService:
    return AuthService(identities, hasher)


@pytest.fixture()
def service(task_store: InMemoryTaskStore) -> TaskService:
    return TaskService(task_store)


@pytest.fixture()
def state(settings, identities, task_store, auth, service) -> AppState:
    """AppState wired with in-memory stores (menu tests)."""
    return AppState(
        settings=settings,
        identities=identities,
        tasks=task_store,
        auth=auth,
        task_service=service,
    )


# ---- SQLite wiring ----


@pytest.fixture()
def gateway(settings):
    gw = SqliteGateway(
        settings.db_path,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        timeout=settings.db_timeout_seconds,
    )
    ensure_schema(gw)
    yield gw
    gw.close()


@pytest.fixture()
def sqlite_identities(gateway, clock) -> SqliteIdentityStore:
    return SqliteIdentityStore(gateway, clock=clock)


@pytest.fixture()
def sqlite_tasks(gateway, clock) -> SqliteTaskStore:
    return SqliteTaskStore(gateway, clock=clock)


@pytest.fixture()
def isolated_logging():
    """Undo setup_logging(): restore the root handlers and level after the test."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)
