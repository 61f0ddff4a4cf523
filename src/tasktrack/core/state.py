# src/tasktrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_service import TaskService
from ..users.auth_service import AuthService
from .ports import IdentityStore, TaskStore


@dataclass
class AppState:
    # Settings kept on the state for easy access from the front-end.
    settings: Any

    identities: IdentityStore
    tasks: TaskStore
    auth: AuthService
    task_service: TaskService

    # SqliteGateway in production; None when wired with in-memory stores.
    gateway: Any = None
