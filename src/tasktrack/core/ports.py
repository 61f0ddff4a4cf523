# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the services.

Services depend on Protocols instead of concrete implementations.
Production wiring uses the SQLite stores; tests swap in in-memory ones.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from ..tasks.task_models import Category, LookupEntry, Task, TaskStatus, TaskView
from ..users.user_models import User


class Gateway(Protocol):
    """Executes one parameterized statement on a pooled connection."""

    def execute(self, sql: str, params: Sequence[Any] = ()) -> list[Any]: ...


class IdentityStore(Protocol):
    def create_user(self, name: str, credential_hash: str) -> User: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_name(self, name: str) -> User | None: ...
    def count_users(self) -> int: ...


class TaskStore(Protocol):
    def create_task(
            self,
            name: str,
            status: TaskStatus,
            owner_id: int,
            category: Category,
    ) -> Task: ...

    def find_by_id(self, task_id: int) -> Task | None: ...

    # Each update refreshes updated_at and returns the new row (None if the row is gone).
    def update_name(self, task_id: int, name: str) -> Task | None: ...
    def update_status(self, task_id: int, status: TaskStatus) -> Task | None: ...
    def update_owner(self, task_id: int, owner_id: int) -> Task | None: ...

    def list_for_owner(
            self,
            owner_id: int,
            *,
            status: TaskStatus | None = None,
            category: Category | None = None,
            include_deleted: bool = False,
    ) -> list[TaskView]: ...

    def list_statuses(self) -> list[LookupEntry]: ...
    def list_categories(self) -> list[LookupEntry]: ...
    def count_tasks(self) -> int: ...


class CredentialHasher(Protocol):
    def hash(self, secret: str) -> str: ...
    def verify(self, secret: str, hashed: str) -> bool: ...
