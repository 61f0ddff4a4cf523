# src/tasktrack/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from sqlalchemy.engine import RowMapping

from ..core.ports import Gateway
from .task_models import Category, LookupEntry, Task, TaskStatus, TaskView

logger = logging.getLogger(__name__)

_TASK_COLUMNS = "id, task_name, status_id, user_id, category_id, created_at, updated_at"

_VIEW_SELECT = """
    SELECT t.id, t.task_name, t.status_id, t.user_id, t.category_id,
           t.created_at, t.updated_at,
           u.name AS owner_name,
           s.display_name AS status_name,
           c.display_name AS category_name
    FROM tasks t
    LEFT JOIN status s ON t.status_id = s.id
    LEFT JOIN category c ON t.category_id = c.id
    LEFT JOIN users u ON t.user_id = u.id
"""


class SqliteTaskStore:
    """
    SQLite task store.

    Pure persistence: no ownership or status rules (TaskService owns those).
    - find/update return None when the row does not exist
    - every update refreshes updated_at and returns the row as stored
    - rows are never deleted; "deleted" is a status value
    """

    def __init__(self, gateway: Gateway, *, clock: Callable[[], float] = time.time) -> None:
        self._gw = gateway
        self._clock = clock

    # ---- low-level helpers ----

    @staticmethod
    def _row_to_task(row: RowMapping) -> Task:
        return Task(
            id=int(row["id"]),
            name=str(row["task_name"] or ""),
            status=TaskStatus.from_db(row["status_id"]),
            owner_id=int(row["user_id"]),
            category=Category.from_db(row["category_id"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _row_to_view(row: RowMapping) -> TaskView:
        status = TaskStatus.from_db(row["status_id"])
        category = Category.from_db(row["category_id"])
        return TaskView(
            id=int(row["id"]),
            name=str(row["task_name"] or ""),
            status=status,
            owner_id=int(row["user_id"]),
            category=category,
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            owner_name=str(row["owner_name"] or ""),
            status_name=str(row["status_name"] or status.display_name),
            category_name=str(row["category_name"] or category.display_name),
        )

    def _update_one(self, column: str, value: Any, task_id: int) -> Task | None:
        # `column` comes from the fixed set below, never from user input.
        rows = self._gw.execute(
            f"""
            UPDATE tasks
            SET {column} = ?, updated_at = ?
            WHERE id = ?
            RETURNING {_TASK_COLUMNS}
            """,
            (value, float(self._clock()), int(task_id)),
        )
        if not rows:
            return None
        task = self._row_to_task(rows[0])
        logger.debug("Task row updated id=%s column=%s", task.id, column)
        return task

    # ---- public API ----

    def create_task(
        self,
        name: str,
        status: TaskStatus,
        owner_id: int,
        category: Category,
    ) -> Task:
        now = float(self._clock())
        rows = self._gw.execute(
            f"""
            INSERT INTO tasks(task_name, status_id, user_id, category_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING {_TASK_COLUMNS}
            """,
            (name, int(status), int(owner_id), int(category), now, now),
        )
        task = self._row_to_task(rows[0])
        logger.debug(
            "Task row created id=%s owner=%s status=%s category=%s",
            task.id,
            task.owner_id,
            task.status.db_name,
            task.category.db_name,
        )
        return task

    def find_by_id(self, task_id: int) -> Task | None:
        rows = self._gw.execute(f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),))
        return self._row_to_task(rows[0]) if rows else None

    def update_name(self, task_id: int, name: str) -> Task | None:
        return self._update_one("task_name", name, task_id)

    def update_status(self, task_id: int, status: TaskStatus) -> Task | None:
        return self._update_one("status_id", int(status), task_id)

    def update_owner(self, task_id: int, owner_id: int) -> Task | None:
        return self._update_one("user_id", int(owner_id), task_id)

    def list_for_owner(
        self,
        owner_id: int,
        *,
        status: TaskStatus | None = None,
        category: Category | None = None,
        include_deleted: bool = False,
    ) -> list[TaskView]:
        """
        Tasks owned by `owner_id`, most recently touched first.

        Filtering by an explicit status always returns that status,
        including DELETED; otherwise deleted rows are hidden unless asked for.
        """
        where = ["t.user_id = ?"]
        params: list[Any] = [int(owner_id)]

        if status is not None:
            where.append("t.status_id = ?")
            params.append(int(status))
        elif not include_deleted:
            where.append("t.status_id != ?")
            params.append(int(TaskStatus.DELETED))

        if category is not None:
            where.append("t.category_id = ?")
            params.append(int(category))

        sql = f"{_VIEW_SELECT} WHERE {' AND '.join(where)} ORDER BY t.updated_at DESC, t.id DESC"
        return [self._row_to_view(r) for r in self._gw.execute(sql, params)]

    def list_statuses(self) -> list[LookupEntry]:
        rows = self._gw.execute("SELECT id, status_name, display_name FROM status ORDER BY id")
        return [LookupEntry(int(r["id"]), str(r["status_name"]), str(r["display_name"])) for r in rows]

    def list_categories(self) -> list[LookupEntry]:
        rows = self._gw.execute(
            "SELECT id, category_name, display_name FROM category ORDER BY id"
        )
        return [
            LookupEntry(int(r["id"]), str(r["category_name"]), str(r["display_name"])) for r in rows
        ]

    def count_tasks(self) -> int:
        rows = self._gw.execute("SELECT COUNT(*) AS n FROM tasks")
        return int(rows[0]["n"])
