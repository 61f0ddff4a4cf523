# src/tasktrack/users/user_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy.engine import RowMapping

from ..core.ports import Gateway
from .user_models import User

logger = logging.getLogger(__name__)


class SqliteIdentityStore:
    """
    SQLite identity store.

    No business rules here: uniqueness and emptiness checks live in AuthService.
    Absence is reported as None.
    """

    def __init__(self, gateway: Gateway, *, clock: Callable[[], float] = time.time) -> None:
        self._gw = gateway
        self._clock = clock

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=int(row["id"]),
            name=str(row["name"]),
            credential_hash=str(row["password_hash"] or ""),
            created_at=float(row["created_at"] or 0.0),
        )

    def create_user(self, name: str, credential_hash: str) -> User:
        rows = self._gw.execute(
            """
            INSERT INTO users(name, password_hash, created_at)
            VALUES (?, ?, ?)
            RETURNING id, name, password_hash, created_at
            """,
            (name, credential_hash, float(self._clock())),
        )
        user = self._row_to_user(rows[0])
        logger.debug("User row created id=%s", user.id)
        return user

    def find_by_id(self, user_id: int) -> User | None:
        rows = self._gw.execute(
            "SELECT id, name, password_hash, created_at FROM users WHERE id = ?",
            (int(user_id),),
        )
        return self._row_to_user(rows[0]) if rows else None

    def find_by_name(self, name: str) -> User | None:
        # TEXT uses BINARY collation: exact, case-sensitive match.
        rows = self._gw.execute(
            "SELECT id, name, password_hash, created_at FROM users WHERE name = ?",
            (name,),
        )
        return self._row_to_user(rows[0]) if rows else None

    def count_users(self) -> int:
        rows = self._gw.execute("SELECT COUNT(*) AS n FROM users")
        return int(rows[0]["n"])
