# src/tasktrack/db/gateway.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, RowMapping
from sqlalchemy.pool import QueuePool

logger = logging.getLogger(__name__)


class SqliteGateway:
    """
    SQLite persistence gateway on a pooled SQLAlchemy engine.

    Every statement runs on a connection checked out from the pool and checked
    back in right after, whether the statement succeeded or not. SQL is passed
    to the driver as written, so values are always bound positionally
    (`?` placeholders).

    Pooling (QueuePool):
    - up to `pool_size` idle connections are kept for reuse
    - up to `max_overflow` extra connections are opened under load
    - an overflow connection is closed when it is checked back in
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        pool_size: int = 4,
        max_overflow: int = 10,
        timeout: float = 30.0,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool_size = max(1, int(pool_size))
        self._closed = False

        self._engine = create_engine(
            f"sqlite:///{self._db_path}",
            poolclass=QueuePool,
            pool_size=self._pool_size,
            max_overflow=max(0, int(max_overflow)),
            pool_timeout=float(timeout),
            # Pooled connections may be checked in on a different thread than they were opened on.
            connect_args={"timeout": float(timeout), "check_same_thread": False},
        )
        event.listen(self._engine, "connect", self._on_connect)
        logger.info("SqliteGateway ready db=%s pool_size=%s", self._db_path, self._pool_size)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- pool events ----

    def _on_connect(self, dbapi_conn, connection_record) -> None:
        cur = dbapi_conn.cursor()
        try:
            cur.execute("PRAGMA foreign_keys=ON")
            with contextlib.suppress(sqlite3.DatabaseError):
                cur.execute("PRAGMA journal_mode=WAL")
        finally:
            cur.close()
        logger.debug("Opened SQLite connection db=%s", self._db_path)

    # ---- public API ----

    @contextlib.contextmanager
    def connection(self) -> Iterator[Connection]:
        """
        One transaction on a pooled connection.

        Commits when the block exits normally, rolls back on any exception,
        and always returns the connection to the pool.
        """
        if self._closed:
            raise RuntimeError("SqliteGateway is closed")
        with self._engine.begin() as conn:
            yield conn

    def execute(self, sql: str, params: Sequence[Any] = ()) -> list[RowMapping]:
        """Run one statement, return all result rows and commit."""
        with self.connection() as conn:
            result = conn.exec_driver_sql(sql, tuple(params))
            if not result.returns_rows:
                return []
            return list(result.mappings().all())

    def idle_connections(self) -> int:
        return self._engine.pool.checkedin()

    def close(self) -> None:
        """Dispose of the engine. Connections still checked out are closed on check-in."""
        if self._closed:
            return
        self._closed = True
        idle = self.idle_connections()
        self._engine.dispose()
        logger.info("SqliteGateway closed db=%s connections=%s", self._db_path, idle)

