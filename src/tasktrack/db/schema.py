# src/tasktrack/db/schema.py

from __future__ import annotations

import logging

from sqlalchemy.engine import Connection

from ..tasks.task_models import Category, TaskStatus
from .gateway import SqliteGateway

logger = logging.getLogger(__name__)


def ensure_schema(gateway: SqliteGateway) -> None:
    """
    Create tables if missing and seed the static lookup tables.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Safe to call on every start.
    """
    with gateway.connection() as conn:
        conn.exec_driver_sql(
            """
            CREATE TABLE IF NOT EXISTS users (
                id            INTEGER PRIMARY KEY AUTOINCREMENT,
                name          TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at    REAL NOT NULL
            )
            """
        )
        conn.exec_driver_sql(
            """
            CREATE TABLE IF NOT EXISTS status (
                id           INTEGER PRIMARY KEY,
                status_name  TEXT NOT NULL UNIQUE,
                display_name TEXT NOT NULL
            )
            """
        )
        conn.exec_driver_sql(
            """
            CREATE TABLE IF NOT EXISTS category (
                id            INTEGER PRIMARY KEY,
                category_name TEXT NOT NULL UNIQUE,
                display_name  TEXT NOT NULL
            )
            """
        )
        conn.exec_driver_sql(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                task_name   TEXT NOT NULL,
                status_id   INTEGER NOT NULL REFERENCES status(id),
                user_id     INTEGER NOT NULL REFERENCES users(id),
                category_id INTEGER NOT NULL REFERENCES category(id),
                created_at  REAL NOT NULL,
                updated_at  REAL NOT NULL
            )
            """
        )

        _add_missing_columns(
            conn,
            "users",
            {
                "password_hash": "TEXT NOT NULL DEFAULT ''",
                "created_at": "REAL NOT NULL DEFAULT 0",
            },
        )
        _add_missing_columns(
            conn,
            "tasks",
            {
                # SQLite refuses REFERENCES with a non-NULL default in ALTER TABLE.
                "category_id": "INTEGER NOT NULL DEFAULT 1",
                "created_at": "REAL NOT NULL DEFAULT 0",
                "updated_at": "REAL NOT NULL DEFAULT 0",
            },
        )

        conn.exec_driver_sql("CREATE INDEX IF NOT EXISTS idx_tasks_owner_status ON tasks(user_id, status_id)")
        conn.exec_driver_sql("CREATE INDEX IF NOT EXISTS idx_tasks_owner_updated ON tasks(user_id, updated_at)")

        conn.exec_driver_sql(
            "INSERT OR IGNORE INTO status(id, status_name, display_name) VALUES (?, ?, ?)",
            [(int(s), s.db_name, s.display_name) for s in TaskStatus],
        )
        conn.exec_driver_sql(
            "INSERT OR IGNORE INTO category(id, category_name, display_name) VALUES (?, ?, ?)",
            [(int(c), c.db_name, c.display_name) for c in Category],
        )

    logger.info("Schema ready db=%s", gateway.db_path)


def _add_missing_columns(conn: Connection, table: str, columns: dict[str, str]) -> None:
    existing = {row["name"] for row in conn.exec_driver_sql(f"PRAGMA table_info({table})").mappings()}
    for name, decl in columns.items():
        if name in existing:
            continue
        conn.exec_driver_sql(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
        logger.info("Schema migration: added column %s.%s", table, name)
