"""
Tool: Board Store
Purpose: SQLite persistence for users, categories, tasks and task interactions

Every mutating board operation runs inside ``transaction()``, which opens a
fresh connection and issues ``BEGIN IMMEDIATE``. The write lock is taken
before the first read, so two concurrent reorders for the same board are
serialized and the second one always reads the positions the first one
committed.

Usage:
    from taskboard.tasks.store import transaction, list_ordered

    with transaction() as conn:
        siblings = list_ordered(conn, "tasks", user_id)

Dependencies:
    - sqlite3 (stdlib)
    - pyyaml (busy timeout from args/taskboard.yaml)
"""

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import yaml

from . import CONFIG_PATH, DB_PATH, INTERACTION_TYPES, TASK_STATUSES

# Tables whose rows carry a per-user ``position``
ORDERABLE_TABLES = ("tasks", "categories")

DEFAULT_BUSY_TIMEOUT = 10.0


def load_config() -> Dict[str, Any]:
    """Load board configuration."""
    if CONFIG_PATH.exists():
        with open(CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


def _busy_timeout() -> float:
    database = load_config().get("taskboard", {}).get("database", {})
    return float(database.get("busy_timeout_seconds", DEFAULT_BUSY_TIMEOUT))


def _create_schema(cursor: sqlite3.Cursor) -> None:
    statuses = ", ".join(f"'{s}'" for s in TASK_STATUSES)
    interaction_types = ", ".join(f"'{t}'" for t in INTERACTION_TYPES)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL DEFAULT '',
            name TEXT NOT NULL DEFAULT 'Anonymous',
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            position REAL NOT NULL,
            is_default INTEGER NOT NULL DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL DEFAULT 'TODO' CHECK(status IN ({statuses})),
            due_date DATETIME,
            category_id TEXT NOT NULL,
            position REAL NOT NULL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(category_id) REFERENCES categories(id)
        )
    """)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS task_interactions (
            id TEXT PRIMARY KEY,
            task_id TEXT NOT NULL,
            type TEXT NOT NULL CHECK(type IN ({interaction_types})),
            content TEXT NOT NULL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(task_id) REFERENCES tasks(id) ON DELETE CASCADE
        )
    """)

    cursor.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user_position ON tasks(user_id, position)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_tasks_category ON tasks(category_id)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_categories_user_position ON categories(user_id, position)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_interactions_task ON task_interactions(task_id)")
    # At most one default category per user
    cursor.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS idx_categories_one_default
        ON categories(user_id) WHERE is_default = 1
    """)


def get_connection() -> sqlite3.Connection:
    """Get database connection, creating tables if needed.

    The connection is in autocommit mode; use ``transaction()`` for any
    read-modify-write sequence.
    """
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH), timeout=_busy_timeout(), isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    _create_schema(conn.cursor())
    return conn


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Run a block atomically: commit on success, roll back on any exception."""
    conn = get_connection()
    try:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
    finally:
        conn.close()


def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return None
    return dict(row)


def generate_id() -> str:
    """Generate a short unique ID."""
    return uuid.uuid4().hex[:12]


def now_iso() -> str:
    return datetime.now().isoformat()


def _check_table(table: str) -> None:
    if table not in ORDERABLE_TABLES and table not in ("users", "task_interactions"):
        raise ValueError(f"Unknown table: {table}")


def find_owned(conn: sqlite3.Connection, table: str, entity_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    """Point lookup scoped to an owner."""
    _check_table(table)
    cursor = conn.execute(f"SELECT * FROM {table} WHERE id = ? AND user_id = ?", (entity_id, user_id))
    return row_to_dict(cursor.fetchone())


def list_ordered(conn: sqlite3.Connection, table: str, user_id: str) -> List[Dict[str, Any]]:
    """All of a user's rows in one ordering scope, ascending by position."""
    _check_table(table)
    cursor = conn.execute(
        f"SELECT * FROM {table} WHERE user_id = ? ORDER BY position ASC, id ASC",
        (user_id,),
    )
    return [row_to_dict(row) for row in cursor.fetchall()]


def last_position(conn: sqlite3.Connection, table: str, user_id: str) -> Optional[float]:
    _check_table(table)
    row = conn.execute(f"SELECT MAX(position) AS pos FROM {table} WHERE user_id = ?", (user_id,)).fetchone()
    return row["pos"]


def first_position(conn: sqlite3.Connection, table: str, user_id: str) -> Optional[float]:
    _check_table(table)
    row = conn.execute(f"SELECT MIN(position) AS pos FROM {table} WHERE user_id = ?", (user_id,)).fetchone()
    return row["pos"]


def insert_row(conn: sqlite3.Connection, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a row and return it as stored."""
    _check_table(table)
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(values.values()))
    return row_to_dict(conn.execute(f"SELECT * FROM {table} WHERE id = ?", (values["id"],)).fetchone())


def update_fields(
    conn: sqlite3.Connection, table: str, entity_id: str, fields: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Update the given columns (plus ``updated_at``); None when the row is gone."""
    _check_table(table)
    fields = {**fields, "updated_at": now_iso()}
    assignments = ", ".join(f"{column} = ?" for column in fields)
    cursor = conn.execute(
        f"UPDATE {table} SET {assignments} WHERE id = ?", list(fields.values()) + [entity_id]
    )
    if cursor.rowcount == 0:
        return None
    return row_to_dict(conn.execute(f"SELECT * FROM {table} WHERE id = ?", (entity_id,)).fetchone())


def update_position(conn: sqlite3.Connection, table: str, entity_id: str, position: float) -> bool:
    """Write a single ordering key. Returns False when the row no longer exists."""
    if table not in ORDERABLE_TABLES:
        raise ValueError(f"Table is not orderable: {table}")
    cursor = conn.execute(
        f"UPDATE {table} SET position = ?, updated_at = ? WHERE id = ?",
        (position, now_iso(), entity_id),
    )
    return cursor.rowcount > 0


def delete_row(conn: sqlite3.Connection, table: str, entity_id: str) -> bool:
    _check_table(table)
    cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (entity_id,))
    return cursor.rowcount > 0


__all__ = [
    "ORDERABLE_TABLES",
    "get_connection",
    "transaction",
    "row_to_dict",
    "generate_id",
    "now_iso",
    "find_owned",
    "list_ordered",
    "last_position",
    "first_position",
    "insert_row",
    "update_fields",
    "update_position",
    "delete_row",
]
