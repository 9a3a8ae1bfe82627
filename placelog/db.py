"""SQLite connection and schema for the place log."""

from __future__ import annotations

import sqlite3

DEFAULT_PATH = "events.db"

# Table name -> column definitions, in creation order.
_SCHEMA: dict[str, tuple[str, ...]] = {
    "users": (
        "id TEXT PRIMARY KEY",
        "name TEXT",
    ),
    "events": (
        "id INTEGER PRIMARY KEY AUTOINCREMENT",
        "user_id TEXT",
        "place TEXT",
        "timestamp DATETIME",
        "FOREIGN KEY (user_id) REFERENCES users (id)",
    ),
}


def _create_statement(table: str, columns: tuple[str, ...]) -> str:
    return f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(columns)})"


def connect(path: str = DEFAULT_PATH) -> sqlite3.Connection:
    """Open the database at *path* with foreign keys enforced and the schema in place."""
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.execute("PRAGMA foreign_keys = ON")
    create_tables(conn)
    return conn


def create_tables(conn: sqlite3.Connection) -> None:
    """Create the users and events tables unless they already exist."""
    with conn:
        for table, columns in _SCHEMA.items():
            conn.execute(_create_statement(table, columns))