"""Persistence of users and their place events."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime

from placelog.models import Event, User

_EVENT_COLUMNS = "SELECT id, user_id, place, timestamp FROM events"


def _encode(ts: datetime) -> str:
    # Timestamps are kept as wall-clock text so that SQL comparisons sort correctly.
    if ts.tzinfo is not None:
        ts = ts.replace(tzinfo=None)
    return ts.isoformat(sep=" ", timespec="microseconds")


def _to_event(row: tuple) -> Event:
    event_id, user_id, place, timestamp = row
    return Event(user_id=user_id, place=place, timestamp=datetime.fromisoformat(timestamp), id=event_id)


class Storage:
    """Repository over a SQLite connection holding users and events."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.Lock()

    def _events(self, sql: str, params: tuple) -> list[Event]:
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [_to_event(row) for row in rows]

    def _write(self, sql: str, params: tuple) -> sqlite3.Cursor:
        with self._lock, self._conn:
            return self._conn.execute(sql, params)

    # Events

    def insert_event(self, event: Event) -> int:
        """Store *event* and return the id it was given."""
        cursor = self._write(
            "INSERT INTO events(user_id, place, timestamp) VALUES (?, ?, ?)",
            (event.user_id, event.place, _encode(event.timestamp)),
        )
        return cursor.lastrowid

    def latest_event(self, user_id: str, before: datetime) -> Event | None:
        """The most recent event of the user at or before *before*, if any."""
        events = self._events(
            f"{_EVENT_COLUMNS} WHERE user_id = ? AND timestamp <= ? ORDER BY timestamp DESC LIMIT 1",
            (user_id, _encode(before)),
        )
        return events[0] if events else None

    def all_events(self, user_id: str) -> list[Event]:
        """All events of the user, newest first."""
        return self._events(f"{_EVENT_COLUMNS} WHERE user_id = ? ORDER BY timestamp DESC", (user_id,))

    def events_paginated(self, user_id: str, offset: int, limit: int) -> list[Event]:
        """A page of the user's events, newest first."""
        return self._events(
            f"{_EVENT_COLUMNS} WHERE user_id = ? ORDER BY timestamp DESC LIMIT ? OFFSET ?",
            (user_id, limit, offset),
        )

    def events_in_range(self, user_id: str, start: str, end: str) -> list[Event]:
        """Events whose date lies between the YYYY-MM-DD dates *start* and *end*, oldest first."""
        return self._events(
            f"{_EVENT_COLUMNS} WHERE user_id = ? AND DATE(timestamp) BETWEEN ? AND ? ORDER BY timestamp ASC",
            (user_id, start, end),
        )

    def events_for_day(self, user_id: str, now: datetime) -> list[Event]:
        """Events on the calendar day of *now*, oldest first."""
        day = now.strftime("%Y-%m-%d")
        return self._events(
            f"{_EVENT_COLUMNS} WHERE user_id = ? AND timestamp BETWEEN ? AND ? ORDER BY timestamp ASC",
            (user_id, f"{day} 00:00:00", f"{day} 23:59:59"),
        )

    def count_events(self, user_id: str) -> int:
        """Number of events logged by the user."""
        with self._lock:
            (count,) = self._conn.execute(
                "SELECT COUNT(*) FROM events WHERE user_id = ?", (user_id,)
            ).fetchone()
        return count

    # Users

    def create_user(self, user_id: str, name: str) -> None:
        """Add a user; raises sqlite3.IntegrityError if the id is taken."""
        self._write("INSERT INTO users (id, name) VALUES (?, ?)", (user_id, name))

    def all_users(self) -> list[User]:
        with self._lock:
            rows = self._conn.execute("SELECT id, name FROM users").fetchall()
        return [User(id=uid, name=name) for uid, name in rows]

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            row = self._conn.execute("SELECT id, name FROM users WHERE id = ?", (user_id,)).fetchone()
        return User(id=row[0], name=row[1]) if row else None

    def update_user(self, user_id: str, name: str) -> None:
        self._write("UPDATE users SET name = ? WHERE id = ?", (name, user_id))

    def delete_user(self, user_id: str) -> None:
        """Remove the user together with all of their events."""
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM events WHERE user_id = ?", (user_id,))
            self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    def user_exists(self, user_id: str) -> bool:
        with self._lock:
            (count,) = self._conn.execute(
                "SELECT COUNT(*) FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return count > 0