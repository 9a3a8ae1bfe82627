"""Filling the database with a month of plausible place events for one user."""

from __future__ import annotations

import argparse
import logging
import random
import sqlite3
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from placelog.db import connect
from placelog.models import Event
from placelog.storage import Storage

logger = logging.getLogger(__name__)

SEED_DAYS = 30
WFH_CHANCE = 0.10


def _local_now() -> datetime:
    """Current wall-clock time in Asia/Kolkata, or UTC if that zone is unavailable."""
    try:
        zone = ZoneInfo("Asia/Kolkata")
    except ZoneInfoNotFoundError as exc:
        logger.warning("Failed to load Asia/Kolkata: %s. Falling back to UTC.", exc)
        return datetime.utcnow()
    return datetime.now(zone).replace(tzinfo=None)


def _minutes(rng: random.Random, low: int, high: int) -> timedelta:
    return timedelta(minutes=rng.randint(low, high))


def _clear_events(conn: sqlite3.Connection, user_id: str) -> None:
    with conn:
        conn.execute("DELETE FROM events WHERE user_id = ?", (user_id,))


def seed_events(
    storage: Storage,
    user_id: str,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[Event]:
    """Insert events for each of the last 30 days up to *now* and return them in order.

    Weekends hold one outing away from home; workdays hold a commute, a lunch
    break and a commute back, except for the occasional day worked from home.
    """
    if now is None:
        now = _local_now()
    if rng is None:
        rng = random.Random()

    start_date = now - timedelta(days=SEED_DAYS)
    inserted: list[Event] = []

    def insert(place: str, timestamp: datetime) -> datetime:
        event = Event(user_id=user_id, place=place, timestamp=timestamp)
        event.id = storage.insert_event(event)
        inserted.append(event)
        return timestamp

    for offset in range(SEED_DAYS + 1):
        current = start_date + timedelta(days=offset)
        base = current.replace(hour=0, minute=0, second=0, microsecond=0)

        if current.weekday() >= 5:
            leave = insert("outside", base + timedelta(hours=11) + _minutes(rng, -60, 60))
            insert("home", leave + timedelta(hours=5) + _minutes(rng, -60, 60))
            continue

        if rng.random() < WFH_CHANCE:
            # Working from home: nothing logged, the user stays home all day.
            continue

        leave_home = insert("outside", base + timedelta(hours=8) + _minutes(rng, -30, 30))
        insert("office", leave_home + _minutes(rng, 20, 45))
        lunch_out = insert("outside", base + timedelta(hours=12, minutes=30) + _minutes(rng, -15, 30))
        insert("office", lunch_out + _minutes(rng, 30, 60))
        leave_office = insert("outside", base + timedelta(hours=17) + _minutes(rng, -30, 60))
        insert("home", leave_office + _minutes(rng, 25, 50))

    return inserted


def main(argv: list[str] | None = None) -> None:
    """Replace a user's events with a freshly generated month of them."""
    parser = argparse.ArgumentParser(prog="seeder", description="Seed a user's place events.")
    parser.add_argument("-userid", "--userid", default="", help="User ID to seed data for")
    parser.add_argument("--db", default="events.db", help="path of the SQLite database")
    args = parser.parse_args(argv)

    if not args.userid:
        print("Usage: seeder -userid <id>")
        raise SystemExit(1)

    conn = connect(args.db)
    try:
        _clear_events(conn, args.userid)
        print(f"Cleared old events for user {args.userid}.")
        events = seed_events(Storage(conn), args.userid, _local_now())
    finally:
        conn.close()

    print(f"Seed complete! Inserted {len(events)} realistic logical events over the past 30 days.")