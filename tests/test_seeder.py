import random
from collections import Counter
from datetime import datetime, timedelta

import pytest

from placelog.db import connect
from placelog.models import Event
from placelog.seeder import main, seed_events
from placelog.storage import Storage

NOW = datetime(2024, 3, 31, 12, 0)


class _NeverWFH(random.Random):
    def random(self):
        return 0.99


class _AlwaysWFH(random.Random):
    def random(self):
        return 0.0


@pytest.fixture
def storage():
    conn = connect(":memory:")
    store = Storage(conn)
    store.create_user("u1", "Asha")
    yield store
    conn.close()


def test_seeded_events_are_stored(storage):
    events = seed_events(storage, "u1", NOW, random.Random(7))
    assert storage.count_events("u1") == len(events)
    assert len(events) > 0


def test_transitions_are_valid_and_ordered(storage):
    events = seed_events(storage, "u1", NOW, random.Random(3))
    for prev, nxt in zip(events, events[1:]):
        assert prev.timestamp < nxt.timestamp
        assert prev.place != nxt.place
        assert {prev.place, nxt.place} != {"home", "office"}


def test_events_fall_within_the_seeded_days(storage):
    events = seed_events(storage, "u1", NOW, random.Random(11))
    first_day = (NOW - timedelta(days=30)).date()
    assert all(first_day <= e.timestamp.date() <= NOW.date() for e in events)


def test_day_patterns(storage):
    events = seed_events(storage, "u1", NOW, random.Random(5))
    per_day = Counter(e.timestamp.date() for e in events)
    for day, count in per_day.items():
        if day.weekday() >= 5:
            assert count == 2
        else:
            assert count == 6


def test_weekend_is_outside_then_home(storage):
    events = seed_events(storage, "u1", NOW, random.Random(9))
    weekend = [e for e in events if e.timestamp.weekday() >= 5]
    by_day = {}
    for e in weekend:
        by_day.setdefault(e.timestamp.date(), []).append(e.place)
    assert by_day
    assert all(places == ["outside", "home"] for places in by_day.values())


def test_without_wfh_every_weekday_has_six_events(storage):
    events = seed_events(storage, "u1", NOW, _NeverWFH(1))
    days = [(NOW - timedelta(days=30 - i)).date() for i in range(31)]
    expected = sum(2 if d.weekday() >= 5 else 6 for d in days)
    assert len(events) == expected


def test_always_wfh_leaves_only_weekends(storage):
    events = seed_events(storage, "u1", NOW, _AlwaysWFH(1))
    days = [(NOW - timedelta(days=30 - i)).date() for i in range(31)]
    assert len(events) == 2 * sum(1 for d in days if d.weekday() >= 5)
    assert all(e.timestamp.weekday() >= 5 for e in events)


def test_same_seed_is_reproducible(storage):
    first = seed_events(storage, "u1", NOW, random.Random(42))
    second = seed_events(storage, "u1", NOW, random.Random(42))
    assert [(e.place, e.timestamp) for e in first] == [(e.place, e.timestamp) for e in second]


def test_main_requires_userid(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--db", str(tmp_path / "x.db")])
    assert excinfo.value.code == 1
    assert "Usage:" in capsys.readouterr().out


def test_main_clears_old_events_and_seeds(tmp_path, capsys):
    path = str(tmp_path / "events.db")
    conn = connect(path)
    store = Storage(conn)
    store.create_user("u1", "Asha")
    store.insert_event(Event(user_id="u1", place="office", timestamp=datetime(2001, 1, 1, 9, 0)))
    conn.close()

    main(["-userid", "u1", "--db", path])

    out = capsys.readouterr().out
    assert "Cleared old events for user u1." in out
    assert "Seed complete!" in out

    conn = connect(path)
    store = Storage(conn)
    events = store.all_events("u1")
    conn.close()
    assert events
    assert all(e.timestamp.year != 2001 for e in events)
    assert f"Inserted {len(events)} realistic" in out