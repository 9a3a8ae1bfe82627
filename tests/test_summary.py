from datetime import datetime, timedelta

import pytest

from placelog.models import Event
from placelog.summary import (
    calculate_range_summary,
    calculate_summary,
    calculate_today_summary,
    end_of_day,
    format_duration,
)

DAY = datetime(2024, 3, 4)


def ev(place, hour, minute=0, day=DAY):
    return Event("u1", place, day + timedelta(hours=hour, minutes=minute))


def test_format_zero():
    assert format_duration(timedelta(0)) == "0h 0m"


@pytest.mark.parametrize("hours,minutes", [(0, 5), (3, 59), (27, 0), (1, 1)])
def test_format_hours_minutes(hours, minutes):
    assert format_duration(timedelta(hours=hours, minutes=minutes)) == f"{hours}h {minutes}m"


def test_format_truncates_seconds():
    assert format_duration(timedelta(hours=1, minutes=2, seconds=59)) == "1h 2m"


def test_format_negative_truncates_toward_zero():
    assert format_duration(-timedelta(minutes=90)) == "-1h -30m"


def test_end_of_day_is_next_midnight():
    assert end_of_day("2024-03-04") - datetime.strptime("2024-03-04", "%Y-%m-%d") == timedelta(days=1)


def test_end_of_day_invalid():
    with pytest.raises(ValueError):
        end_of_day("not-a-date")


def test_summary_needs_two_events():
    summary = calculate_summary([ev("home", 8)])
    assert summary.segments == []
    assert summary.home_time == timedelta(0)


def test_commute_detected():
    events = [ev("home", 8), ev("outside", 8, 30), ev("office", 9)]
    summary = calculate_summary(events)
    assert [s.place for s in summary.segments] == ["home", "commute"]
    assert summary.commute_time == events[2].timestamp - events[1].timestamp
    assert summary.home_time == events[1].timestamp - events[0].timestamp
    assert summary.outside_time == timedelta(0)
    assert summary.segments[1].start == "08:30"
    assert summary.segments[1].end == "09:00"
    assert summary.segments[1].duration == format_duration(timedelta(minutes=30))


def test_long_outside_is_not_commute():
    events = [ev("home", 8), ev("outside", 8), ev("office", 11)]
    summary = calculate_summary(events)
    assert summary.commute_time == timedelta(0)
    assert summary.outside_time == timedelta(hours=3)
    assert [s.place for s in summary.segments] == ["outside"]


def test_outside_between_same_places_is_not_commute():
    events = [ev("home", 8), ev("outside", 9), ev("home", 9, 20)]
    summary = calculate_summary(events)
    assert summary.commute_time == timedelta(0)
    assert summary.outside_time == timedelta(minutes=20)


def test_range_groups_days_and_extends_to_midnight():
    next_day = DAY + timedelta(days=1)
    events = [ev("home", 20, day=next_day), ev("outside", 7), ev("office", 7, 30)]
    result = calculate_range_summary(events)
    assert [d.date for d in result.days] == ["2024-03-04", "2024-03-05"]
    first, second = result.days
    office_span = end_of_day("2024-03-04") - events[2].timestamp
    assert first.office_time == format_duration(office_span)
    assert second.home_time == format_duration(end_of_day("2024-03-05") - events[0].timestamp)
    assert result.total_office == office_span
    assert result.total_home == end_of_day("2024-03-05") - events[0].timestamp


def test_range_empty():
    result = calculate_range_summary([])
    assert result.days == []
    assert result.total_home == timedelta(0)


def test_today_without_events():
    now = DAY + timedelta(hours=10, minutes=15)
    response = calculate_today_summary([], now)
    assert response.segments == []
    assert response.totals.to_dict() == {
        "home": "0h 0m", "office": "0h 0m", "outside": "0h 0m", "commute": "0h 0m",
    }
    assert response.current_time == now.strftime("%Y-%m-%dT%H:%M:%S")
    assert response.total_elapsed == format_duration(now - DAY)


def test_today_ignores_future_events():
    now = DAY + timedelta(hours=9)
    response = calculate_today_summary([ev("home", 0), ev("outside", 12)], now)
    assert [s.place for s in response.segments] == ["home"]
    assert response.totals.home == format_duration(timedelta(hours=9))


def test_today_ongoing_outside_is_not_commute():
    now = DAY + timedelta(hours=8, minutes=45)
    response = calculate_today_summary([ev("home", 0), ev("outside", 8, 30)], now)
    assert response.segments[-1].place == "outside"
    assert response.totals.commute == "0h 0m"
    assert response.totals.outside == format_duration(timedelta(minutes=15))


def test_today_uses_shorter_commute_threshold():
    events = [ev("home", 0), ev("outside", 8), ev("office", 9, 45)]
    now = DAY + timedelta(hours=10)
    today = calculate_today_summary(events, now)
    full = calculate_summary(events)
    assert today.totals.commute == "0h 0m"
    assert today.totals.outside == format_duration(timedelta(hours=1, minutes=45))
    assert full.commute_time == timedelta(hours=1, minutes=45)