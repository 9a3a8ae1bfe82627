"""Turning sequences of place events into time-per-place summaries."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from itertools import chain, pairwise

from placelog.models import (
    DailySummary,
    Event,
    RangeSummary,
    TimeSegment,
    TodaySummaryResponse,
    TodayTotals,
)

COMMUTE_THRESHOLD = timedelta(hours=2)
TODAY_COMMUTE_THRESHOLD = timedelta(minutes=90)
_COMMUTE_ENDS = {("home", "office"), ("office", "home")}


def format_duration(delta: timedelta) -> str:
    """Render a duration as 'Xh Ym', truncating toward zero."""
    hours = math.trunc(delta / timedelta(hours=1))
    total_minutes = math.trunc(delta / timedelta(minutes=1))
    minutes = total_minutes - math.trunc(total_minutes / 60) * 60
    return f"{hours}h {minutes}m"


def end_of_day(date: str) -> datetime:
    """Midnight at the end of the YYYY-MM-DD day *date*."""
    return datetime.strptime(date, "%Y-%m-%d") + timedelta(days=1)


@dataclass
class Summary:
    """Accumulated time per place, with the segments that make it up."""

    home_time: timedelta = timedelta(0)
    office_time: timedelta = timedelta(0)
    outside_time: timedelta = timedelta(0)
    commute_time: timedelta = timedelta(0)
    segments: list[TimeSegment] = field(default_factory=list)

    def _record(
        self,
        place: str,
        start: datetime,
        end: datetime,
        prev_place: str | None,
        next_place: str | None,
        threshold: timedelta,
    ) -> None:
        duration = end - start
        if duration <= timedelta(0):
            return
        segment = TimeSegment(
            place=place,
            start=start.strftime("%H:%M"),
            end=end.strftime("%H:%M"),
            duration=format_duration(duration),
        )
        if place == "outside" and (prev_place, next_place) in _COMMUTE_ENDS and duration <= threshold:
            self.commute_time += duration
            segment.place = "commute"
        elif place == "home":
            self.home_time += duration
        elif place == "office":
            self.office_time += duration
        elif place == "outside":
            self.outside_time += duration
        self.segments.append(segment)


def calculate_summary(events: list[Event]) -> Summary:
    """Time spent between consecutive events; the last event only closes the previous span."""
    summary = Summary()
    prev_place = None
    for curr, nxt in pairwise(events):
        summary._record(curr.place, curr.timestamp, nxt.timestamp, prev_place, nxt.place, COMMUTE_THRESHOLD)
        prev_place = curr.place
    return summary


def calculate_range_summary(events: list[Event]) -> RangeSummary:
    """Summarise events day by day, extending each day's last place to midnight."""
    by_date: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        by_date[event.timestamp.strftime("%Y-%m-%d")].append(event)

    result = RangeSummary()
    for date in sorted(by_date):
        day = sorted(by_date[date], key=lambda e: e.timestamp)
        last = day[-1]
        closing = end_of_day(date).replace(tzinfo=last.timestamp.tzinfo)
        day.append(Event(user_id=last.user_id, place=last.place, timestamp=closing))

        summary = calculate_summary(day)
        result.total_home += summary.home_time
        result.total_office += summary.office_time
        result.total_outside += summary.outside_time
        result.total_commute += summary.commute_time
        result.days.append(
            DailySummary(
                date=date,
                home_time=format_duration(summary.home_time),
                office_time=format_duration(summary.office_time),
                outside_time=format_duration(summary.outside_time),
                commute_time=format_duration(summary.commute_time),
                segments=summary.segments,
            )
        )
    return result


def calculate_today_summary(events: list[Event], now: datetime) -> TodaySummaryResponse:
    """Summarise today's events up to *now*; events after *now* are ignored."""
    past = [e for e in events if e.timestamp <= now]
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

    totals = Summary()
    prev_place = None
    for curr, nxt in zip(past, chain(past[1:], [None])):
        end = nxt.timestamp if nxt is not None else now
        # An ongoing stay outside has no destination yet, so it is never a commute.
        next_place = nxt.place if nxt is not None else None
        totals._record(curr.place, curr.timestamp, end, prev_place, next_place, TODAY_COMMUTE_THRESHOLD)
        prev_place = curr.place

    return TodaySummaryResponse(
        current_time=now.strftime("%Y-%m-%dT%H:%M:%S"),
        total_elapsed=format_duration(now - start_of_day),
        totals=TodayTotals(
            home=format_duration(totals.home_time),
            office=format_duration(totals.office_time),
            outside=format_duration(totals.outside_time),
            commute=format_duration(totals.commute_time),
        ),
        segments=totals.segments,
    )