"""Records for users, logged place changes and time summaries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta


@dataclass
class Event:
    """A user arriving at a place at a given moment."""

    user_id: str
    place: str
    timestamp: datetime
    id: int = 0


@dataclass(frozen=True)
class User:
    """A registered user."""

    id: str
    name: str


@dataclass
class TimeSegment:
    """A stretch of time spent in one place, formatted for display."""

    place: str
    start: str
    end: str
    duration: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DailySummary:
    """Time spent per place during one calendar day."""

    date: str
    home_time: str
    office_time: str
    outside_time: str
    commute_time: str
    segments: list[TimeSegment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RangeSummary:
    """Totals over a range of days, plus a summary per day."""

    total_home: timedelta = timedelta(0)
    total_office: timedelta = timedelta(0)
    total_outside: timedelta = timedelta(0)
    total_commute: timedelta = timedelta(0)
    days: list[DailySummary] = field(default_factory=list)


@dataclass
class TodayTotals:
    """Formatted per-place totals for the current day."""

    home: str
    office: str
    outside: str
    commute: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TodaySummaryResponse:
    """Summary of the current day up to the present moment."""

    current_time: str
    total_elapsed: str
    totals: TodayTotals
    segments: list[TimeSegment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)