"""Recording place changes under the home/office/outside transition rules."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from placelog.models import Event
from placelog.storage import Storage

_NEEDS_OUTSIDE = frozenset({"home", "office"})


class InvalidTransition(ValueError):
    """A place change that the transition rules forbid."""


def log_event(
    storage: Storage,
    user_id: str,
    place: str,
    now: Optional[datetime] = None,
) -> Event:
    """Record that *user_id* moved to *place* at *now*, enforcing the transition rules."""
    if now is None:
        now = datetime.now()

    latest = storage.latest_event(user_id, now)
    if latest is not None:
        if place == latest.place:
            raise InvalidTransition(f"Invalid Transition: already at {latest.place}")
        if {latest.place, place} == _NEEDS_OUTSIDE:
            raise InvalidTransition(
                "Invalid Transition: must go 'outside' before "
                "transitioning between Home and Office"
            )

    event = Event(user_id=user_id, place=place, timestamp=now)
    event.id = storage.insert_event(event)
    return event