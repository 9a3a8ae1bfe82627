# placelog

A small web service that records where a user is (`home`, `office` or
`outside`) and turns those moves into time summaries. Short stays outside
between home and office are counted as commute time.

Events are kept in a local SQLite database (`events.db` by default). All
times are wall-clock times in the Asia/Kolkata zone; if that zone is not
available on the system, UTC is used instead.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Users

Every event belongs to a registered user. Users are managed with
`placelog-users`:

```
placelog-users                      # interactive menu
placelog-users list
placelog-users create Jane Doe
placelog-users update <id> <new name>
placelog-users delete <id>
placelog-users --db other.db list   # use another database file
```

Creating a user prints its generated 16-character hexadecimal ID. Deleting a
user also deletes all of their events. When an argument is left out, the
command asks for it on standard input.

## Running the server

```
placelog [--db events.db] [--templates templates] [--host 0.0.0.0] [--port 8080]
```

Endpoints:

| Path                 | Purpose                                                                 |
|----------------------|-------------------------------------------------------------------------|
| `/`                  | redirects to `/dashboard`                                               |
| `/log`               | record a move: `?userid=<id>&place=<place>`; answers `Logged: <place>`  |
| `/events`            | paged list of a user's events (`userid` or cookie, `page`, `limit`)     |
| `/api/today-summary` | JSON totals and segments for today up to now (`userid`)                 |
| `/api/range-summary` | JSON per-day summaries (`userid`, `start`, `end` as YYYY-MM-DD, `page`, `limit`) |
| `/dashboard`         | dashboard page, showing the user's name when known                      |
| `/insights`          | insights page                                                           |
| `/favicon.ico`       | `static/favicon.ico` next to the templates directory, if present        |

A missing `userid`, `place`, `start` or `end` answers 400; an unknown user
answers 401 on `/log` and the two `/api` endpoints. Page sizes default to 50.

Moves follow two rules: you cannot log the place you are already at, and you
must go `outside` between `home` and `office`. A move that breaks them is
refused with status 500 and the reason as the body.

Durations are reported as `"<hours>h <minutes>m"`.

`/api/today-summary` returns `current_time`, `total_elapsed`, `totals`
(`home`, `office`, `outside`, `commute`) and `segments` (each with `place`,
`start`, `end`, `duration`). If no event falls exactly at midnight, the
place held before midnight is carried into the day. A stay outside of at
most 90 minutes between home and office is a commute; a stay outside that is
still going on never is.

`/api/range-summary` returns overall totals (`total_home_time`,
`total_office_time`, `total_outside_time`, `total_commute_time`), one entry
per day with events in `days`, sorted by date, and `current_page`,
`total_pages`, `total_items` and `limit`. Each day's last place runs on to
midnight; a stay outside of at most two hours between home and office is a
commute.

## Page templates are not included

The HTML pages (`/dashboard`, `/events`, `/insights`) are rendered from
Jinja templates that this package does not ship. Point `--templates` at a
directory holding `layout.html`, `components/nav.html` and
`pages/dashboard.html`, `pages/events.html` and `pages/insights.html`;
without them those pages answer 500 with a template error. The JSON
endpoints and `/log` work without any templates. The templates can use the
helpers `add`, `sub` and `int`.

## Sample data

To fill a user's history with about a month of plausible workdays and
weekends (this first deletes that user's existing events):

```
placelog-seed -userid <id> [--db events.db]
```

## Using it as a library

```python
from datetime import datetime

from placelog.db import connect
from placelog.events import InvalidTransition, log_event
from placelog.storage import Storage
from placelog.summary import calculate_range_summary, calculate_today_summary, format_duration

storage = Storage(connect("events.db"))
storage.create_user("abc123", "Jane Doe")

try:
    log_event(storage, "abc123", "outside", datetime(2024, 1, 8, 8, 0))
    log_event(storage, "abc123", "office", datetime(2024, 1, 8, 8, 30))
except InvalidTransition as exc:
    print(exc)

events = storage.events_in_range("abc123", "2024-01-01", "2024-01-31")
summary = calculate_range_summary(events)
print(format_duration(summary.total_office))
```

`placelog.web.create_app(storage, template_dir)` builds the Flask
application; its `CLOCK` config entry is the function used for the current
time. `placelog.seeder.seed_events(storage, user_id, now, rng)` generates
sample events, and `placelog.user_manager.UserManager` carries out the user
commands against any text streams.