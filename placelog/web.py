"""HTTP front end: event logging, event history pages and time summaries."""

from __future__ import annotations

import argparse
import functools
import logging
import re
import sqlite3
import time
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import Flask, Response, current_app, g, jsonify, redirect, request

from placelog.db import connect
from placelog.events import InvalidTransition, log_event
from placelog.models import Event
from placelog.storage import Storage
from placelog.summary import calculate_range_summary, calculate_today_summary, format_duration

logger = logging.getLogger(__name__)

PAGE_SIZE = 50
_INTEGER = re.compile(r"[+-]?\d+")


@functools.lru_cache(maxsize=None)
def _zone() -> ZoneInfo | None:
    try:
        return ZoneInfo("Asia/Kolkata")
    except ZoneInfoNotFoundError as exc:
        logger.warning("Failed to load Asia/Kolkata: %s. Falling back to UTC.", exc)
        return None


def _local_now() -> datetime:
    """Current wall-clock time in the service's time zone, without tzinfo."""
    zone = _zone()
    if zone is None:
        return datetime.utcnow()
    return datetime.now(zone).replace(tzinfo=None)


def _positive_int(text: str | None, default: int) -> int:
    if text and _INTEGER.fullmatch(text):
        value = int(text)
        if value > 0:
            return value
    return default


def _error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def _request_user() -> str:
    return request.args.get("userid") or request.cookies.get("userid", "")


def _request_uri() -> str:
    query = request.query_string.decode("latin-1")
    return f"{request.path}?{query}" if query else request.path


def _render(page: str, context: dict) -> Response:
    env = current_app.jinja_env
    try:
        env.get_template("layout.html")
        env.get_template("components/nav.html")
        template = env.get_template(f"pages/{page}")
    except Exception as exc:
        return _error(f"Template Parse Error: {exc}", 500)
    try:
        body = template.render(**context)
    except Exception as exc:
        return _error(f"Template Execution Error: {exc}", 500)
    return Response(body, mimetype="text/html")


def _as_int(value) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def create_app(storage: Storage, template_dir: str | Path | None = None) -> Flask:
    """Build the web application serving *storage*, with page templates under *template_dir*."""
    template_path = Path(template_dir) if template_dir is not None else Path.cwd() / "templates"
    template_path = template_path.resolve()
    favicon_path = template_path.parent / "static" / "favicon.ico"

    app = Flask(__name__, template_folder=str(template_path), static_folder=None)
    app.config.setdefault("CLOCK", _local_now)
    app.jinja_env.globals.update(add=lambda a, b: a + b, sub=lambda a, b: a - b, int=_as_int)

    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        logger.info(
            "%d %s %s %s %.3fms",
            response.status_code,
            request.method,
            _request_uri(),
            request.remote_addr,
            elapsed * 1000,
        )
        return response

    @app.route("/favicon.ico")
    def favicon():
        try:
            icon = favicon_path.read_bytes()
        except OSError:
            return _error("404 page not found", 404)
        return Response(icon, mimetype="image/x-icon")

    @app.route("/")
    def index():
        return redirect("/dashboard", code=302)

    @app.route("/log")
    def log_place():
        user_id = request.args.get("userid", "")
        place = request.args.get("place", "")
        if not user_id:
            return _error("userid missing", 400)
        if not place:
            return _error("place missing", 400)
        if not storage.user_exists(user_id):
            return _error("invalid userid", 401)
        try:
            log_event(storage, user_id, place, current_app.config["CLOCK"]())
        except (InvalidTransition, sqlite3.Error) as exc:
            logger.error("LogEvent Error: %s", exc)
            return _error(str(exc), 500)
        return Response(f"Logged: {place}", mimetype="text/plain")

    @app.route("/events")
    def events_page():
        user_id = _request_user()
        if not user_id:
            return _render(
                "events.html",
                {
                    "Events": [],
                    "CurrentPage": 1,
                    "TotalPages": 0,
                    "TotalEvents": 0,
                    "Limit": PAGE_SIZE,
                    "HasMore": False,
                },
            )
        # An unknown id still gets the page; the front end validates it through the API.
        page = _positive_int(request.args.get("page"), 1)
        limit = _positive_int(request.args.get("limit"), PAGE_SIZE)
        try:
            events = storage.events_paginated(user_id, (page - 1) * limit, limit)
            total_events = storage.count_events(user_id)
        except sqlite3.Error as exc:
            logger.error("GetEvents Error: %s", exc)
            return _error(str(exc), 500)
        total_pages = max(1, -(-total_events // limit))
        return _render(
            "events.html",
            {
                "Events": events,
                "CurrentPage": page,
                "TotalPages": total_pages,
                "Limit": limit,
                "TotalEvents": total_events,
                "HasMore": page < total_pages,
                "ActivePage": "events",
                "UserID": user_id,
            },
        )

    @app.route("/api/range-summary")
    def range_summary():
        user_id = request.args.get("userid", "")
        start = request.args.get("start", "")
        end = request.args.get("end", "")
        if not user_id:
            return _error("userid missing", 400)
        if not start or not end:
            return _error("missing start or end", 400)
        if not storage.user_exists(user_id):
            return _error("invalid userid", 401)
        try:
            events = storage.events_in_range(user_id, start, end)
        except sqlite3.Error as exc:
            logger.error("GetEventsInRange Error: %s", exc)
            return _error(str(exc), 500)

        result = calculate_range_summary(events)
        page = _positive_int(request.args.get("page"), 1)
        limit = _positive_int(request.args.get("limit"), PAGE_SIZE)
        total_days = len(result.days)
        total_pages = max(1, -(-total_days // limit))
        first = (page - 1) * limit
        days = result.days[first:first + limit]

        return jsonify(
            {
                "total_home_time": format_duration(result.total_home),
                "total_office_time": format_duration(result.total_office),
                "total_outside_time": format_duration(result.total_outside),
                "total_commute_time": format_duration(result.total_commute),
                "days": [day.to_dict() for day in days],
                "current_page": page,
                "total_pages": total_pages,
                "total_items": total_days,
                "limit": limit,
            }
        )

    @app.route("/api/today-summary")
    def today_summary():
        user_id = request.args.get("userid", "")
        if not user_id:
            return _error("userid missing", 400)
        if not storage.user_exists(user_id):
            return _error("invalid userid", 401)

        now = current_app.config["CLOCK"]()
        try:
            events = storage.events_for_day(user_id, now)
        except sqlite3.Error as exc:
            logger.error("GetEventsForToday Error: %s", exc)
            return _error(str(exc), 500)

        # A day without an event at midnight inherits the place held before it.
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if not events or events[0].timestamp > start_of_today:
            previous = storage.latest_event(user_id, start_of_today)
            if previous is not None:
                events.insert(0, Event(user_id=user_id, place=previous.place, timestamp=start_of_today))

        return jsonify(calculate_today_summary(events, now).to_dict())

    @app.route("/dashboard")
    def dashboard():
        user_id = _request_user()
        user = storage.get_user(user_id) if user_id else None
        return _render(
            "dashboard.html",
            {"ActivePage": "dashboard", "UserName": user.name if user else ""},
        )

    @app.route("/insights")
    def insights():
        return _render("insights.html", {"ActivePage": "insights"})

    return app


def main(argv: list[str] | None = None) -> None:
    """Start the web server."""
    parser = argparse.ArgumentParser(description="Serve the place log web application.")
    parser.add_argument("--db", default="events.db", help="path of the SQLite database")
    parser.add_argument("--templates", default="templates", help="directory holding the page templates")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    _zone()
    app = create_app(Storage(connect(args.db)), args.templates)
    logger.info("Server running on :%d", args.port)
    app.run(host=args.host, port=args.port)