from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def day_portion(value: Any) -> str | None:
    """Strip the time-of-day suffix from an upstream ``workoutDay`` value."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    return text.split("T", 1)[0] or None


def parse_workout_date(value: Any) -> date | None:
    if not isinstance(value, str):
        return None
    match = ISO_DATE_RE.match(value)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def next_day(value: date) -> date:
    return value + timedelta(days=1)


def format_ics_date(value: date) -> str:
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def format_ics_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def epoch_millis(value: date) -> int:
    return int(datetime.combine(value, time(), tzinfo=timezone.utc).timestamp() * 1000)


def utc_iso_millis(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")

