"""Week bucketing: fixed 604800-second windows, integer seconds only."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

SECONDS_PER_WEEK = 7 * 24 * 60 * 60
DEFAULT_HORIZON_WEEKS = 52


def to_timestamp(value: datetime) -> int:
    """Unix seconds for a datetime. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() // 1)


def bucket_of(timestamp: int, anchor: int = 0) -> int:
    """Start of the week bucket holding timestamp, on the grid that passes through anchor."""
    return timestamp - ((timestamp - anchor) % SECONDS_PER_WEEK)


def current_week(now: datetime, anchor: int = 0) -> int:
    return bucket_of(to_timestamp(now), anchor)


def horizon_weeks() -> int:
    raw = os.getenv("GITSIGNAL_HORIZON_WEEKS", "").strip()
    if not raw:
        return DEFAULT_HORIZON_WEEKS
    try:
        return max(1, int(raw))
    except ValueError:
        return DEFAULT_HORIZON_WEEKS


def recency_horizon(now: datetime, weeks: int | None = None) -> datetime:
    if weeks is None:
        weeks = horizon_weeks()
    return now - timedelta(seconds=weeks * SECONDS_PER_WEEK)


def iso_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def week_label(week: int) -> str:
    """Short chart label for a bucket start, e.g. 'Jan 5'."""
    start = datetime.fromtimestamp(week, tz=timezone.utc)
    return f"{start.strftime('%b')} {start.day}"
