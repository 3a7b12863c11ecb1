from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable
from zoneinfo import ZoneInfo

from venue_calendar.schemas.blocked_time import BlockedInterval


def daterange(start: date, end: date):
    """Yield calendar days from start to end inclusive.

    Steps by calendar day, so DST changes never skip or repeat a date.
    """
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)


def to_local(ts: datetime, tz: ZoneInfo) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz)


def merge_blocked_dates(intervals: Iterable[BlockedInterval], tz: ZoneInfo) -> set[date]:
    """Collapse blocked intervals into the set of venue-local dates they touch.

    A date is blocked when the closed interval [start, end] reaches any instant
    of that day. Overlapping and multi-day intervals are fine; intervals outside
    the caller's range just add dates nobody looks up.
    """
    blocked: set[date] = set()
    for interval in intervals:
        start = to_local(interval.start, tz)
        end = to_local(interval.end, tz)
        if end < start:
            start, end = end, start
        blocked.update(daterange(start.date(), end.date()))
    return blocked
