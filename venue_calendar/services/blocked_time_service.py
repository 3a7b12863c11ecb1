from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from venue_calendar.core.errors import InvalidInput, NotFound, UpstreamUnavailable
from venue_calendar.models.blocked_time import BlockedTime
from venue_calendar.schemas.blocked_time import BlockedInterval, BlockedTimeOut
from venue_calendar.services.blocked_dates import daterange
from venue_calendar.services.storage import commit, get_row

logger = logging.getLogger(__name__)


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def local_window(start: date, end: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """UTC bounds of the venue-local days start..end, as [start 00:00, end+1 00:00)."""
    start_at = datetime.combine(start, time.min).replace(tzinfo=tz)
    end_at = datetime.combine(end + timedelta(days=1), time.min).replace(tzinfo=tz)
    return start_at.astimezone(timezone.utc), end_at.astimezone(timezone.utc)


def current_month(tz: ZoneInfo) -> tuple[date, date]:
    today = datetime.now(tz).date()
    first = today.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return first, next_first - timedelta(days=1)


def _query_overlapping(db: Session, *, venue_id: str, start_at: datetime, end_at: datetime) -> list[BlockedTime]:
    q = (
        select(BlockedTime)
        .where(BlockedTime.venue_id == venue_id)
        .where(BlockedTime.start_time < end_at)
        .where(BlockedTime.end_time >= start_at)
        .order_by(BlockedTime.start_time)
    )
    try:
        return db.execute(q).scalars().all()
    except OperationalError as exc:
        logger.warning("Fetching blocked times for venue %s failed: %s", venue_id, exc)
        raise UpstreamUnavailable("Failed to fetch blocked times") from exc


def list_blocked_times(db: Session, *, venue_id: str, start: date, end: date, tz: ZoneInfo) -> list[BlockedTime]:
    start_at, end_at = local_window(start, end, tz)
    return _query_overlapping(db, venue_id=venue_id, start_at=start_at, end_at=end_at)


def fetch_blocked_intervals(db: Session, *, venue_id: str, start: date, end: date, tz: ZoneInfo) -> list[BlockedInterval]:
    rows = list_blocked_times(db, venue_id=venue_id, start=start, end=end, tz=tz)
    return [BlockedInterval(start=r.start_time, end=r.end_time) for r in rows]


def create_blocked_time(db: Session, *, venue_id: str, start_time: datetime, end_time: datetime, reason: str = "") -> BlockedTime:
    start_at = as_utc(start_time)
    end_at = as_utc(end_time)
    # start == end is a zero-length block and still blocks its day
    if end_at < start_at:
        raise InvalidInput("end_time must not be before start_time")

    b = BlockedTime(venue_id=venue_id, start_time=start_at, end_time=end_at, reason=reason)
    db.add(b)
    commit(db, "Create blocked time")
    db.refresh(b)
    return b


def create_blocked_times_bulk(
    db: Session,
    *,
    venue_id: str,
    date_from: date,
    date_to: date,
    start_time: time,
    end_time: time,
    reason: str,
    tz: ZoneInfo,
) -> int:
    """One blocked interval per local day in date_from..date_to."""
    if date_from > date_to:
        raise InvalidInput("Invalid date range")
    if start_time >= end_time:
        raise InvalidInput("Invalid time range")

    created = 0
    for d in daterange(date_from, date_to):
        start_at = datetime.combine(d, start_time).replace(tzinfo=tz).astimezone(timezone.utc)
        end_at = datetime.combine(d, end_time).replace(tzinfo=tz).astimezone(timezone.utc)
        db.add(BlockedTime(venue_id=venue_id, start_time=start_at, end_time=end_at, reason=reason))
        created += 1

    commit(db, "Create blocked times")
    return created


def delete_blocked_time(db: Session, *, venue_id: str, block_id: str) -> BlockedTimeOut:
    """Delete one interval and return what it was."""
    b = get_row(db, BlockedTime, block_id, "blocked time")
    if b is None or b.venue_id != venue_id:
        raise NotFound("Blocked time not found")
    removed = BlockedTimeOut.model_validate(b)
    db.delete(b)
    commit(db, "Delete blocked time")
    return removed
