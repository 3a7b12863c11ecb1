from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from venue_calendar.core.errors import UpstreamUnavailable
from venue_calendar.models.blocked_time import BlockedTime
from venue_calendar.models.venue import Venue
from venue_calendar.schemas.calendar import BLOCKED_REASON, CalendarDay, VenueAvailabilityCheck
from venue_calendar.schemas.schedule import ScheduleDocument
from venue_calendar.services.blocked_dates import daterange, merge_blocked_dates
from venue_calendar.services.blocked_time_service import fetch_blocked_intervals, local_window
from venue_calendar.services.schedule_service import get_venue_or_404, schedule_from_venue, venue_tz

logger = logging.getLogger(__name__)


def resolve_day(schedule: ScheduleDocument, d: date, blocked_dates: set[date]) -> CalendarDay:
    if d in blocked_dates:
        return CalendarDay(
            date=d,
            status="blocked",
            collaboration_types=[],
            source="blocked_time",
            blocked_reason=BLOCKED_REASON,
            rule="blocked",
        )

    # An override wins even when its offer list is empty
    offers = schedule.override_offers(d)
    if offers is not None:
        return CalendarDay(date=d, status="available", collaboration_types=list(offers), source="collaboration_rule", rule="date_override")

    offers = schedule.weekly_offers(d)
    if offers is not None:
        return CalendarDay(date=d, status="available", collaboration_types=list(offers), source="collaboration_rule", rule="weekly_default")

    return CalendarDay(date=d, status="available", collaboration_types=[], source="collaboration_rule", rule="none")


def compute_calendar(schedule: ScheduleDocument, blocked_dates: set[date], range_start: date, range_end: date) -> list[CalendarDay]:
    """One CalendarDay per date in [range_start, range_end], ascending.

    Precedence per day: blocked, then date override, then weekly default, then
    nothing. An inverted range yields an empty list.
    """
    return [resolve_day(schedule, d, blocked_dates) for d in daterange(range_start, range_end)]


def build_venue_calendar(db: Session, *, venue_id: str, start: date, end: date) -> list[CalendarDay]:
    venue = get_venue_or_404(db, venue_id)
    tz = venue_tz(venue)
    schedule = schedule_from_venue(venue)

    intervals = fetch_blocked_intervals(db, venue_id=venue.id, start=start, end=end, tz=tz)
    blocked = merge_blocked_dates(intervals, tz)

    days = compute_calendar(schedule, blocked, start, end)
    logger.debug("Calendar for venue %s %s..%s: %d days, %d blocked", venue.id, start, end, len(days), len(blocked))
    return days


def _window(start: date, end: date, start_time: time | None, end_time: time | None, tz: ZoneInfo) -> tuple[datetime, datetime]:
    start_at, end_at = local_window(start, end, tz)
    if start_time is not None:
        start_at = datetime.combine(start, start_time).replace(tzinfo=tz).astimezone(timezone.utc)
    if end_time is not None:
        end_at = datetime.combine(end, end_time).replace(tzinfo=tz).astimezone(timezone.utc)
    return start_at, end_at


def find_available_venues(
    db: Session,
    *,
    start: date,
    end: date,
    start_time: time | None = None,
    end_time: time | None = None,
) -> VenueAvailabilityCheck:
    """Split active venues by whether any blocked interval overlaps the window.

    Dates and times are read in each venue's own timezone, the same way the
    availability calendar reads them, so one overlap query runs per timezone.
    """
    try:
        venues = db.execute(select(Venue).where(Venue.active == True).order_by(Venue.name)).scalars().all()

        by_tz: dict[str, list[str]] = defaultdict(list)
        zones: dict[str, ZoneInfo] = {}
        for venue in venues:
            tz = venue_tz(venue)
            by_tz[tz.key].append(venue.id)
            zones[tz.key] = tz

        busy: set[str] = set()
        for key, venue_ids in by_tz.items():
            start_at, end_at = _window(start, end, start_time, end_time, zones[key])
            busy.update(
                db.execute(
                    select(BlockedTime.venue_id)
                    .where(BlockedTime.venue_id.in_(venue_ids))
                    .where(BlockedTime.start_time < end_at)
                    .where(BlockedTime.end_time >= start_at)
                    .distinct()
                ).scalars().all()
            )
    except OperationalError as exc:
        logger.warning("Venue availability lookup failed: %s", exc)
        raise UpstreamUnavailable("Failed to check venue availability") from exc

    return VenueAvailabilityCheck(
        available_venue_ids=[v.id for v in venues if v.id not in busy],
        unavailable_venue_ids=[v.id for v in venues if v.id in busy],
    )
