from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.orm import Session

from venue_calendar.core.config import get_settings
from venue_calendar.core.errors import NotFound
from venue_calendar.models.venue import Venue
from venue_calendar.schemas.schedule import ScheduleDocument
from venue_calendar.services.storage import commit, get_row

logger = logging.getLogger(__name__)


def get_venue_or_404(db: Session, venue_id: str) -> Venue:
    venue = get_row(db, Venue, venue_id, "venue")
    if venue is None:
        raise NotFound("Venue not found")
    return venue


def venue_tz(venue: Venue) -> ZoneInfo:
    name = venue.timezone or get_settings().timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Venue %s has unknown timezone %r, using UTC", venue.id, name)
        return ZoneInfo("UTC")


def schedule_from_venue(venue: Venue) -> ScheduleDocument:
    """The stored schedule, or an empty one when the venue never set it."""
    if not venue.collaboration_schedule:
        return ScheduleDocument()
    return ScheduleDocument.model_validate(venue.collaboration_schedule)


def get_schedule(db: Session, venue_id: str) -> ScheduleDocument:
    return schedule_from_venue(get_venue_or_404(db, venue_id))


def put_schedule(db: Session, venue_id: str, schedule: ScheduleDocument) -> ScheduleDocument:
    """Replace the venue's schedule wholesale. Concurrent writers: last one wins."""
    venue = get_venue_or_404(db, venue_id)
    venue.collaboration_schedule = schedule.model_dump(mode="json", exclude_none=True)
    commit(db, "Update collaboration schedule")
    db.refresh(venue)

    logger.info(
        "Replaced collaboration schedule for venue %s (%d weekdays, %d overrides)",
        venue_id,
        len(schedule.default_weekly),
        len(schedule.date_overrides),
    )
    return schedule_from_venue(venue)
