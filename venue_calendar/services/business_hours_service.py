from __future__ import annotations

import logging

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from venue_calendar.core.errors import UpstreamUnavailable
from venue_calendar.models.business_hours import VenueBusinessHours
from venue_calendar.schemas.business_hours import BusinessHours
from venue_calendar.services.schedule_service import get_venue_or_404
from venue_calendar.services.storage import commit

logger = logging.getLogger(__name__)


def get_business_hours(db: Session, venue_id: str) -> list[BusinessHours]:
    venue = get_venue_or_404(db, venue_id)
    try:
        rows = list(venue.business_hours)
    except OperationalError as exc:
        logger.warning("Fetching business hours for venue %s failed: %s", venue_id, exc)
        raise UpstreamUnavailable("Failed to fetch business hours") from exc
    return [BusinessHours.model_validate(row) for row in rows]


def replace_business_hours(db: Session, venue_id: str, hours: list[BusinessHours]) -> list[BusinessHours]:
    """Drop every stored entry for the venue and store hours in their place."""
    venue = get_venue_or_404(db, venue_id)
    venue.business_hours = [
        VenueBusinessHours(days_of_week=h.days_of_week, start_time=h.start_time, end_time=h.end_time, position=i)
        for i, h in enumerate(hours)
    ]
    commit(db, "Update business hours")
    db.refresh(venue)

    logger.info("Replaced business hours for venue %s (%d entries)", venue_id, len(hours))
    return [BusinessHours.model_validate(row) for row in venue.business_hours]
