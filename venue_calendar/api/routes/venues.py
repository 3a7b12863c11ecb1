from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from venue_calendar.api.routes._params import parse_date_param, parse_time_param
from venue_calendar.core.deps import get_db
from venue_calendar.core.errors import InvalidInput, UpstreamUnavailable
from venue_calendar.models.venue import Venue
from venue_calendar.schemas.calendar import VenueAvailabilityCheck
from venue_calendar.schemas.history import HistoryAction
from venue_calendar.schemas.venue import VenueCreate, VenueOut, VenueUpdate
from venue_calendar.services.availability_service import find_available_venues
from venue_calendar.services.history_service import record_change
from venue_calendar.services.schedule_service import get_venue_or_404
from venue_calendar.services.storage import commit

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_timezone(name: str | None) -> None:
    if name is None:
        return
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidInput(f"Unknown timezone: {name}")


@router.get("", response_model=list[VenueOut])
def list_venues(db: Session = Depends(get_db)):
    try:
        return db.execute(select(Venue).order_by(Venue.name)).scalars().all()
    except OperationalError as exc:
        logger.warning("Listing venues failed: %s", exc)
        raise UpstreamUnavailable("Failed to fetch venues") from exc


@router.post("", response_model=VenueOut)
def create_venue(payload: VenueCreate, request: Request, db: Session = Depends(get_db)):
    _check_timezone(payload.timezone)
    v = Venue(name=payload.name, timezone=payload.timezone, active=payload.active)
    db.add(v)
    commit(db, "Create venue")
    db.refresh(v)

    record_change(
        db,
        venue_id=v.id,
        action=HistoryAction.VENUE_CREATE,
        summary=f"Created venue {v.name}",
        changes={"after": {"name": v.name, "timezone": v.timezone, "active": v.active}},
        request=request,
    )
    return v


# Registered before /{venue_id} so "availability" is not taken for an id
@router.get("/availability", response_model=VenueAvailabilityCheck)
def check_availability(
    start_date: str | None = None,
    end_date: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
    db: Session = Depends(get_db),
):
    start = parse_date_param(start_date, "start_date")
    end = parse_date_param(end_date, "end_date")
    if end < start:
        raise InvalidInput("end_date must not be before start_date")
    return find_available_venues(
        db,
        start=start,
        end=end,
        start_time=parse_time_param(start_time, "start_time"),
        end_time=parse_time_param(end_time, "end_time"),
    )


@router.get("/{venue_id}", response_model=VenueOut)
def get_venue(venue_id: str, db: Session = Depends(get_db)):
    return get_venue_or_404(db, venue_id)


@router.patch("/{venue_id}", response_model=VenueOut)
def update_venue(venue_id: str, payload: VenueUpdate, request: Request, db: Session = Depends(get_db)):
    v = get_venue_or_404(db, venue_id)
    data = payload.model_dump(exclude_unset=True)
    _check_timezone(data.get("timezone"))
    before = {k: getattr(v, k) for k in data}
    for k, val in data.items():
        setattr(v, k, val)
    commit(db, "Update venue")
    db.refresh(v)

    record_change(
        db,
        venue_id=v.id,
        action=HistoryAction.VENUE_UPDATE,
        summary="Updated venue",
        changes={"before": before, "after": data},
        request=request,
    )
    return v


@router.delete("/{venue_id}")
def delete_venue(venue_id: str, request: Request, db: Session = Depends(get_db)):
    v = get_venue_or_404(db, venue_id)
    name = v.name
    db.delete(v)
    commit(db, "Delete venue")

    record_change(db, venue_id=venue_id, action=HistoryAction.VENUE_DELETE, summary=f"Deleted venue {name}", changes={"name": name}, request=request)
    return {"ok": True}
