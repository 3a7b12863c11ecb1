from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from venue_calendar.api.routes._params import parse_date_param
from venue_calendar.core.config import get_settings
from venue_calendar.core.deps import get_db
from venue_calendar.core.errors import InvalidInput
from venue_calendar.schemas.calendar import CalendarResponse
from venue_calendar.services.availability_service import build_venue_calendar

router = APIRouter()


@router.get("/{venue_id}/availability-calendar", response_model=CalendarResponse, response_model_exclude_none=True)
def availability_calendar(
    venue_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    start = parse_date_param(start_date, "start_date")
    end = parse_date_param(end_date, "end_date")

    max_days = get_settings().calendar_max_days
    if (end - start).days + 1 > max_days:
        raise InvalidInput(f"Date range must not exceed {max_days} days")

    days = build_venue_calendar(db, venue_id=venue_id, start=start, end=end)
    return CalendarResponse(venue_id=venue_id, start_date=start, end_date=end, calendar_data=days)
