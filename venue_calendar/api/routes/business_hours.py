from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from venue_calendar.core.deps import get_db
from venue_calendar.core.errors import InvalidInput
from venue_calendar.schemas.business_hours import BusinessHoursReplace, BusinessHoursResponse
from venue_calendar.schemas.history import HistoryAction
from venue_calendar.services.business_hours_service import get_business_hours, replace_business_hours
from venue_calendar.services.history_service import record_change

router = APIRouter()


@router.get("/{venue_id}/business-hours", response_model=BusinessHoursResponse)
def read_business_hours(venue_id: str, db: Session = Depends(get_db)):
    return BusinessHoursResponse(venue_id=venue_id, business_hours=get_business_hours(db, venue_id))


@router.post("/{venue_id}/business-hours", response_model=BusinessHoursResponse)
def set_business_hours(venue_id: str, request: Request, payload: Any = Body(default=None), db: Session = Depends(get_db)):
    try:
        body = BusinessHoursReplace.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(f"Invalid business hours: {exc.errors(include_url=False)[0]['msg']}")

    before = get_business_hours(db, venue_id)
    stored = replace_business_hours(db, venue_id, body.business_hours)

    record_change(
        db,
        venue_id=venue_id,
        action=HistoryAction.BUSINESS_HOURS_REPLACE,
        summary="Replaced business hours",
        changes={
            "before": [h.model_dump(mode="json") for h in before],
            "after": [h.model_dump(mode="json") for h in stored],
        },
        request=request,
    )
    return BusinessHoursResponse(venue_id=venue_id, business_hours=stored)
