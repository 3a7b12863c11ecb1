from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from venue_calendar.core.deps import get_db
from venue_calendar.core.errors import InvalidInput
from venue_calendar.schemas.schedule import ScheduleDocument, ScheduleResponse
from venue_calendar.schemas.history import HistoryAction
from venue_calendar.services.history_service import record_change, schedule_diff
from venue_calendar.services.schedule_service import get_schedule, put_schedule

router = APIRouter()


@router.get("/{venue_id}/collaboration-schedule", response_model=ScheduleResponse, response_model_exclude_none=True)
def read_schedule(venue_id: str, db: Session = Depends(get_db)):
    return ScheduleResponse(venue_id=venue_id, schedule=get_schedule(db, venue_id))


@router.put("/{venue_id}/collaboration-schedule", response_model=ScheduleResponse, response_model_exclude_none=True)
def replace_schedule(venue_id: str, request: Request, payload: Any = Body(default=None), db: Session = Depends(get_db)):
    raw = payload.get("schedule") if isinstance(payload, dict) else None
    if not isinstance(raw, dict):
        raise InvalidInput("Invalid schedule format")
    try:
        schedule = ScheduleDocument.model_validate(raw)
    except ValidationError as exc:
        raise InvalidInput(f"Invalid schedule format: {exc.errors(include_url=False)[0]['msg']}")

    before = get_schedule(db, venue_id)
    stored = put_schedule(db, venue_id, schedule)

    record_change(
        db,
        venue_id=venue_id,
        action=HistoryAction.SCHEDULE_REPLACE,
        summary="Replaced collaboration schedule",
        changes=schedule_diff(before, stored),
        request=request,
    )
    return ScheduleResponse(venue_id=venue_id, schedule=stored)
