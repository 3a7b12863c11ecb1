from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from venue_calendar.api.routes._params import parse_date_param
from venue_calendar.core.deps import get_db
from venue_calendar.schemas.blocked_time import BlockedTimeCreate, BlockedTimeOut, BulkBlockedTimeCreate
from venue_calendar.schemas.history import HistoryAction
from venue_calendar.services.blocked_time_service import (
    create_blocked_time,
    create_blocked_times_bulk,
    current_month,
    delete_blocked_time,
    list_blocked_times,
)
from venue_calendar.services.history_service import block_bounds, record_change
from venue_calendar.services.schedule_service import get_venue_or_404, venue_tz

router = APIRouter()


@router.get("/{venue_id}/blocked-times", response_model=list[BlockedTimeOut])
def list_blocks(
    venue_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    venue = get_venue_or_404(db, venue_id)
    tz = venue_tz(venue)
    month_start, month_end = current_month(tz)
    start = parse_date_param(start_date, "start_date") if start_date else month_start
    end = parse_date_param(end_date, "end_date") if end_date else month_end
    return list_blocked_times(db, venue_id=venue.id, start=start, end=end, tz=tz)


@router.post("/{venue_id}/blocked-times", response_model=BlockedTimeOut)
def create_block(venue_id: str, payload: BlockedTimeCreate, request: Request, db: Session = Depends(get_db)):
    venue = get_venue_or_404(db, venue_id)
    b = create_blocked_time(db, venue_id=venue.id, start_time=payload.start_time, end_time=payload.end_time, reason=payload.reason)

    record_change(db, venue_id=venue.id, action=HistoryAction.BLOCKED_TIME_CREATE, summary="Blocked time added", changes={"id": b.id, **block_bounds(b)}, request=request)
    return b


@router.post("/{venue_id}/blocked-times/bulk")
def create_blocks_bulk(venue_id: str, payload: BulkBlockedTimeCreate, request: Request, db: Session = Depends(get_db)):
    venue = get_venue_or_404(db, venue_id)
    tz = venue_tz(venue)
    created = create_blocked_times_bulk(
        db,
        venue_id=venue.id,
        date_from=payload.date_from,
        date_to=payload.date_to,
        start_time=payload.start_time,
        end_time=payload.end_time,
        reason=payload.reason,
        tz=tz,
    )

    record_change(
        db,
        venue_id=venue.id,
        action=HistoryAction.BLOCKED_TIME_BULK,
        summary=f"Blocked {created} days",
        changes={
            "count": created,
            "from": payload.date_from.isoformat(),
            "to": payload.date_to.isoformat(),
            "daily_start": payload.start_time.isoformat(),
            "daily_end": payload.end_time.isoformat(),
            "timezone": tz.key,
            "reason": payload.reason,
        },
        request=request,
    )

    return {"ok": True, "created": created}


@router.delete("/{venue_id}/blocked-times/{block_id}")
def delete_block(venue_id: str, block_id: str, request: Request, db: Session = Depends(get_db)):
    removed = delete_blocked_time(db, venue_id=venue_id, block_id=block_id)

    record_change(db, venue_id=venue_id, action=HistoryAction.BLOCKED_TIME_DELETE, summary="Blocked time removed", changes={"id": block_id, **block_bounds(removed)}, request=request)
    return {"ok": True}
