from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from venue_calendar.api.routes._params import parse_date_param
from venue_calendar.core.deps import get_db
from venue_calendar.core.errors import InvalidInput
from venue_calendar.schemas.history import HistoryAction, HistoryEntryOut
from venue_calendar.services.history_service import venue_history

router = APIRouter()


# No 404 for unknown ids: history is still readable after the venue is deleted
@router.get("/{venue_id}/history", response_model=list[HistoryEntryOut])
def read_history(
    venue_id: str,
    action: str | None = None,
    since: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    try:
        action_filter = HistoryAction(action) if action else None
    except ValueError:
        raise InvalidInput(f"Unknown action: {action}")
    since_date = parse_date_param(since, "since") if since else None
    return venue_history(db, venue_id=venue_id, action=action_filter, since=since_date, limit=limit)
