from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class HistoryAction(str, Enum):
    VENUE_CREATE = "VENUE_CREATE"
    VENUE_UPDATE = "VENUE_UPDATE"
    VENUE_DELETE = "VENUE_DELETE"
    SCHEDULE_REPLACE = "SCHEDULE_REPLACE"
    BUSINESS_HOURS_REPLACE = "BUSINESS_HOURS_REPLACE"
    BLOCKED_TIME_CREATE = "BLOCKED_TIME_CREATE"
    BLOCKED_TIME_BULK = "BLOCKED_TIME_BULK"
    BLOCKED_TIME_DELETE = "BLOCKED_TIME_DELETE"


class HistoryEntryOut(BaseModel):
    id: str
    venue_id: str
    action: HistoryAction
    summary: str
    changes: dict | None
    created_at: datetime

    class Config:
        from_attributes = True
