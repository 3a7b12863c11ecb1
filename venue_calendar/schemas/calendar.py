from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from venue_calendar.schemas.schedule import CollaborationOffer

BLOCKED_REASON = "Unavailable time set by venue owner"


class CalendarDay(BaseModel):
    date: date
    status: Literal["blocked", "available"]
    collaboration_types: list[CollaborationOffer] = Field(default_factory=list)
    source: Literal["blocked_time", "collaboration_rule"]
    blocked_reason: str | None = None
    # which rule produced the entry; an empty override and "no rule" differ only here
    rule: Literal["blocked", "date_override", "weekly_default", "none"]


class CalendarResponse(BaseModel):
    success: bool = True
    venue_id: str
    start_date: date
    end_date: date
    calendar_data: list[CalendarDay]


class VenueAvailabilityCheck(BaseModel):
    available_venue_ids: list[str]
    unavailable_venue_ids: list[str]
