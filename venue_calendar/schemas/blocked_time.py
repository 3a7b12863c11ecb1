from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, Field


class BlockedInterval(BaseModel):
    """An absolute unavailability window, as consumed by the date merger."""

    start: datetime
    end: datetime


class BlockedTimeCreate(BaseModel):
    start_time: datetime
    end_time: datetime
    reason: str = Field(default="", max_length=255)


class BulkBlockedTimeCreate(BaseModel):
    date_from: date
    date_to: date
    start_time: time
    end_time: time
    reason: str = Field(default="", max_length=255)


class BlockedTimeOut(BaseModel):
    id: str
    venue_id: str
    start_time: datetime
    end_time: datetime
    reason: str

    class Config:
        from_attributes = True
