from __future__ import annotations

from datetime import time

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class BusinessHours(BaseModel):
    """Opening hours shared by a set of weekdays (0 = Sunday)."""

    days_of_week: list[int] = Field(min_length=1)
    start_time: time
    end_time: time

    @field_validator("days_of_week")
    @classmethod
    def _weekdays(cls, v: list[int]) -> list[int]:
        for d in v:
            if not 0 <= d <= 6:
                raise ValueError(f"days_of_week entries must be 0-6 (0 = Sunday), got {d}")
        return sorted(set(v))

    @field_validator("end_time")
    @classmethod
    def _after_start(cls, end_time: time, info: ValidationInfo) -> time:
        start_time = info.data.get("start_time")
        if start_time is not None and end_time <= start_time:
            raise ValueError("end_time must be after start_time")
        return end_time

    class Config:
        from_attributes = True


class BusinessHoursReplace(BaseModel):
    business_hours: list[BusinessHours]


class BusinessHoursResponse(BaseModel):
    venue_id: str
    business_hours: list[BusinessHours]
