from __future__ import annotations

from pydantic import BaseModel, Field


class VenueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    timezone: str | None = Field(default=None, max_length=64)
    active: bool = True


class VenueUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    timezone: str | None = Field(default=None, max_length=64)
    active: bool | None = None


class VenueOut(BaseModel):
    id: str
    name: str
    timezone: str | None
    active: bool

    class Config:
        from_attributes = True
