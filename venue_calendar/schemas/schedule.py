from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class CollaborationType(str, Enum):
    OPEN_VENUE = "open_venue"
    FLAT = "flat"
    MINIMUM_SPEND = "minimum_spend"
    NO_MINIMUM_SPEND = "no_minimum_spend"
    REVENUE_SHARE = "revenue_share"

    @property
    def label(self) -> str:
        return COLLABORATION_TYPE_LABELS[self]


COLLABORATION_TYPE_LABELS = {
    CollaborationType.OPEN_VENUE: "Open Space",
    CollaborationType.FLAT: "Flat Fee",
    CollaborationType.MINIMUM_SPEND: "Minimum Spend",
    CollaborationType.NO_MINIMUM_SPEND: "No Minimum Spend",
    CollaborationType.REVENUE_SHARE: "Revenue Share",
}

# Spellings found in older stored schedules
COLLABORATION_TYPE_ALIASES = {
    "open_space": CollaborationType.OPEN_VENUE,
    "openVenue": CollaborationType.OPEN_VENUE,
    "openSpace": CollaborationType.OPEN_VENUE,
    "minimumSpend": CollaborationType.MINIMUM_SPEND,
    "noMinimumSpend": CollaborationType.NO_MINIMUM_SPEND,
    "revenueShare": CollaborationType.REVENUE_SHARE,
}

# Weekly keys use 0 = Sunday ... 6 = Saturday.
WEEKDAY_KEYS = tuple(str(i) for i in range(7))


def sunday_weekday(d: date) -> int:
    """Day-of-week index with Sunday as 0 (Python's weekday() starts at Monday)."""
    return d.isoweekday() % 7


class CollaborationOffer(BaseModel):
    type: CollaborationType
    amount: float = Field(default=0, ge=0, allow_inf_nan=False)
    description: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        if isinstance(v, str) and v in COLLABORATION_TYPE_ALIASES:
            return COLLABORATION_TYPE_ALIASES[v]
        return v


class ScheduleDocument(BaseModel):
    """A venue's recurring weekly offers plus one-off date overrides.

    An override replaces the weekly entry for its date, it never merges with it.
    """

    default_weekly: dict[str, list[CollaborationOffer]] = Field(default_factory=dict)
    date_overrides: dict[str, list[CollaborationOffer]] = Field(default_factory=dict)

    @field_validator("default_weekly", mode="before")
    @classmethod
    def _weekday_keys(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            return v
        out = {}
        for key, offers in v.items():
            k = str(key).strip()
            if k not in WEEKDAY_KEYS:
                raise ValueError(f"weekday key must be 0-6 (0 = Sunday), got {key!r}")
            out[k] = offers
        return out

    @field_validator("date_overrides", mode="before")
    @classmethod
    def _date_keys(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            return v
        out = {}
        for key, offers in v.items():
            try:
                k = date.fromisoformat(str(key)).isoformat()
            except ValueError:
                raise ValueError(f"override key must be an ISO date (YYYY-MM-DD), got {key!r}")
            out[k] = offers
        return out

    def weekly_offers(self, d: date) -> list[CollaborationOffer] | None:
        return self.default_weekly.get(str(sunday_weekday(d)))

    def override_offers(self, d: date) -> list[CollaborationOffer] | None:
        return self.date_overrides.get(d.isoformat())


class ScheduleResponse(BaseModel):
    success: bool = True
    venue_id: str
    schedule: ScheduleDocument
