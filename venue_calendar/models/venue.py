from __future__ import annotations

import uuid

from sqlalchemy import Boolean, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from venue_calendar.db.base import Base
from venue_calendar.models._mixins import TimestampMixin


class Venue(Base, TimestampMixin):
    __tablename__ = "venues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # IANA name; falls back to settings.timezone
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # {"default_weekly": {...}, "date_overrides": {...}}, replaced wholesale
    collaboration_schedule: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    blocked_times = relationship("BlockedTime", back_populates="venue", cascade="all, delete-orphan")
    business_hours = relationship(
        "VenueBusinessHours", back_populates="venue", cascade="all, delete-orphan", order_by="VenueBusinessHours.position"
    )
