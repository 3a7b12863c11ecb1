from __future__ import annotations

import uuid
from datetime import time

from sqlalchemy import ForeignKey, Integer, JSON, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from venue_calendar.db.base import Base
from venue_calendar.models._mixins import TimestampMixin


class VenueBusinessHours(Base, TimestampMixin):
    __tablename__ = "venue_business_hours"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    venue_id: Mapped[str] = mapped_column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)

    # [0..6], 0 = Sunday
    days_of_week: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    # Order the entries were submitted in
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    venue = relationship("Venue", back_populates="business_hours")
