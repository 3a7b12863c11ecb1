from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from venue_calendar.db.base import Base
from venue_calendar.models._mixins import TimestampMixin


class BlockedTime(Base, TimestampMixin):
    __tablename__ = "venue_blocked_times"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    venue_id: Mapped[str] = mapped_column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    reason: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    venue = relationship("Venue", back_populates="blocked_times")
