from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from venue_calendar.db.base import Base


class VenueHistoryEntry(Base):
    """One change to a venue's calendar data. Entries outlive the venue, so venue_id is not a foreign key."""

    __tablename__ = "venue_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    venue_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    summary: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Shape depends on action; see services/history_service.py
    changes: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    client_ip: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
