from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Any

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from venue_calendar.core.errors import UpstreamUnavailable
from venue_calendar.models.venue_history import VenueHistoryEntry
from venue_calendar.schemas.history import HistoryAction
from venue_calendar.schemas.schedule import CollaborationOffer, ScheduleDocument
from venue_calendar.services.blocked_time_service import as_utc
from venue_calendar.services.storage import commit

logger = logging.getLogger(__name__)


def _offers(offers: list[CollaborationOffer] | None) -> list[dict] | None:
    if offers is None:
        return None
    return [o.model_dump(mode="json", exclude_none=True) for o in offers]


def _changed_keys(before: dict[str, list[CollaborationOffer]], after: dict[str, list[CollaborationOffer]]) -> list[str]:
    return sorted(k for k in before.keys() & after.keys() if _offers(before[k]) != _offers(after[k]))


def schedule_diff(before: ScheduleDocument, after: ScheduleDocument) -> dict[str, Any]:
    """Both documents plus which weekdays and override dates moved.

    A weekday that goes from absent to an empty list counts as changed: the
    calendar reports it as weekly_default instead of none.
    """
    weekdays = before.default_weekly.keys() | after.default_weekly.keys()
    return {
        "before": before.model_dump(mode="json", exclude_none=True),
        "after": after.model_dump(mode="json", exclude_none=True),
        "weekdays_changed": sorted(
            k for k in weekdays if _offers(before.default_weekly.get(k)) != _offers(after.default_weekly.get(k))
        ),
        "overrides_added": sorted(after.date_overrides.keys() - before.date_overrides.keys()),
        "overrides_removed": sorted(before.date_overrides.keys() - after.date_overrides.keys()),
        "overrides_changed": _changed_keys(before.date_overrides, after.date_overrides),
    }


def block_bounds(block) -> dict[str, Any]:
    """UTC bounds and reason of a blocked interval row or snapshot."""
    return {
        "start": as_utc(block.start_time).isoformat(),
        "end": as_utc(block.end_time).isoformat(),
        "reason": block.reason,
    }


def record_change(
    db: Session,
    *,
    venue_id: str,
    action: HistoryAction,
    summary: str,
    changes: dict[str, Any] | None = None,
    request: Request | None = None,
) -> VenueHistoryEntry:
    entry = VenueHistoryEntry(
        venue_id=venue_id,
        action=action.value,
        summary=summary,
        changes=changes,
        client_ip=request.client.host if request is not None and request.client else "",
    )
    db.add(entry)
    commit(db, "Record venue history")
    logger.info("Venue %s: %s", venue_id, summary)
    return entry


def venue_history(
    db: Session,
    *,
    venue_id: str,
    action: HistoryAction | None = None,
    since: date | None = None,
    limit: int = 100,
) -> list[VenueHistoryEntry]:
    """Newest first. since is a UTC calendar date."""
    q = select(VenueHistoryEntry).where(VenueHistoryEntry.venue_id == venue_id)
    if action is not None:
        q = q.where(VenueHistoryEntry.action == action.value)
    if since is not None:
        q = q.where(VenueHistoryEntry.created_at >= datetime.combine(since, time.min, tzinfo=timezone.utc))
    q = q.order_by(VenueHistoryEntry.created_at.desc()).limit(limit)
    try:
        return db.execute(q).scalars().all()
    except OperationalError as exc:
        logger.warning("Fetching history for venue %s failed: %s", venue_id, exc)
        raise UpstreamUnavailable("Failed to fetch venue history") from exc
