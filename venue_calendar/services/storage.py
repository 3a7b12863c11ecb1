from __future__ import annotations

import logging

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from venue_calendar.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


def commit(db: Session, what: str) -> None:
    """Commit, turning a lost database into a 503 instead of a 500."""
    try:
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.warning("%s failed: %s", what, exc)
        raise UpstreamUnavailable(f"Failed to {what.lower()}") from exc


def get_row(db: Session, model, ident: str, what: str):
    try:
        return db.get(model, ident)
    except OperationalError as exc:
        logger.warning("Fetching %s %s failed: %s", what, ident, exc)
        raise UpstreamUnavailable(f"Failed to fetch {what}") from exc
