from __future__ import annotations

from datetime import date, datetime, time

from venue_calendar.core.errors import InvalidInput


def parse_date_param(value: str | None, name: str) -> date:
    """Accept YYYY-MM-DD or a full ISO timestamp; only the calendar date is kept."""
    if not value:
        raise InvalidInput("start_date and end_date are required")
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidInput(f"{name} must be an ISO date (YYYY-MM-DD)")


def parse_time_param(value: str | None, name: str) -> time | None:
    """Optional HH:MM[:SS] wall-clock time."""
    if not value:
        return None
    try:
        return time.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f"{name} must be a time (HH:MM)")
