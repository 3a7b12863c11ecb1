# Import all models so that SQLAlchemy registers them for metadata.create_all
from venue_calendar.models.venue import Venue
from venue_calendar.models.blocked_time import BlockedTime
from venue_calendar.models.business_hours import VenueBusinessHours
from venue_calendar.models.venue_history import VenueHistoryEntry

__all__ = [
    "Venue",
    "BlockedTime",
    "VenueBusinessHours",
    "VenueHistoryEntry",
]
