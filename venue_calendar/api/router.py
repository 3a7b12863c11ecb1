from __future__ import annotations

from fastapi import APIRouter

from venue_calendar.api.routes import blocked_times, business_hours, calendar, history, schedule, venues

api_router = APIRouter()

api_router.include_router(venues.router, prefix="/venues", tags=["venues"])
api_router.include_router(schedule.router, prefix="/venues", tags=["collaboration-schedule"])
api_router.include_router(business_hours.router, prefix="/venues", tags=["business-hours"])
api_router.include_router(calendar.router, prefix="/venues", tags=["availability-calendar"])
api_router.include_router(blocked_times.router, prefix="/venues", tags=["blocked-times"])
api_router.include_router(history.router, prefix="/venues", tags=["history"])
