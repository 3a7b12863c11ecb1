"""
FastAPI app entrypoint.

Serves venue collaboration schedules, blocked times and the per-day
availability calendar derived from them.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from venue_calendar.api.router import api_router
from venue_calendar.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
def health():
    return {"status": "ok"}


logger.info("%s ready (env=%s, default timezone=%s)", settings.app_name, settings.environment, settings.timezone)
