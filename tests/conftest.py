from __future__ import annotations

import os

# Settings are read on first import; point them at SQLite before that happens.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import venue_calendar.models  # noqa: F401
from venue_calendar.core.deps import get_db
from venue_calendar.db.base import Base


@pytest.fixture()
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(session_factory):
    from venue_calendar.main import app

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_venue(client):
    def _mk(name: str = "Loft", timezone: str | None = None) -> str:
        body = {"name": name}
        if timezone:
            body["timezone"] = timezone
        r = client.post("/api/venues", json=body)
        assert r.status_code == 200, r.text
        return r.json()["id"]
    return _mk
