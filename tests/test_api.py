from __future__ import annotations

from unittest import mock

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from venue_calendar.core.deps import get_db


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_schedule_defaults_to_empty(client, make_venue):
    vid = make_venue()
    r = client.get(f"/api/venues/{vid}/collaboration-schedule")

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["venue_id"] == vid
    assert body["schedule"] == {"default_weekly": {}, "date_overrides": {}}


def test_put_then_get_schedule(client, make_venue):
    vid = make_venue()
    schedule = {
        "default_weekly": {"1": [{"type": "flat", "amount": 200}]},
        "date_overrides": {"2024-07-04": [{"type": "open_space", "amount": 0, "description": "Holiday"}]},
    }
    r = client.put(f"/api/venues/{vid}/collaboration-schedule", json={"schedule": schedule})
    assert r.status_code == 200, r.text
    stored = r.json()["schedule"]
    assert stored["default_weekly"]["1"] == [{"type": "flat", "amount": 200}]
    assert stored["date_overrides"]["2024-07-04"] == [{"type": "open_venue", "amount": 0, "description": "Holiday"}]

    r = client.get(f"/api/venues/{vid}/collaboration-schedule")
    assert r.json()["schedule"] == stored


def test_put_rejects_non_object_schedule(client, make_venue):
    vid = make_venue()
    for body in ({"schedule": "weekly"}, {"schedule": [1, 2]}, {}, [1, 2]):
        r = client.put(f"/api/venues/{vid}/collaboration-schedule", json=body)
        assert r.status_code == 400, body


def test_put_rejects_malformed_schedule(client, make_venue):
    vid = make_venue()
    r = client.put(f"/api/venues/{vid}/collaboration-schedule", json={"schedule": {"default_weekly": {"9": []}}})
    assert r.status_code == 400


def test_schedule_unknown_venue(client):
    assert client.get("/api/venues/nope/collaboration-schedule").status_code == 404
    r = client.put("/api/venues/nope/collaboration-schedule", json={"schedule": {}})
    assert r.status_code == 404


def test_calendar_requires_dates(client, make_venue):
    vid = make_venue()
    assert client.get(f"/api/venues/{vid}/availability-calendar").status_code == 400
    assert client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-06-10").status_code == 400
    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=junk&end_date=2024-06-10")
    assert r.status_code == 400


def test_calendar_unknown_venue(client):
    r = client.get("/api/venues/nope/availability-calendar?start_date=2024-06-10&end_date=2024-06-12")
    assert r.status_code == 404


def test_calendar_range_cap(client, make_venue):
    vid = make_venue()
    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-01-01&end_date=2025-12-31")
    assert r.status_code == 400


def test_calendar_inverted_range_is_empty(client, make_venue):
    vid = make_venue()
    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-06-12&end_date=2024-06-10")
    assert r.status_code == 200
    assert r.json()["calendar_data"] == []


def test_calendar_merges_blocks_and_schedule(client, make_venue):
    vid = make_venue()
    client.put(
        f"/api/venues/{vid}/collaboration-schedule",
        json={"schedule": {"default_weekly": {"1": [{"type": "flat", "amount": 200}]}, "date_overrides": {"2024-06-13": []}}},
    )
    r = client.post(
        f"/api/venues/{vid}/blocked-times",
        json={"start_time": "2024-06-11T23:00:00Z", "end_time": "2024-06-12T01:00:00Z", "reason": "private party"},
    )
    assert r.status_code == 200, r.text

    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-06-10&end_date=2024-06-14")
    assert r.status_code == 200
    body = r.json()
    assert body["venue_id"] == vid
    assert body["start_date"] == "2024-06-10"
    assert body["end_date"] == "2024-06-14"

    days = {d["date"]: d for d in body["calendar_data"]}
    assert list(days) == ["2024-06-10", "2024-06-11", "2024-06-12", "2024-06-13", "2024-06-14"]

    assert days["2024-06-10"]["status"] == "available"
    assert days["2024-06-10"]["collaboration_types"] == [{"type": "flat", "amount": 200}]
    assert "blocked_reason" not in days["2024-06-10"]

    for blocked in ("2024-06-11", "2024-06-12"):
        assert days[blocked]["status"] == "blocked"
        assert days[blocked]["source"] == "blocked_time"
        assert days[blocked]["blocked_reason"] == "Unavailable time set by venue owner"

    assert days["2024-06-13"]["rule"] == "date_override"
    assert days["2024-06-13"]["collaboration_types"] == []
    assert days["2024-06-14"]["rule"] == "none"


def test_calendar_uses_venue_timezone_across_dst(client, make_venue):
    vid = make_venue(timezone="America/New_York")
    r = client.post(
        f"/api/venues/{vid}/blocked-times/bulk",
        json={"date_from": "2024-03-09", "date_to": "2024-03-11", "start_time": "10:00", "end_time": "12:00"},
    )
    assert r.json() == {"ok": True, "created": 3}

    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-03-08&end_date=2024-03-12")
    statuses = [(d["date"], d["status"]) for d in r.json()["calendar_data"]]
    assert statuses == [
        ("2024-03-08", "available"),
        ("2024-03-09", "blocked"),
        ("2024-03-10", "blocked"),
        ("2024-03-11", "blocked"),
        ("2024-03-12", "available"),
    ]


def test_blocked_time_crud(client, make_venue):
    vid = make_venue()
    r = client.post(
        f"/api/venues/{vid}/blocked-times",
        json={"start_time": "2024-06-10T12:00:00Z", "end_time": "2024-06-10T12:00:00Z"},
    )
    assert r.status_code == 200
    block_id = r.json()["id"]

    r = client.get(f"/api/venues/{vid}/blocked-times?start_date=2024-06-01&end_date=2024-06-30")
    assert [b["id"] for b in r.json()] == [block_id]

    r = client.get(f"/api/venues/{vid}/blocked-times?start_date=2024-07-01&end_date=2024-07-31")
    assert r.json() == []

    assert client.delete(f"/api/venues/{vid}/blocked-times/{block_id}").json() == {"ok": True}
    assert client.delete(f"/api/venues/{vid}/blocked-times/{block_id}").status_code == 404

    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-06-10&end_date=2024-06-10")
    assert r.json()["calendar_data"][0]["status"] == "available"


def test_blocked_time_rejects_inverted_interval(client, make_venue):
    vid = make_venue()
    r = client.post(
        f"/api/venues/{vid}/blocked-times",
        json={"start_time": "2024-06-10T14:00:00Z", "end_time": "2024-06-10T12:00:00Z"},
    )
    assert r.status_code == 400


def test_bulk_rejects_bad_ranges(client, make_venue):
    vid = make_venue()
    r = client.post(
        f"/api/venues/{vid}/blocked-times/bulk",
        json={"date_from": "2024-03-12", "date_to": "2024-03-11", "start_time": "10:00", "end_time": "12:00"},
    )
    assert r.status_code == 400
    r = client.post(
        f"/api/venues/{vid}/blocked-times/bulk",
        json={"date_from": "2024-03-11", "date_to": "2024-03-12", "start_time": "12:00", "end_time": "10:00"},
    )
    assert r.status_code == 400


def test_check_availability(client, make_venue):
    busy = make_venue("A busy venue")
    free = make_venue("B free venue")
    client.post(
        f"/api/venues/{busy}/blocked-times",
        json={"start_time": "2024-06-10T12:00:00Z", "end_time": "2024-06-10T14:00:00Z"},
    )

    r = client.get("/api/venues/availability?start_date=2024-06-10&end_date=2024-06-10")
    assert r.status_code == 200
    assert r.json() == {"available_venue_ids": [free], "unavailable_venue_ids": [busy]}

    r = client.get("/api/venues/availability?start_date=2024-06-10&end_date=2024-06-10&start_time=15:00&end_time=18:00")
    assert r.json() == {"available_venue_ids": [busy, free], "unavailable_venue_ids": []}

    assert client.get("/api/venues/availability").status_code == 400


def test_venue_crud_and_history(client, make_venue):
    vid = make_venue("Rooftop")

    r = client.patch(f"/api/venues/{vid}", json={"timezone": "Europe/Berlin"})
    assert r.json()["timezone"] == "Europe/Berlin"
    assert client.patch(f"/api/venues/{vid}", json={"timezone": "Mars/Olympus"}).status_code == 400

    client.put(f"/api/venues/{vid}/collaboration-schedule", json={"schedule": {}})

    r = client.get(f"/api/venues/{vid}/history")
    assert r.status_code == 200
    actions = {e["action"] for e in r.json()}
    assert actions == {"VENUE_CREATE", "VENUE_UPDATE", "SCHEDULE_REPLACE"}

    (update,) = client.get(f"/api/venues/{vid}/history?action=VENUE_UPDATE").json()
    assert update["changes"] == {"before": {"timezone": None}, "after": {"timezone": "Europe/Berlin"}}

    assert client.delete(f"/api/venues/{vid}").json() == {"ok": True}
    assert client.get(f"/api/venues/{vid}").status_code == 404
    assert all(v["id"] != vid for v in client.get("/api/venues").json())

    # History outlives the venue
    (deleted,) = client.get(f"/api/venues/{vid}/history?action=VENUE_DELETE").json()
    assert deleted["changes"] == {"name": "Rooftop"}


def test_history_records_schedule_changes(client, make_venue):
    vid = make_venue()
    client.put(
        f"/api/venues/{vid}/collaboration-schedule",
        json={"schedule": {"default_weekly": {"1": [{"type": "flat", "amount": 200}]}, "date_overrides": {"2024-07-04": []}}},
    )
    client.put(
        f"/api/venues/{vid}/collaboration-schedule",
        json={"schedule": {"default_weekly": {"1": [{"type": "flat", "amount": 250}], "5": []}, "date_overrides": {"2024-12-24": []}}},
    )

    entries = client.get(f"/api/venues/{vid}/history?action=SCHEDULE_REPLACE").json()
    assert len(entries) == 2
    second = next(e for e in entries if e["changes"]["before"]["default_weekly"])
    changes = second["changes"]
    assert changes["before"]["default_weekly"]["1"] == [{"type": "flat", "amount": 200}]
    assert changes["after"]["default_weekly"]["1"] == [{"type": "flat", "amount": 250}]
    assert changes["weekdays_changed"] == ["1", "5"]
    assert changes["overrides_added"] == ["2024-12-24"]
    assert changes["overrides_removed"] == ["2024-07-04"]
    assert changes["overrides_changed"] == []


def test_history_records_blocked_interval_bounds(client, make_venue):
    vid = make_venue()
    r = client.post(
        f"/api/venues/{vid}/blocked-times",
        json={"start_time": "2024-06-10T12:00:00Z", "end_time": "2024-06-10T14:00:00Z", "reason": "wedding"},
    )
    block_id = r.json()["id"]
    client.delete(f"/api/venues/{vid}/blocked-times/{block_id}")

    expected = {"id": block_id, "start": "2024-06-10T12:00:00+00:00", "end": "2024-06-10T14:00:00+00:00", "reason": "wedding"}
    (created,) = client.get(f"/api/venues/{vid}/history?action=BLOCKED_TIME_CREATE").json()
    (deleted,) = client.get(f"/api/venues/{vid}/history?action=BLOCKED_TIME_DELETE").json()
    assert created["changes"] == expected
    assert deleted["changes"] == expected


def test_history_filters(client, make_venue):
    vid = make_venue()
    assert client.get(f"/api/venues/{vid}/history?action=NOT_A_THING").status_code == 400
    assert client.get(f"/api/venues/{vid}/history?since=yesterday").status_code == 400
    assert client.get(f"/api/venues/{vid}/history?since=2999-01-01").json() == []
    assert len(client.get(f"/api/venues/{vid}/history?since=2000-01-01").json()) == 1


def test_put_rejects_infinite_amount(client, make_venue):
    vid = make_venue()
    r = client.put(
        f"/api/venues/{vid}/collaboration-schedule",
        content='{"schedule": {"default_weekly": {"1": [{"type": "flat", "amount": Infinity}]}}}',
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert client.get(f"/api/venues/{vid}/collaboration-schedule").json()["schedule"]["default_weekly"] == {}


def test_block_straddling_range_start(client, make_venue):
    vid = make_venue()
    client.post(
        f"/api/venues/{vid}/blocked-times",
        json={"start_time": "2024-06-08T10:00:00Z", "end_time": "2024-06-11T10:00:00Z"},
    )
    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-06-10&end_date=2024-06-12")
    assert [d["status"] for d in r.json()["calendar_data"]] == ["blocked", "blocked", "available"]


def test_block_starting_at_next_midnight_does_not_block_end(client, make_venue):
    vid = make_venue()
    client.post(
        f"/api/venues/{vid}/blocked-times",
        json={"start_time": "2024-06-13T00:00:00Z", "end_time": "2024-06-13T02:00:00Z"},
    )
    r = client.get(f"/api/venues/{vid}/availability-calendar?start_date=2024-06-10&end_date=2024-06-12")
    assert [d["status"] for d in r.json()["calendar_data"]] == ["available"] * 3


def test_check_availability_uses_each_venue_timezone(client, make_venue):
    ny = make_venue("A New York", timezone="America/New_York")
    utc = make_venue("B London")
    # 22:00-23:00 on June 10 in New York, already June 11 in UTC
    for vid in (ny, utc):
        client.post(
            f"/api/venues/{vid}/blocked-times",
            json={"start_time": "2024-06-11T02:00:00Z", "end_time": "2024-06-11T03:00:00Z"},
        )

    r = client.get("/api/venues/availability?start_date=2024-06-10&end_date=2024-06-10")
    assert r.json() == {"available_venue_ids": [utc], "unavailable_venue_ids": [ny]}

    r = client.get("/api/venues/availability?start_date=2024-06-10&end_date=2024-06-10&start_time=09:00&end_time=17:00")
    assert r.json() == {"available_venue_ids": [ny, utc], "unavailable_venue_ids": []}


def test_check_availability_rejects_bad_times(client):
    for bad in ("start_time=25:99", "end_time=noon"):
        r = client.get(f"/api/venues/availability?start_date=2024-06-10&end_date=2024-06-10&{bad}")
        assert r.status_code == 400, bad


def test_business_hours_replace_wholesale(client, make_venue):
    vid = make_venue()
    r = client.get(f"/api/venues/{vid}/business-hours")
    assert r.status_code == 200
    assert r.json() == {"venue_id": vid, "business_hours": []}

    hours = [
        {"days_of_week": [5, 1, 2, 3, 4, 1], "start_time": "17:00", "end_time": "23:00"},
        {"days_of_week": [6, 0], "start_time": "12:00", "end_time": "23:30"},
    ]
    r = client.post(f"/api/venues/{vid}/business-hours", json={"business_hours": hours})
    assert r.status_code == 200, r.text
    expected = [
        {"days_of_week": [1, 2, 3, 4, 5], "start_time": "17:00:00", "end_time": "23:00:00"},
        {"days_of_week": [0, 6], "start_time": "12:00:00", "end_time": "23:30:00"},
    ]
    assert r.json()["business_hours"] == expected
    assert client.get(f"/api/venues/{vid}/business-hours").json()["business_hours"] == expected

    r = client.post(f"/api/venues/{vid}/business-hours", json={"business_hours": [hours[1]]})
    assert client.get(f"/api/venues/{vid}/business-hours").json()["business_hours"] == expected[1:]

    client.post(f"/api/venues/{vid}/business-hours", json={"business_hours": []})
    assert client.get(f"/api/venues/{vid}/business-hours").json()["business_hours"] == []

    entries = client.get(f"/api/venues/{vid}/history?action=BUSINESS_HOURS_REPLACE").json()
    assert len(entries) == 3


def test_business_hours_validation(client, make_venue):
    vid = make_venue()
    bad_bodies = (
        None,
        {},
        {"business_hours": [{"days_of_week": [7], "start_time": "09:00", "end_time": "17:00"}]},
        {"business_hours": [{"days_of_week": [], "start_time": "09:00", "end_time": "17:00"}]},
        {"business_hours": [{"days_of_week": [1], "start_time": "17:00", "end_time": "09:00"}]},
    )
    for body in bad_bodies:
        r = client.post(f"/api/venues/{vid}/business-hours", json=body)
        assert r.status_code == 400, body

    assert client.get("/api/venues/nope/business-hours").status_code == 404
    r = client.post("/api/venues/nope/business-hours", json={"business_hours": []})
    assert r.status_code == 404


def test_business_hours_removed_with_venue(client, make_venue, db):
    from venue_calendar.models.business_hours import VenueBusinessHours

    vid = make_venue()
    client.post(
        f"/api/venues/{vid}/business-hours",
        json={"business_hours": [{"days_of_week": [1], "start_time": "09:00", "end_time": "17:00"}]},
    )
    client.delete(f"/api/venues/{vid}")
    assert db.execute(select(VenueBusinessHours).where(VenueBusinessHours.venue_id == vid)).scalars().all() == []


def test_lost_database_is_503(client):
    from venue_calendar.main import app

    session = mock.MagicMock()
    session.commit.side_effect = OperationalError("COMMIT", {}, Exception("server closed the connection"))
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("server closed the connection"))
    app.dependency_overrides[get_db] = lambda: session

    assert client.post("/api/venues", json={"name": "Loft"}).status_code == 503
    session.rollback.assert_called_once()
    assert client.get("/api/venues").status_code == 503
    assert client.get("/api/venues/availability?start_date=2024-06-10&end_date=2024-06-10").status_code == 503
