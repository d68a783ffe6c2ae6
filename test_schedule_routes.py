"""
HTTP-level checks for the /api routes against in-memory SQLite, with the
Firebase identity dependency swapped for a fixed employee.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import select

from conftest import EMPLOYEE_ID
from models.schedule_event import EventKind, ScheduleEvent
from services.geofence_service import GeofenceService
from services.schedule_service import ScheduleService
from utils.errors import GeofenceNotConfigured, InvalidGeofence


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_requests_without_token_are_unauthorized(client, geofence):
    response = client.get("/api/schedule")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_get_employee_profile(client, login):
    response = client.get("/api/employee")

    assert response.status_code == 200
    assert response.json() == {
        "employeeId": EMPLOYEE_ID,
        "username": "jdoe",
        "email": "jdoe@example.com",
    }


# --- Geofence ---


def test_get_geofence(client, login, geofence):
    response = client.get("/api/geofence")

    assert response.status_code == 200
    assert response.json() == {
        "geofenceId": geofence.geofence_id,
        "requestId": "media-pa-office",
        "name": "Media, PA Office",
        "latitude": 39.9187,
        "longitude": -75.3876,
        "radius": 100,
    }


def test_get_geofence_when_none_configured(client, login):
    response = client.get("/api/geofence")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_evaluate_center(client, login, geofence):
    response = client.post("/api/geofence/evaluate", json={"latitude": 39.9187, "longitude": -75.3876})

    assert response.status_code == 200
    body = response.json()
    assert body["inside"] is True
    assert body["distanceMeters"] == 0.0
    assert body["geofenceId"] == geofence.geofence_id


def test_evaluate_far_away(client, login, geofence):
    response = client.post("/api/geofence/evaluate", json={"latitude": 39.95, "longitude": -75.16})

    body = response.json()
    assert body["inside"] is False
    assert body["distanceMeters"] > 100


def test_evaluate_invalid_coordinate(client, login, geofence):
    response = client.post("/api/geofence/evaluate", json={"latitude": 120.0, "longitude": 0.0})

    assert response.status_code == 400
    assert response.json()["error"] == "bad_request"


def test_create_geofence_enforces_minimum_radius(session):
    with pytest.raises(InvalidGeofence):
        GeofenceService.create_geofence(session, "tiny", "Tiny", 39.9, -75.3, radius_meters=50)
    with pytest.raises(InvalidGeofence):
        GeofenceService.create_geofence(session, "zero", "Zero", 39.9, -75.3, radius_meters=0, min_radius_meters=0)

    small = GeofenceService.create_geofence(session, "small", "Small", 39.9, -75.3, radius_meters=50, min_radius_meters=10)
    assert small.radius_meters == 50


def test_get_geofence_raises_when_missing(session):
    with pytest.raises(GeofenceNotConfigured):
        GeofenceService.get_geofence(session)


# --- Clock In / Clock Out ---


def test_clock_in_and_out(client, login, geofence, session):
    response = client.post("/api/schedule/clock-in", json={"latitude": 39.9187, "longitude": -75.3876})
    assert response.status_code == 201
    clock_in_id = response.json()["eventId"]
    assert response.json()["message"] == "Clock-in recorded"

    response = client.post("/api/schedule/clock-out", json={})
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Clock-out recorded"
    assert body["durationMinutes"] == 0

    stored = session.exec(select(ScheduleEvent).order_by(ScheduleEvent.id)).all()
    assert [e.event_type for e in stored] == [EventKind.CLOCK_IN, EventKind.CLOCK_OUT]
    assert stored[0].event_id == clock_in_id
    assert stored[0].geofence_id == geofence.geofence_id
    assert stored[1].latitude is None


def test_clock_out_without_clock_in_has_no_duration(client, login, geofence):
    response = client.post("/api/schedule/clock-out", json={"latitude": 39.9187, "longitude": -75.3876})

    assert response.status_code == 201
    assert "durationMinutes" not in response.json()


def test_clock_in_with_half_a_location_is_rejected(client, login, geofence):
    response = client.post("/api/schedule/clock-in", json={"latitude": 39.9187})

    assert response.status_code == 400
    assert response.json()["error"] == "bad_request"


def test_clock_in_without_geofence(client, login):
    assert client.post("/api/schedule/clock-in", json={}).status_code == 404


def test_service_clock_out_duration(session, geofence):
    t0 = datetime(2025, 6, 7, 13, 0, tzinfo=timezone.utc)
    ScheduleService.clock_in(EMPLOYEE_ID, None, None, session, at=t0)
    ScheduleService.clock_in("employee-2", None, None, session, at=t0 + timedelta(minutes=60))

    clock_out = ScheduleService.clock_out(EMPLOYEE_ID, None, None, session, at=t0 + timedelta(minutes=90))

    assert clock_out.duration_minutes == 90


def test_service_clock_out_tie_uses_last_inserted(session, geofence):
    t0 = datetime(2025, 6, 7, 13, 0, tzinfo=timezone.utc)
    ScheduleService.clock_in(EMPLOYEE_ID, None, None, session, at=t0)
    second = ScheduleService.clock_in(EMPLOYEE_ID, 39.9187, -75.3876, session, at=t0)

    newest = session.exec(
        select(ScheduleEvent)
        .where(ScheduleEvent.event_type == EventKind.CLOCK_IN)
        .order_by(ScheduleEvent.event_time.desc(), ScheduleEvent.id.desc())
    ).first()
    assert newest.event_id == second.event_id

    clock_out = ScheduleService.clock_out(EMPLOYEE_ID, None, None, session, at=t0 + timedelta(minutes=5))
    assert clock_out.duration_minutes == 5


# --- Exit ---


def test_exit_with_negative_distance(client, login, geofence, session):
    response = client.post(
        "/api/schedule/exit",
        json={"latitude": 39.93, "longitude": -75.39, "distanceFromGeofence": -10.0},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "bad_request", "message": "Distance must be positive"}
    assert session.exec(select(ScheduleEvent)).all() == []


def test_exit_with_zero_distance(client, login, geofence):
    response = client.post(
        "/api/schedule/exit",
        json={"latitude": 39.93, "longitude": -75.39, "distanceFromGeofence": 0.0},
    )

    assert response.status_code == 201
    assert response.json()["distanceFromGeofence"] == 0.0


def test_exit_distance_computed_when_omitted(client, login, geofence):
    response = client.post("/api/schedule/exit", json={"latitude": 39.93, "longitude": -75.39})

    assert response.status_code == 201
    assert response.json()["distanceFromGeofence"] > 100


def test_exit_requires_location(client, login, geofence):
    response = client.post("/api/schedule/exit", json={"distanceFromGeofence": 5.0})
    assert response.status_code == 400


# --- Schedule History ---


def test_schedule_lists_recent_events_newest_first(client, login, geofence, session):
    now = datetime.now(timezone.utc)
    ScheduleService.clock_in(EMPLOYEE_ID, None, None, session, at=now - timedelta(days=8))
    ScheduleService.clock_in(EMPLOYEE_ID, 39.9187, -75.3876, session, at=now - timedelta(hours=3))
    ScheduleService.record_exit(EMPLOYEE_ID, 39.93, -75.39, 250.0, session, at=now - timedelta(hours=2))
    ScheduleService.clock_out(EMPLOYEE_ID, None, None, session, at=now - timedelta(hours=1))
    ScheduleService.clock_in("employee-2", None, None, session, at=now - timedelta(minutes=30))

    response = client.get("/api/schedule")

    assert response.status_code == 200
    events = response.json()["events"]
    assert [e["eventType"] for e in events] == ["CLOCK_OUT", "EXIT", "CLOCK_IN"]
    assert events[0]["durationMinutes"] == 120
    assert events[1]["distanceFromGeofence"] == 250.0
    assert events[2]["latitude"] == 39.9187
    assert all(e["eventTime"].endswith("Z") for e in events)


def test_schedule_is_scoped_to_the_caller(client, login, geofence, session):
    ScheduleService.clock_in(EMPLOYEE_ID, None, None, session)

    login("employee-2")
    assert client.get("/api/schedule").json() == {"events": []}


def test_seed_geofence_is_idempotent(session):
    from db.seed import seed_geofence

    first = seed_geofence(session)
    second = seed_geofence(session)

    assert first.geofence_id == second.geofence_id
    assert first.radius_meters == 100
    assert GeofenceService.get_geofence(session).request_id == "media-pa-office"
