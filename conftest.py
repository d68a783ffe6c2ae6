import os

# Must be set before db.session builds the engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from core.deps import get_current_user
from db.session import engine
from main import app
from services.geofence_service import GeofenceService

EMPLOYEE_ID = "employee-1"


def fake_user(uid: str = EMPLOYEE_ID) -> dict:
    return {"uid": uid, "username": "jdoe", "email": "jdoe@example.com"}


@pytest.fixture
def session():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def geofence(session):
    return GeofenceService.create_geofence(
        session,
        request_id="media-pa-office",
        name="Media, PA Office",
        center_lat=39.9187,
        center_lng=-75.3876,
        radius_meters=100,
    )


@pytest.fixture
def login():
    """Call login("some-uid") to act as that employee in HTTP tests."""

    def _login(uid: str = EMPLOYEE_ID):
        app.dependency_overrides[get_current_user] = lambda: fake_user(uid)

    _login()
    yield _login
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def client(session):
    with TestClient(app) as client:
        yield client
