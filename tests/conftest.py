"""
Shared fixtures: an in-memory SQLite database per test, seeded roles, a few
users and venues, and a TestClient wired to the same session.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CREATE_DATABASE_ON_STARTUP", "false")

from datetime import date, time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hotel_events.core.security import create_access_token
from hotel_events.db.base import Base
from hotel_events.db.session import get_db
from hotel_events.main import app
from hotel_events.models.user import RoleName
from hotel_events.models.venue import VenueType
from hotel_events.services import users as user_service
from hotel_events.services import venues as venue_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

EVENT_DATE = date(2030, 6, 15)


def t(hhmm: str) -> time:
    hours, minutes = hhmm.split(":")
    return time(int(hours), int(minutes))


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    user_service.ensure_roles(db, [role.value for role in RoleName])
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role=RoleName.GUEST, username=None, password="secret123"):
        counter["n"] += 1
        username = username or f"{role.value.lower()}{counter['n']}"
        return user_service.create_user(
            db_session,
            username=username,
            email=f"{username}@example.com",
            password=password,
            first_name=username.capitalize(),
            last_name="Tester",
            role_name=role,
        )

    return _make


@pytest.fixture
def guest(make_user):
    return make_user(RoleName.GUEST, username="alice")


@pytest.fixture
def manager(make_user):
    return make_user(RoleName.GENERAL_MANAGER, username="morgan")


@pytest.fixture
def coordinator(make_user):
    return make_user(RoleName.EVENT_COORDINATOR, username="casey")


@pytest.fixture
def catering_lead(make_user):
    return make_user(RoleName.CATERING_TEAM_LEADER, username="jordan")


@pytest.fixture
def receptionist(make_user):
    return make_user(RoleName.RECEPTIONIST, username="riley")


@pytest.fixture
def grand_hall(db_session):
    return venue_service.create_venue(
        db_session,
        name="Grand Hall",
        type=VenueType.HALL,
        capacity=200,
        hourly_rate=Decimal("100.00"),
        description="Ballroom on the ground floor",
    )


@pytest.fixture
def garden_room(db_session):
    return venue_service.create_venue(
        db_session,
        name="Garden Room",
        type=VenueType.ROOM,
        capacity=30,
        hourly_rate=Decimal("45.50"),
    )


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}
