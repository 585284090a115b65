"""
Shared fixtures: an in-memory SQLite database rebuilt for every test, a
TestClient bound to it, and a small studio with three staff members.

Reference week starts Monday 2026-10-19.
"""

import os

# Must be set before any app import so the engine is built for SQLite
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app
from app.models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    Project,
    Staff,
    TimeOff,
    TimeOffStatus,
    Weekday,
)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def alice(db):
    staff = Staff(name="Alice Park", email="alice@example.com", role="Photographer", department="Production")
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


@pytest.fixture
def bob(db):
    staff = Staff(name="Bob Reyes", email="bob@example.com", role="Photographer", department="Production")
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


@pytest.fixture
def carol(db):
    """Different department, no availability windows."""
    staff = Staff(name="Carol Ng", email="carol@example.com", role="Editor", department="Post")
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def add_weekday_windows(db, staff, start=time(9, 0), end=time(17, 0)):
    for day in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY):
        db.add(AvailabilityWindow(staff_id=staff.id, day_of_week=int(day), start_time=start, end_time=end))
    db.commit()


@pytest.fixture
def alice_windows(db, alice):
    """Alice works 09:00-17:00 Monday to Friday."""
    add_weekday_windows(db, alice)
    return alice


@pytest.fixture
def bob_windows(db, bob):
    add_weekday_windows(db, bob)
    return bob


@pytest.fixture
def project(db, alice):
    project = Project(title="Autumn Lookbook", estimated_hours=20, assigned_staff_id=alice.id)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def make_booking(db, project):
    """Insert a booking directly, bypassing the coordinator's checks."""

    def _make(staff, booking_date, start, end, status=BookingStatus.SCHEDULED):
        hours = ((end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)) / 60
        booking = Booking(
            project_id=project.id,
            staff_id=staff.id,
            booking_date=booking_date,
            start_time=start,
            end_time=end,
            hours_booked=hours,
            status=status,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make


@pytest.fixture
def make_time_off(db):
    def _make(staff, start_date, end_date=None, start=None, end=None, status=TimeOffStatus.APPROVED):
        entry = TimeOff(
            staff_id=staff.id,
            start_date=start_date,
            end_date=end_date or start_date,
            is_full_day=start is None,
            start_time=start,
            end_time=end,
            status=status,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    return _make
