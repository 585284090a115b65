from app.models import BookingType, Project
from app.services.booking_request import BookingRequest

from factories import MONDAY


def _request(**estimates):
    project = Project(title="Campaign", assigned_staff_id=3, **estimates)
    return BookingRequest.from_project(project, MONDAY)


def test_shoot_and_edit_estimates_need_dual_booking():
    request = _request(estimated_hours=10, estimated_shoot_hours=3, estimated_edit_hours=5)

    assert request.needs_dual_booking
    assert request.mode == "dual"
    assert request.booking_type is None
    assert request.hours_for(BookingType.SHOOT) == 3
    assert request.hours_for(BookingType.EDIT) == 5
    assert request.to_dict() == {
        "staff_id": 3,
        "earliest_date": "2026-10-19",
        "mode": "dual",
        "total_hours": 10,
        "shoot_hours": 3,
        "edit_hours": 5,
    }


def test_shoot_only():
    request = _request(estimated_hours=10, estimated_shoot_hours=4)

    assert request.mode == "shoot"
    assert request.booking_type == BookingType.SHOOT
    assert request.hours_for() == 4


def test_zero_shoot_estimate_is_ignored():
    request = _request(estimated_shoot_hours=0, estimated_edit_hours=6)

    assert not request.needs_dual_booking
    assert request.mode == "edit"
    assert request.hours_for() == 6


def test_falls_back_to_overall_estimate():
    request = _request(estimated_hours=12)

    assert request.mode == "project"
    assert request.booking_type is None
    assert request.to_dict()["hours"] == 12


def test_missing_estimates_give_zero_hours():
    assert _request().hours_for() == 0
