from datetime import time

import pytest

from app.models import AvailabilityWindow, BookingStatus, TimeOffStatus
from app.services.capacity import WarningType
from app.services.slot_finder import SingleDaySlotFinder

from factories import MONDAY, SATURDAY, TUESDAY


def _starts(result):
    return [slot.start_time for slot in result.slots]


def test_open_day_lists_every_hourly_start(db, alice_windows):
    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 4)

    assert result.has_slots
    assert not result.warnings
    assert _starts(result) == [time(9), time(10), time(11), time(12), time(13)]
    assert result.slots[-1].end_time == time(17)
    assert all(slot.hours == 4 for slot in result.slots)


def test_existing_booking_removes_overlapping_starts(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(10), time(12))

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 4)

    assert _starts(result) == [time(12), time(13)]
    assert result.capacity.available_hours == 6


def test_insufficient_capacity_suggests_alternates(db, alice_windows, bob, carol, make_booking):
    make_booking(alice_windows, MONDAY, time(9), time(12))
    make_booking(alice_windows, MONDAY, time(13), time(17))

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 2)

    assert result.slots == []
    warning = result.warnings[0]
    assert warning.type == WarningType.INSUFFICIENT_CAPACITY
    assert "only has 1 hours available but needs 2 hours" in warning.message
    assert "Bob Reyes" in warning.message
    assert [a["name"] for a in result.alternatives] == ["Bob Reyes"]
    assert warning.details["shortfall_hours"] == 1


def test_fragmented_capacity_when_no_contiguous_block(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(10), time(12))
    make_booking(alice_windows, MONDAY, time(14), time(16))

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 3)

    assert result.slots == []
    assert result.warnings[0].type == WarningType.FRAGMENTED_CAPACITY
    assert result.capacity.available_hours == 4


def test_weekend_has_no_slots(db, alice_windows):
    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, SATURDAY, 2)
    assert result.slots == []
    assert result.warnings[0].type == WarningType.NO_AVAILABILITY


def test_missing_window_has_no_slots(db, carol):
    result = SingleDaySlotFinder(db).find_slots(carol.id, MONDAY, 2)
    assert result.slots == []
    assert result.warnings[0].type == WarningType.NO_AVAILABILITY
    assert result.capacity is None


def test_unavailable_window_counts_as_missing(db, alice_windows):
    window = db.query(AvailabilityWindow).filter(
        AvailabilityWindow.staff_id == alice_windows.id,
        AvailabilityWindow.day_of_week == 2
    ).first()
    window.is_available = False
    db.commit()

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, TUESDAY, 2)
    assert result.warnings[0].type == WarningType.NO_AVAILABILITY


def test_approved_full_day_time_off_blocks_the_day(db, alice_windows, make_time_off):
    make_time_off(alice_windows, MONDAY)

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 2)

    assert result.slots == []
    assert result.warnings[0].type == WarningType.TIME_OFF


def test_pending_time_off_is_ignored(db, alice_windows, make_time_off):
    make_time_off(alice_windows, MONDAY, status=TimeOffStatus.PENDING)

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 8)
    assert _starts(result) == [time(9)]


def test_partial_time_off_blocks_its_interval(db, alice_windows, make_time_off):
    make_time_off(alice_windows, MONDAY, start=time(9), end=time(11))

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 4)

    assert _starts(result) == [time(11), time(12), time(13)]
    assert result.capacity.time_off_hours == 2


def test_time_off_during_a_booking_does_not_shrink_capacity(db, alice_windows, make_booking, make_time_off):
    make_booking(alice_windows, MONDAY, time(9), time(12))
    make_time_off(alice_windows, MONDAY, start=time(10), end=time(12))

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 5)

    assert _starts(result) == [time(12)]
    assert result.warnings == []
    assert result.capacity.available_hours == 5


def test_cancelled_bookings_free_their_time(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(9), time(17), status=BookingStatus.CANCELLED)

    result = SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 8)
    assert _starts(result) == [time(9)]


def test_half_hour_step(db, alice_windows):
    result = SingleDaySlotFinder(db, step_minutes=30).find_slots(alice_windows.id, MONDAY, 7)
    assert _starts(result) == [time(9), time(9, 30), time(10)]


def test_rejects_non_positive_hours(db, alice_windows):
    with pytest.raises(ValueError):
        SingleDaySlotFinder(db).find_slots(alice_windows.id, MONDAY, 0)
