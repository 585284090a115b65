from datetime import time

import pytest

from app.services.capacity import WarningType
from app.services.multi_day_allocator import MultiDayAllocator, PlanSlot, summarize_plan

from factories import FRIDAY, MONDAY, NEXT_MONDAY, SATURDAY, TUESDAY, WEDNESDAY


def _allocator(db, **kwargs):
    kwargs.setdefault("lookahead_days", 14)
    kwargs.setdefault("min_daily_hours", 2.0)
    kwargs.setdefault("step_minutes", 60)
    return MultiDayAllocator(db, **kwargs)


def _days(plan):
    return [(slot.date, slot.start_time, slot.end_time, slot.hours) for slot in plan.slots]


def test_fills_days_from_window_start(db, alice_windows):
    plan = _allocator(db).allocate(alice_windows.id, 20, MONDAY)

    assert plan.can_fit
    assert _days(plan) == [
        (MONDAY, time(9), time(17), 8),
        (TUESDAY, time(9), time(17), 8),
        (WEDNESDAY, time(9), time(13), 4),
    ]
    assert [slot.sequence for slot in plan.slots] == [1, 2, 3]
    assert plan.message == (
        "Can be split across 3 days: Oct 19 (8h), Oct 20 (8h), Oct 21 (4h) - Total: 20h"
    )
    assert not plan.warnings


def test_single_day_plan_message(db, alice_windows):
    plan = _allocator(db).allocate(alice_windows.id, 4, MONDAY)
    assert plan.total_days == 1
    assert plan.message == "Can be booked on Oct 19 (4h)"


def test_days_below_minimum_are_skipped(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(9), time(16))

    plan = _allocator(db).allocate(alice_windows.id, 10, MONDAY)

    assert _days(plan) == [
        (TUESDAY, time(9), time(17), 8),
        (WEDNESDAY, time(9), time(11), 2),
    ]
    skipped = plan.skipped_days[0]
    assert skipped.date == MONDAY
    assert skipped.reason == "below_minimum"
    assert skipped.available_hours == 1


def test_minimum_applies_to_the_final_remainder(db, alice_windows, make_booking):
    # Monday leaves exactly one free hour, which is also all that is still needed
    make_booking(alice_windows, MONDAY, time(9), time(16))

    plan = _allocator(db).allocate(alice_windows.id, 1, MONDAY)

    assert _days(plan) == [(TUESDAY, time(9), time(10), 1)]


def test_weekends_are_skipped(db, alice_windows):
    plan = _allocator(db).allocate(alice_windows.id, 12, FRIDAY)

    assert _days(plan) == [
        (FRIDAY, time(9), time(17), 8),
        (NEXT_MONDAY, time(9), time(13), 4),
    ]
    assert all(skipped.date != SATURDAY for skipped in plan.skipped_days)


def test_block_slides_past_an_early_booking(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(9), time(10))

    plan = _allocator(db).allocate(alice_windows.id, 5, MONDAY)

    assert _days(plan) == [(MONDAY, time(10), time(15), 5)]


def test_fragmented_day_books_its_longest_free_run(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(10), time(11))
    make_booking(alice_windows, MONDAY, time(13), time(14))

    plan = _allocator(db).allocate(alice_windows.id, 6, MONDAY)

    assert _days(plan) == [
        (MONDAY, time(14), time(17), 3),
        (TUESDAY, time(9), time(12), 3),
    ]
    assert plan.can_fit
    assert plan.skipped_days == []


def test_longest_run_is_capped_by_the_horizon(db, alice_windows, make_booking):
    make_booking(alice_windows, MONDAY, time(12), time(13))

    plan = _allocator(db, lookahead_days=1).allocate(alice_windows.id, 7, MONDAY)

    assert _days(plan) == [(MONDAY, time(13), time(17), 4)]
    assert not plan.can_fit
    assert plan.allocated_hours == 4


def test_day_with_only_short_runs_is_skipped_as_fragmented(db, alice_windows, make_booking):
    for hour in (10, 12, 14, 16):
        make_booking(alice_windows, MONDAY, time(hour), time(hour + 1))

    plan = _allocator(db).allocate(alice_windows.id, 6, MONDAY)

    assert _days(plan) == [(TUESDAY, time(9), time(15), 6)]
    assert plan.skipped_days[0].reason == "fragmented"
    assert plan.skipped_days[0].available_hours == 4


def test_time_off_days_are_skipped(db, alice_windows, make_time_off):
    make_time_off(alice_windows, MONDAY, TUESDAY)

    plan = _allocator(db).allocate(alice_windows.id, 4, MONDAY)

    assert _days(plan) == [(WEDNESDAY, time(9), time(13), 4)]


def test_nothing_fits_when_staff_has_no_windows(db, carol):
    plan = _allocator(db).allocate(carol.id, 5, MONDAY)

    assert not plan.can_fit
    assert plan.slots == []
    assert plan.message == "Cannot fit 5 hours in the next 14 days"
    assert plan.warnings[0].type == WarningType.HORIZON_EXHAUSTED
    assert [d.reason for d in plan.skipped_days] == ["no_availability"] * 10


def test_partial_plan_reports_shortfall(db, alice_windows):
    plan = _allocator(db, lookahead_days=3).allocate(alice_windows.id, 20, SATURDAY)

    assert not plan.can_fit
    assert _days(plan) == [(NEXT_MONDAY, time(9), time(17), 8)]
    warning = plan.warnings[0]
    assert warning.type == WarningType.HORIZON_EXHAUSTED
    assert warning.details["shortfall_hours"] == 12


def test_allocation_never_exceeds_request(db, alice_windows, make_booking):
    make_booking(alice_windows, TUESDAY, time(12), time(15))

    plan = _allocator(db).allocate(alice_windows.id, 13.5, MONDAY)

    assert plan.allocated_hours == 13.5
    assert sum(slot.hours for slot in plan.slots) <= 13.5


def test_identical_inputs_give_identical_plans(db, alice_windows, make_booking):
    make_booking(alice_windows, TUESDAY, time(9), time(12))

    first = _allocator(db).allocate(alice_windows.id, 18, MONDAY)
    second = _allocator(db).allocate(alice_windows.id, 18, MONDAY)

    assert first.to_dict() == second.to_dict()


def test_planning_does_not_write(db, alice_windows, project):
    _allocator(db).allocate(alice_windows.id, 20, MONDAY)
    assert project.bookings == []


def test_rejects_non_positive_hours(db, alice_windows):
    with pytest.raises(ValueError):
        _allocator(db).allocate(alice_windows.id, 0, MONDAY)


def test_summarize_plan_formats_fractional_hours():
    slots = [
        PlanSlot(MONDAY, time(9), time(11, 30), 2.5, 1),
        PlanSlot(TUESDAY, time(9), time(12), 3, 2),
    ]
    assert summarize_plan(slots) == "Can be split across 2 days: Oct 19 (2.5h), Oct 20 (3h) - Total: 5.5h"
