from datetime import time

from app.models import AvailabilityWindow, Booking, BookingStatus, TimeOff, TimeOffStatus
from app.services.capacity import (
    Interval,
    compute_day_capacity,
    covered_minutes,
    format_hours,
    from_minutes,
    hours_to_minutes,
    to_minutes,
)

from factories import MONDAY, TUESDAY


def _window(start=time(9, 0), end=time(17, 0)):
    return AvailabilityWindow(staff_id=1, day_of_week=1, start_time=start, end_time=end, is_available=True)


def _booking(start, end, booking_date=MONDAY):
    hours = (to_minutes(end) - to_minutes(start)) / 60
    return Booking(
        staff_id=1, project_id=1, booking_date=booking_date,
        start_time=start, end_time=end, hours_booked=hours, status=BookingStatus.SCHEDULED
    )


def _time_off(start=None, end=None, start_date=MONDAY, end_date=MONDAY):
    return TimeOff(
        staff_id=1, start_date=start_date, end_date=end_date,
        is_full_day=start is None, start_time=start, end_time=end,
        status=TimeOffStatus.APPROVED
    )


def test_minute_helpers():
    assert to_minutes(time(9, 30)) == 570
    assert from_minutes(570) == time(9, 30)
    assert hours_to_minutes(2.5) == 150
    assert format_hours(4.0) == "4"
    assert format_hours(2.5) == "2.5"


def test_interval_overlap_is_half_open():
    interval = Interval(600, 720)
    assert interval.overlaps(660, 780)
    assert not interval.overlaps(720, 780)
    assert not interval.overlaps(540, 600)


def test_no_window_means_zero_capacity():
    capacity = compute_day_capacity(MONDAY, None, [])
    assert not capacity.has_window
    assert capacity.available_hours == 0
    assert capacity.candidate_starts(60, 60) == []


def test_bookings_reduce_capacity_and_block_their_interval():
    capacity = compute_day_capacity(MONDAY, _window(), [_booking(time(10, 0), time(12, 0))])

    assert capacity.window_span_hours == 8
    assert capacity.booked_hours == 2
    assert capacity.available_hours == 6
    assert not capacity.fits(to_minutes(time(11, 0)), 120)
    assert capacity.fits(to_minutes(time(12, 0)), 120)


def test_bookings_on_other_dates_are_ignored():
    capacity = compute_day_capacity(MONDAY, _window(), [_booking(time(9, 0), time(17, 0), TUESDAY)])
    assert capacity.available_hours == 8


def test_full_day_time_off_zeroes_the_day():
    capacity = compute_day_capacity(MONDAY, _window(), [], [_time_off()])
    assert capacity.full_day_off
    assert capacity.available_hours == 0
    assert capacity.first_fit(60, 60) is None


def test_partial_time_off_counts_only_inside_the_window():
    capacity = compute_day_capacity(MONDAY, _window(), [], [_time_off(time(7, 0), time(10, 0))])
    assert capacity.time_off_hours == 1
    assert capacity.available_hours == 7
    assert capacity.first_fit(120, 60) == to_minutes(time(10, 0))


def test_time_off_inside_a_booking_is_not_subtracted_twice():
    capacity = compute_day_capacity(
        MONDAY, _window(), [_booking(time(9, 0), time(12, 0))], [_time_off(time(10, 0), time(12, 0))]
    )
    assert capacity.booked_hours == 3
    assert capacity.time_off_hours == 0
    assert capacity.available_hours == 5
    assert capacity.first_fit(300, 60) == to_minutes(time(12, 0))


def test_time_off_partly_overlapping_a_booking_counts_the_rest():
    capacity = compute_day_capacity(
        MONDAY, _window(), [_booking(time(9, 0), time(12, 0))], [_time_off(time(11, 0), time(13, 0))]
    )
    assert capacity.time_off_hours == 1
    assert capacity.available_hours == 4


def test_overlapping_time_off_entries_count_once():
    capacity = compute_day_capacity(
        MONDAY, _window(), [], [_time_off(time(10, 0), time(12, 0)), _time_off(time(11, 0), time(13, 0))]
    )
    assert capacity.time_off_hours == 3
    assert capacity.available_hours == 5


def test_covered_minutes_merges_overlaps():
    intervals = [Interval(600, 720), Interval(660, 780), Interval(900, 960)]
    assert covered_minutes(540, 1020, intervals) == 240
    assert covered_minutes(700, 920, intervals) == 100
    assert covered_minutes(780, 900, intervals) == 0


def test_free_runs_between_bookings():
    capacity = compute_day_capacity(
        MONDAY, _window(), [_booking(time(10, 0), time(11, 0)), _booking(time(13, 0), time(14, 0))]
    )
    assert capacity.free_runs() == [
        Interval(to_minutes(time(9, 0)), to_minutes(time(10, 0))),
        Interval(to_minutes(time(11, 0)), to_minutes(time(13, 0))),
        Interval(to_minutes(time(14, 0)), to_minutes(time(17, 0))),
    ]
    assert capacity.longest_free_run() == Interval(to_minutes(time(14, 0)), to_minutes(time(17, 0)))


def test_longest_free_run_prefers_the_earliest_on_a_tie():
    capacity = compute_day_capacity(MONDAY, _window(), [_booking(time(11, 0), time(15, 0))])
    assert capacity.longest_free_run() == Interval(to_minutes(time(9, 0)), to_minutes(time(11, 0)))


def test_no_free_runs_without_capacity():
    assert compute_day_capacity(MONDAY, None, []).free_runs() == []
    day_off = compute_day_capacity(MONDAY, _window(), [], [_time_off()])
    assert day_off.free_runs() == []
    assert day_off.longest_free_run() is None


def test_slots_never_leave_the_window():
    capacity = compute_day_capacity(MONDAY, _window(), [])
    assert not capacity.fits(to_minutes(time(16, 0)), 120)
    starts = capacity.candidate_starts(240, 60)
    assert starts[0] == to_minutes(time(9, 0))
    assert starts[-1] == to_minutes(time(13, 0))


def test_to_dict_rounds_hours():
    capacity = compute_day_capacity(MONDAY, _window(), [_booking(time(9, 0), time(9, 20))])
    data = capacity.to_dict()
    assert data["date"] == "2026-10-19"
    assert data["booked_hours"] == 0.33
    assert data["available_hours"] == 7.67
