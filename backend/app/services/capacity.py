"""
Daily Capacity

Shared per-day capacity computation used by both the single-day slot finder
and the multi-day allocator:

- window span from the staff member's AvailabilityWindow
- hours already booked on the date
- approved time off (full-day entries zero the day, partial entries block
  their interval)
- the blocked intervals a new booking must not overlap

Times are handled as minutes since midnight.
"""

from typing import List, Dict, Optional, Iterable
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from app.models.availability import AvailabilityWindow
from app.models.booking import Booking
from app.models.time_off import TimeOff


class WarningType(str, Enum):
    NO_AVAILABILITY = "no_availability"
    INSUFFICIENT_CAPACITY = "insufficient_capacity"
    FRAGMENTED_CAPACITY = "fragmented_capacity"
    HORIZON_EXHAUSTED = "horizon_exhausted"
    TIME_OFF = "time_off"


@dataclass
class CapacityWarning:
    """A user-facing planning outcome; never raised."""
    type: WarningType
    message: str
    details: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "type": self.type.value,
            "message": self.message,
            "details": self.details
        }


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)


def hours_to_minutes(hours: float) -> int:
    return int(round(hours * 60))


def format_hours(hours: float) -> str:
    """4.0 -> '4', 2.5 -> '2.5'."""
    return f"{hours:g}"


@dataclass(frozen=True)
class Interval:
    """Half-open [start, end) in minutes since midnight."""
    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        return start < self.end and end > self.start

    @property
    def minutes(self) -> int:
        return self.end - self.start


def covered_minutes(start: int, end: int, intervals: Iterable[Interval]) -> int:
    """Minutes of [start, end) covered by the union of intervals."""
    covered = 0
    cursor = start
    for interval in sorted(intervals, key=lambda i: (i.start, i.end)):
        lo = max(interval.start, cursor)
        hi = min(interval.end, end)
        if hi > lo:
            covered += hi - lo
            cursor = hi
    return covered


@dataclass
class DayCapacity:
    """Capacity of one staff member on one date."""
    date: date
    window: Optional[AvailabilityWindow]
    window_span_hours: float = 0.0
    booked_hours: float = 0.0
    time_off_hours: float = 0.0
    full_day_off: bool = False
    blocked: List[Interval] = field(default_factory=list)

    @property
    def has_window(self) -> bool:
        return self.window is not None

    @property
    def window_start(self) -> int:
        return to_minutes(self.window.start_time)

    @property
    def window_end(self) -> int:
        return to_minutes(self.window.end_time)

    @property
    def available_hours(self) -> float:
        if not self.has_window or self.full_day_off:
            return 0.0
        return max(0.0, self.window_span_hours - self.booked_hours - self.time_off_hours)

    def fits(self, start: int, duration: int) -> bool:
        """True if [start, start + duration) lies in the window and overlaps nothing."""
        end = start + duration
        if start < self.window_start or end > self.window_end:
            return False
        return not any(interval.overlaps(start, end) for interval in self.blocked)

    def candidate_starts(self, duration: int, step: int) -> List[int]:
        """Every step-aligned start from window start to window end - duration."""
        if not self.has_window or duration <= 0:
            return []
        starts = []
        current = self.window_start
        while current + duration <= self.window_end:
            starts.append(current)
            current += step
        return starts

    def first_fit(self, duration: int, step: int) -> Optional[int]:
        """Earliest start that fits, or None."""
        for start in self.candidate_starts(duration, step):
            if self.fits(start, duration):
                return start
        return None

    def free_runs(self) -> List[Interval]:
        """Maximal unblocked intervals inside the window, in order."""
        if not self.has_window or self.full_day_off:
            return []
        runs = []
        cursor = self.window_start
        for interval in sorted(self.blocked, key=lambda i: (i.start, i.end)):
            if interval.start > cursor:
                runs.append(Interval(cursor, min(interval.start, self.window_end)))
            cursor = max(cursor, interval.end)
            if cursor >= self.window_end:
                break
        if cursor < self.window_end:
            runs.append(Interval(cursor, self.window_end))
        return [run for run in runs if run.minutes > 0]

    def longest_free_run(self) -> Optional[Interval]:
        """Longest free run; the earliest one wins a tie."""
        runs = self.free_runs()
        if not runs:
            return None
        return max(runs, key=lambda run: run.minutes)

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "window_start": self.window.start_time.isoformat() if self.window else None,
            "window_end": self.window.end_time.isoformat() if self.window else None,
            "window_hours": round(self.window_span_hours, 2),
            "booked_hours": round(self.booked_hours, 2),
            "time_off_hours": round(self.time_off_hours, 2),
            "full_day_off": self.full_day_off,
            "available_hours": round(self.available_hours, 2)
        }


def compute_day_capacity(
    target_date: date,
    window: Optional[AvailabilityWindow],
    bookings: Iterable[Booking],
    time_off: Iterable[TimeOff] = ()
) -> DayCapacity:
    """
    Build the DayCapacity for target_date.

    bookings and time_off may span many dates (batch-loaded); only entries
    touching target_date are used.
    """
    capacity = DayCapacity(date=target_date, window=window)
    if window is None:
        return capacity

    capacity.window_span_hours = window.span_hours
    window_start = to_minutes(window.start_time)
    window_end = to_minutes(window.end_time)

    for booking in bookings:
        if booking.booking_date != target_date:
            continue
        capacity.booked_hours += booking.hours_booked
        capacity.blocked.append(
            Interval(to_minutes(booking.start_time), to_minutes(booking.end_time))
        )

    for entry in time_off:
        if not entry.covers(target_date):
            continue
        if entry.is_full_day or entry.start_time is None or entry.end_time is None:
            capacity.full_day_off = True
            capacity.blocked.append(Interval(window_start, window_end))
            continue
        start = to_minutes(entry.start_time)
        end = to_minutes(entry.end_time)
        # Only in-window minutes not already blocked by a booking or earlier time off count
        clipped_start = max(start, window_start)
        clipped_end = min(end, window_end)
        if clipped_end > clipped_start:
            uncovered = (clipped_end - clipped_start) - covered_minutes(
                clipped_start, clipped_end, capacity.blocked
            )
            capacity.time_off_hours += uncovered / 60
        capacity.blocked.append(Interval(start, end))

    capacity.blocked.sort(key=lambda interval: (interval.start, interval.end))
    return capacity
