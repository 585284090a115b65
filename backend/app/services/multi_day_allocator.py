"""
Multi-Day Allocator

Spreads a total-hours requirement across the days following a reference
date when no single day can hold it. Greedy earliest-fit:

- weekends are always skipped
- days without an availability window are skipped
- days whose free capacity is below the minimum daily session are skipped,
  even when the remainder would fit exactly
- every other day takes min(remaining, available) hours from the start of
  the working window, sliding later around existing commitments
- when no contiguous block of that length exists, the day's longest free run
  is booked instead (capped at the remaining hours), provided it still meets
  the minimum daily session

The allocator never revisits an earlier day to tighten the packing, so the
result is first-fit rather than optimal. Identical inputs always produce
identical plans.
"""

from typing import List, Dict, Optional
from dataclasses import dataclass, field
from datetime import date, time, timedelta
import logging

from sqlalchemy.orm import Session

from app.models.availability import Weekday
from app.services.availability_catalog import AvailabilityCatalog
from app.services.commitment_ledger import CommitmentLedger
from app.services.capacity import (
    CapacityWarning,
    WarningType,
    compute_day_capacity,
    format_hours,
    from_minutes,
    hours_to_minutes,
)
from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Hours are compared after rounding to avoid float drift from half-hour requests
_PRECISION = 6


@dataclass
class PlanSlot:
    """One day's session within a multi-day plan."""
    date: date
    start_time: time
    end_time: time
    hours: float
    sequence: int

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "hours": self.hours,
            "sequence": self.sequence
        }


@dataclass
class SkippedDay:
    date: date
    reason: str
    available_hours: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "reason": self.reason,
            "available_hours": round(self.available_hours, 2)
        }


@dataclass
class MultiDayPlan:
    """Result of a multi-day allocation."""
    staff_id: int
    requested_hours: float
    can_fit: bool
    slots: List[PlanSlot] = field(default_factory=list)
    message: str = ""
    warnings: List[CapacityWarning] = field(default_factory=list)
    skipped_days: List[SkippedDay] = field(default_factory=list)

    @property
    def total_days(self) -> int:
        return len(self.slots)

    @property
    def allocated_hours(self) -> float:
        return round(sum(s.hours for s in self.slots), _PRECISION)

    def to_dict(self) -> Dict:
        return {
            "staff_id": self.staff_id,
            "requested_hours": self.requested_hours,
            "can_fit": self.can_fit,
            "total_days": self.total_days,
            "allocated_hours": self.allocated_hours,
            "slots": [s.to_dict() for s in self.slots],
            "message": self.message,
            "warnings": [w.to_dict() for w in self.warnings],
            "skipped_days": [d.to_dict() for d in self.skipped_days]
        }


def _short_date(value: date) -> str:
    return f"{value.strftime('%b')} {value.day}"


def summarize_plan(slots: List[PlanSlot]) -> str:
    """Human-readable summary of a plan, e.g. for a confirmation dialog."""
    if len(slots) == 1:
        return f"Can be booked on {_short_date(slots[0].date)} ({format_hours(slots[0].hours)}h)"

    total_hours = round(sum(s.hours for s in slots), _PRECISION)
    days_list = ", ".join(
        f"{_short_date(s.date)} ({format_hours(s.hours)}h)" for s in slots
    )
    return f"Can be split across {len(slots)} days: {days_list} - Total: {format_hours(total_hours)}h"


class MultiDayAllocator:
    """Greedy first-fit allocation of hours over a bounded lookahead horizon."""

    def __init__(
        self,
        db: Session,
        lookahead_days: Optional[int] = None,
        min_daily_hours: Optional[float] = None,
        step_minutes: Optional[int] = None
    ):
        self.db = db
        self.catalog = AvailabilityCatalog(db)
        self.ledger = CommitmentLedger(db)
        self.lookahead_days = lookahead_days if lookahead_days is not None else settings.lookahead_days
        self.min_daily_hours = min_daily_hours if min_daily_hours is not None else settings.min_daily_hours
        self.step_minutes = step_minutes or settings.slot_step_minutes

    def allocate(self, staff_id: int, total_hours: float, reference_date: date) -> MultiDayPlan:
        """
        Plan `total_hours` for staff_id over the horizon starting at reference_date.

        Args:
            staff_id: Staff member to book
            total_hours: Total hours required (> 0)
            reference_date: First day considered (day offset 0)

        Returns:
            MultiDayPlan; nothing is written
        """
        if total_hours <= 0:
            raise ValueError("Requested hours must be greater than zero")

        horizon_end = reference_date + timedelta(days=self.lookahead_days)

        # Batch-load everything for the horizon up front
        windows = self.catalog.get_windows(staff_id)
        bookings = self.ledger.get_bookings(staff_id, reference_date, horizon_end)
        time_off = self.ledger.get_time_off(staff_id, reference_date, horizon_end)

        plan = MultiDayPlan(staff_id=staff_id, requested_hours=total_hours, can_fit=False)
        remaining = total_hours

        for day_offset in range(self.lookahead_days):
            if remaining <= 0:
                break

            current_date = reference_date + timedelta(days=day_offset)
            weekday = Weekday.from_date(current_date)
            if weekday.is_weekend:
                continue

            window = windows.get(weekday)
            if window is None:
                plan.skipped_days.append(SkippedDay(current_date, "no_availability"))
                continue

            capacity = compute_day_capacity(current_date, window, bookings, time_off)
            available = capacity.available_hours
            if available < self.min_daily_hours:
                plan.skipped_days.append(SkippedDay(current_date, "below_minimum", available))
                continue

            hours_to_book = min(remaining, available)
            duration = hours_to_minutes(hours_to_book)

            # Prefer the start of the window; slide later only around existing commitments
            start = capacity.window_start
            if not capacity.fits(start, duration):
                start = capacity.first_fit(duration, self.step_minutes)
            if start is None:
                # No contiguous block of that length: take the longest free run instead
                run = capacity.longest_free_run()
                run_hours = run.minutes / 60 if run else 0.0
                if run is None or run_hours < self.min_daily_hours:
                    plan.skipped_days.append(SkippedDay(current_date, "fragmented", available))
                    continue
                start = run.start
                hours_to_book = round(min(hours_to_book, run_hours), _PRECISION)
                duration = hours_to_minutes(hours_to_book)

            plan.slots.append(PlanSlot(
                date=current_date,
                start_time=from_minutes(start),
                end_time=from_minutes(start + duration),
                hours=hours_to_book,
                sequence=len(plan.slots) + 1
            ))
            remaining = round(remaining - hours_to_book, _PRECISION)

        if not plan.slots:
            plan.message = (
                f"Cannot fit {format_hours(total_hours)} hours in the next "
                f"{self.lookahead_days} days"
            )
            plan.warnings.append(CapacityWarning(
                type=WarningType.HORIZON_EXHAUSTED,
                message=plan.message,
                details={"lookahead_days": self.lookahead_days}
            ))
            logger.info("No multi-day plan for staff=%s hours=%s", staff_id, total_hours)
            return plan

        plan.can_fit = plan.allocated_hours >= round(total_hours, _PRECISION)
        plan.message = summarize_plan(plan.slots)

        if not plan.can_fit:
            shortfall = round(total_hours - plan.allocated_hours, _PRECISION)
            plan.warnings.append(CapacityWarning(
                type=WarningType.HORIZON_EXHAUSTED,
                message=(
                    f"Only {format_hours(plan.allocated_hours)} of {format_hours(total_hours)} hours "
                    f"fit in the next {self.lookahead_days} days ({format_hours(shortfall)}h short)"
                ),
                details={
                    "lookahead_days": self.lookahead_days,
                    "allocated_hours": plan.allocated_hours,
                    "shortfall_hours": shortfall
                }
            ))

        logger.info(
            "Multi-day plan staff=%s hours=%s days=%s can_fit=%s",
            staff_id, total_hours, plan.total_days, plan.can_fit
        )
        return plan
