"""
Single-Day Slot Finder

Lists every contiguous slot of the requested length on one date for one
staff member:

1. No availability window for the weekday -> no slots
2. Remaining hours (window span - booked hours - time off) below the
   request -> capacity warning with alternates, no enumeration
3. Otherwise every step-aligned start inside the window that overlaps no
   booking or time off, in ascending order
4. Enough hours but no contiguous fit -> fragmented capacity warning

The finder never picks a slot; callers present all candidates and the user
confirms one before anything is written.
"""

from typing import List, Dict, Optional
from dataclasses import dataclass, field
from datetime import date, time
import logging

from sqlalchemy.orm import Session

from app.models.availability import Weekday
from app.services.availability_catalog import AvailabilityCatalog
from app.services.commitment_ledger import CommitmentLedger
from app.services.staff_roster import StaffRoster
from app.services.capacity import (
    CapacityWarning,
    DayCapacity,
    WarningType,
    compute_day_capacity,
    format_hours,
    from_minutes,
    hours_to_minutes,
)
from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


@dataclass
class CandidateSlot:
    """A contiguous interval on a date that fits the requested hours."""
    date: date
    start_time: time
    end_time: time
    hours: float

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "hours": self.hours
        }


@dataclass
class SlotSearchResult:
    """Candidates and planning warnings for one date."""
    staff_id: int
    date: date
    requested_hours: float
    slots: List[CandidateSlot] = field(default_factory=list)
    warnings: List[CapacityWarning] = field(default_factory=list)
    capacity: Optional[DayCapacity] = None
    alternatives: List[Dict] = field(default_factory=list)

    @property
    def has_slots(self) -> bool:
        return len(self.slots) > 0

    def to_dict(self) -> Dict:
        return {
            "staff_id": self.staff_id,
            "date": self.date.isoformat(),
            "requested_hours": self.requested_hours,
            "slots": [s.to_dict() for s in self.slots],
            "warnings": [w.to_dict() for w in self.warnings],
            "capacity": self.capacity.to_dict() if self.capacity else None,
            "alternatives": self.alternatives
        }


class SingleDaySlotFinder:
    """Computes candidate slots for a requested duration on one date."""

    def __init__(self, db: Session, step_minutes: Optional[int] = None):
        self.db = db
        self.catalog = AvailabilityCatalog(db)
        self.ledger = CommitmentLedger(db)
        self.roster = StaffRoster(db)
        self.step_minutes = step_minutes or settings.slot_step_minutes

    def _alternatives(self, staff_id: int) -> List[Dict]:
        return [
            {"id": s.id, "name": s.name, "role": s.role}
            for s in self.roster.find_alternatives(staff_id)
        ]

    def _insufficient_capacity_warning(
        self,
        remaining: float,
        requested: float,
        alternatives: List[Dict]
    ) -> CapacityWarning:
        if alternatives:
            names = ", ".join(a["name"] for a in alternatives)
            switch = f"choose another staff member ({names})"
        else:
            switch = "choose another staff member"
        return CapacityWarning(
            type=WarningType.INSUFFICIENT_CAPACITY,
            message=(
                f"Staff member only has {format_hours(remaining)} hours available but needs "
                f"{format_hours(requested)} hours. Please {switch}, reduce the hours, "
                f"or try a multi-day booking."
            ),
            details={
                "remaining_hours": round(remaining, 2),
                "requested_hours": requested,
                "shortfall_hours": round(requested - remaining, 2)
            }
        )

    def find_slots(self, staff_id: int, target_date: date, hours: float) -> SlotSearchResult:
        """
        Find every valid slot of `hours` length for staff_id on target_date.

        Args:
            staff_id: Staff member to book
            target_date: Date to search
            hours: Requested duration in hours (> 0)

        Returns:
            SlotSearchResult with ordered candidates and any capacity warnings
        """
        if hours <= 0:
            raise ValueError("Requested hours must be greater than zero")

        result = SlotSearchResult(staff_id=staff_id, date=target_date, requested_hours=hours)

        if Weekday.from_date(target_date).is_weekend:
            result.warnings.append(CapacityWarning(
                type=WarningType.NO_AVAILABILITY,
                message=f"Bookings are not placed on weekends ({target_date.strftime('%A')})",
                details={"day_name": target_date.strftime("%A")}
            ))
            return result

        window = self.catalog.get_window(staff_id, target_date)
        if window is None:
            result.warnings.append(CapacityWarning(
                type=WarningType.NO_AVAILABILITY,
                message=f"Staff member has no availability on {target_date.strftime('%A')}s",
                details={"day_of_week": int(Weekday.from_date(target_date))}
            ))
            return result

        bookings = self.ledger.get_bookings(staff_id, target_date, target_date)
        time_off = self.ledger.get_time_off(staff_id, target_date, target_date)
        capacity = compute_day_capacity(target_date, window, bookings, time_off)
        result.capacity = capacity

        if capacity.full_day_off:
            result.warnings.append(CapacityWarning(
                type=WarningType.TIME_OFF,
                message=f"Staff member has approved time off on {target_date.isoformat()}",
                details={"time_off_ids": [t.id for t in time_off]}
            ))
            return result

        remaining = capacity.available_hours
        logger.debug(
            "Slot search staff=%s date=%s window=%.2fh booked=%.2fh time_off=%.2fh requested=%.2fh",
            staff_id, target_date, capacity.window_span_hours, capacity.booked_hours,
            capacity.time_off_hours, hours
        )

        if remaining < hours:
            result.alternatives = self._alternatives(staff_id)
            result.warnings.append(
                self._insufficient_capacity_warning(remaining, hours, result.alternatives)
            )
            return result

        duration = hours_to_minutes(hours)
        for start in capacity.candidate_starts(duration, self.step_minutes):
            if capacity.fits(start, duration):
                result.slots.append(CandidateSlot(
                    date=target_date,
                    start_time=from_minutes(start),
                    end_time=from_minutes(start + duration),
                    hours=hours
                ))

        if not result.slots:
            result.alternatives = self._alternatives(staff_id)
            result.warnings.append(CapacityWarning(
                type=WarningType.FRAGMENTED_CAPACITY,
                message=(
                    f"No available slots found for {format_hours(hours)} hours on "
                    f"{target_date.isoformat()}. This staff member is at capacity. "
                    f"Try a multi-day booking to split the work."
                ),
                details={
                    "remaining_hours": round(remaining, 2),
                    "requested_hours": hours
                }
            ))

        return result
