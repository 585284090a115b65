"""
Capacity Checker

Weekly capacity overview for one staff member, shown before booking:
per-weekday breakdown of window hours, booked hours and time off, the
approved time off in the period, same-department alternates when the
week cannot hold the project, and the multi-day option summary.
"""

from typing import List, Dict, Optional
from dataclasses import dataclass, field
from datetime import date, timedelta

from sqlalchemy.orm import Session

from app.models.availability import Weekday
from app.services.availability_catalog import AvailabilityCatalog
from app.services.commitment_ledger import CommitmentLedger
from app.services.staff_roster import StaffRoster
from app.services.capacity import DayCapacity, compute_day_capacity
from app.services.multi_day_allocator import MultiDayAllocator, MultiDayPlan
from app.config import get_settings

settings = get_settings()


@dataclass
class CapacityReport:
    staff_id: int
    project_hours: float
    has_capacity: bool
    weekly_available: float
    weekly_total: float
    daily_breakdown: List[DayCapacity] = field(default_factory=list)
    alternatives: List[Dict] = field(default_factory=list)
    time_off_conflicts: List[Dict] = field(default_factory=list)
    multi_day: Optional[MultiDayPlan] = None

    def to_dict(self) -> Dict:
        return {
            "staff_id": self.staff_id,
            "project_hours": self.project_hours,
            "has_capacity": self.has_capacity,
            "weekly_available": round(self.weekly_available, 2),
            "weekly_total": round(self.weekly_total, 2),
            "daily_breakdown": [d.to_dict() for d in self.daily_breakdown],
            "alternatives": self.alternatives,
            "time_off_conflicts": self.time_off_conflicts,
            "multi_day": {
                "can_fit": self.multi_day.can_fit,
                "total_days": self.multi_day.total_days,
                "message": self.multi_day.message
            } if self.multi_day else None
        }


class CapacityChecker:
    """Summarizes whether a staff member can take on a project soon."""

    def __init__(self, db: Session):
        self.db = db
        self.catalog = AvailabilityCatalog(db)
        self.ledger = CommitmentLedger(db)
        self.roster = StaffRoster(db)

    def check(
        self,
        staff_id: int,
        project_hours: float,
        reference_date: date,
        days: Optional[int] = None
    ) -> CapacityReport:
        """
        Weekday capacity for the `days` days starting at reference_date.

        Weekends are left out of the breakdown, matching the booking paths.
        """
        days = days or settings.weekly_check_days
        period_end = reference_date + timedelta(days=days)

        windows = self.catalog.get_windows(staff_id)
        bookings = self.ledger.get_bookings(staff_id, reference_date, period_end)
        time_off = self.ledger.get_time_off(staff_id, reference_date, period_end)

        breakdown = []
        for day_offset in range(days):
            current_date = reference_date + timedelta(days=day_offset)
            weekday = Weekday.from_date(current_date)
            if weekday.is_weekend:
                continue
            breakdown.append(
                compute_day_capacity(current_date, windows.get(weekday), bookings, time_off)
            )

        weekly_available = sum(d.available_hours for d in breakdown)
        weekly_total = sum(d.window_span_hours for d in breakdown)
        has_capacity = weekly_available >= project_hours

        alternatives = []
        if not has_capacity:
            alternatives = [
                {"id": s.id, "name": s.name, "role": s.role}
                for s in self.roster.find_alternatives(staff_id)
            ]

        multi_day = None
        if project_hours > 0:
            multi_day = MultiDayAllocator(self.db).allocate(staff_id, project_hours, reference_date)

        return CapacityReport(
            staff_id=staff_id,
            project_hours=project_hours,
            has_capacity=has_capacity,
            weekly_available=weekly_available,
            weekly_total=weekly_total,
            daily_breakdown=breakdown,
            alternatives=alternatives,
            time_off_conflicts=[
                {
                    "id": t.id,
                    "start_date": t.start_date.isoformat(),
                    "end_date": t.end_date.isoformat(),
                    "is_full_day": t.is_full_day,
                    "type": t.type,
                    "reason": t.reason
                }
                for t in time_off
            ],
            multi_day=multi_day
        )
