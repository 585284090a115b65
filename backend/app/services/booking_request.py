from typing import Dict, Optional
from dataclasses import dataclass
from datetime import date

from app.models.booking import BookingType
from app.models.project import Project


@dataclass
class BookingRequest:
    """
    Hours to book for a project, resolved from its estimates.

    A project with both shoot and edit estimates needs a dual booking;
    one with only one of them books that part alone; one with neither
    books its overall estimate.
    """
    staff_id: Optional[int]
    total_hours: float
    earliest_date: date
    shoot_hours: Optional[float] = None
    edit_hours: Optional[float] = None

    @classmethod
    def from_project(cls, project: Project, earliest_date: date) -> "BookingRequest":
        return cls(
            staff_id=project.assigned_staff_id,
            total_hours=project.estimated_hours or 0.0,
            earliest_date=earliest_date,
            shoot_hours=project.estimated_shoot_hours,
            edit_hours=project.estimated_edit_hours,
        )

    @property
    def has_shoot(self) -> bool:
        return self.shoot_hours is not None and self.shoot_hours > 0

    @property
    def has_edit(self) -> bool:
        return self.edit_hours is not None and self.edit_hours > 0

    @property
    def needs_dual_booking(self) -> bool:
        return self.has_shoot and self.has_edit

    @property
    def mode(self) -> str:
        if self.needs_dual_booking:
            return "dual"
        if self.has_shoot:
            return BookingType.SHOOT.value
        if self.has_edit:
            return BookingType.EDIT.value
        return "project"

    @property
    def booking_type(self) -> Optional[BookingType]:
        """Type tag for a single booking; None for untyped or dual requests."""
        if self.mode in (BookingType.SHOOT.value, BookingType.EDIT.value):
            return BookingType(self.mode)
        return None

    def hours_for(self, step: Optional[BookingType] = None) -> float:
        """Hours for the current booking step (shoot/edit in a dual flow)."""
        if self.needs_dual_booking:
            if step == BookingType.SHOOT:
                return self.shoot_hours
            if step == BookingType.EDIT:
                return self.edit_hours
            return 0.0
        if self.has_shoot:
            return self.shoot_hours
        if self.has_edit:
            return self.edit_hours
        return self.total_hours

    def to_dict(self) -> Dict:
        data = {
            "staff_id": self.staff_id,
            "earliest_date": self.earliest_date.isoformat(),
            "mode": self.mode,
            "total_hours": self.total_hours,
        }
        if self.needs_dual_booking:
            data["shoot_hours"] = self.hours_for(BookingType.SHOOT)
            data["edit_hours"] = self.hours_for(BookingType.EDIT)
        else:
            data["hours"] = self.hours_for()
        return data
