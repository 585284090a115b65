"""
Availability Catalog

Read-only lookup of a staff member's recurring weekly working windows.
A missing window (or one marked unavailable) means zero capacity that day.
"""

from typing import Dict, Optional
from datetime import date
from sqlalchemy.orm import Session

from app.models.availability import AvailabilityWindow, Weekday


class AvailabilityCatalog:
    """Reads AvailabilityWindow rows; never writes."""

    def __init__(self, db: Session):
        self.db = db

    def get_window(self, staff_id: int, target_date: date) -> Optional[AvailabilityWindow]:
        """Get the working window for the weekday of target_date, if any."""
        weekday = Weekday.from_date(target_date)
        return self.db.query(AvailabilityWindow).filter(
            AvailabilityWindow.staff_id == staff_id,
            AvailabilityWindow.day_of_week == int(weekday),
            AvailabilityWindow.is_available.is_(True)
        ).first()

    def get_windows(self, staff_id: int) -> Dict[Weekday, AvailabilityWindow]:
        """Get every available window for a staff member keyed by weekday."""
        windows = self.db.query(AvailabilityWindow).filter(
            AvailabilityWindow.staff_id == staff_id,
            AvailabilityWindow.is_available.is_(True)
        ).order_by(AvailabilityWindow.day_of_week).all()
        return {window.weekday: window for window in windows}
