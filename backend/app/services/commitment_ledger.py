"""
Commitment Ledger

Read-only lookup of the time a staff member has already committed:
active bookings and approved time off. Results are raw interval lists,
not merged. Database errors propagate to the caller unchanged.
"""

from typing import List
from datetime import date
from sqlalchemy.orm import Session

from app.models.booking import Booking, BookingStatus
from app.models.time_off import TimeOff, TimeOffStatus


class CommitmentLedger:
    """Reads Booking and TimeOff rows for capacity calculations."""

    def __init__(self, db: Session):
        self.db = db

    def get_bookings(self, staff_id: int, start_date: date, end_date: date) -> List[Booking]:
        """Active (non-cancelled) bookings with start_date <= booking_date <= end_date."""
        return self.db.query(Booking).filter(
            Booking.staff_id == staff_id,
            Booking.status != BookingStatus.CANCELLED,
            Booking.booking_date >= start_date,
            Booking.booking_date <= end_date
        ).order_by(Booking.booking_date, Booking.start_time).all()

    def get_time_off(self, staff_id: int, start_date: date, end_date: date) -> List[TimeOff]:
        """Approved time off overlapping the date range."""
        return self.db.query(TimeOff).filter(
            TimeOff.staff_id == staff_id,
            TimeOff.status == TimeOffStatus.APPROVED,
            TimeOff.start_date <= end_date,
            TimeOff.end_date >= start_date
        ).order_by(TimeOff.start_date).all()
