"""
Scheduling errors

Planning outcomes (no availability, insufficient or fragmented capacity,
exhausted horizon) are returned as warnings on search results. Only write
failures are raised, using the classes below.
"""

from typing import Dict, List, Optional


class SchedulingError(Exception):
    """Base class for errors raised by the booking engine."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict:
        return {"message": self.message, **self.details}


class NotFoundError(SchedulingError):
    """A referenced staff member, project or booking does not exist."""


class InvalidBookingTimeError(SchedulingError):
    """Slot times are inverted or fall outside the staff member's working window."""


class BookingConflictError(SchedulingError):
    """The slot overlaps an active booking or approved time off."""


class BookingWriteError(SchedulingError):
    """
    Insert/update failed, possibly after some records were written.

    failed_count is the number of records that could not be written;
    written_ids lists bookings that remain persisted after the failure.
    """

    def __init__(
        self,
        message: str,
        failed_count: int = 1,
        written_ids: Optional[List[int]] = None,
        details: Optional[Dict] = None
    ):
        super().__init__(message, details)
        self.failed_count = failed_count
        self.written_ids = written_ids or []

    def to_dict(self) -> Dict:
        return {
            "message": self.message,
            "failed_count": self.failed_count,
            "written_ids": self.written_ids,
            **self.details
        }


class InvalidStatusTransitionError(SchedulingError):
    """Requested booking status change is not allowed from the current status."""
