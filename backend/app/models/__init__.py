from app.models.staff import Staff
from app.models.availability import AvailabilityWindow, Weekday
from app.models.booking import Booking, BookingStatus, BookingType
from app.models.time_off import TimeOff, TimeOffStatus
from app.models.project import Project

__all__ = [
    "Staff",
    "AvailabilityWindow",
    "Weekday",
    "Booking",
    "BookingStatus",
    "BookingType",
    "TimeOff",
    "TimeOffStatus",
    "Project",
]
