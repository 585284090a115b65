from app.schemas.staff import StaffResponse
from app.schemas.availability import AvailabilityCreate, AvailabilityUpdate, AvailabilityResponse
from app.schemas.time_off import TimeOffCreate, TimeOffUpdate, TimeOffResponse
from app.schemas.booking import (
    SlotSelection, SlotSearchRequest, MultiDayPlanRequest,
    SingleBookingCreate, DualBookingCreate, MultiDayBookingCreate,
    BookingReassign, BookingStatusUpdate, BookingResponse,
)

__all__ = [
    "StaffResponse",
    "AvailabilityCreate", "AvailabilityUpdate", "AvailabilityResponse",
    "TimeOffCreate", "TimeOffUpdate", "TimeOffResponse",
    "SlotSelection", "SlotSearchRequest", "MultiDayPlanRequest",
    "SingleBookingCreate", "DualBookingCreate", "MultiDayBookingCreate",
    "BookingReassign", "BookingStatusUpdate", "BookingResponse",
]
