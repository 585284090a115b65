from fastapi import HTTPException, status

from app.core.errors import (
    BookingConflictError,
    BookingWriteError,
    InvalidBookingTimeError,
    InvalidStatusTransitionError,
    NotFoundError,
    SchedulingError,
)


_STATUS_CODES = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    BookingConflictError: status.HTTP_409_CONFLICT,
    InvalidStatusTransitionError: status.HTTP_409_CONFLICT,
    InvalidBookingTimeError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    BookingWriteError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(exc: SchedulingError) -> HTTPException:
    """Map an engine error to an HTTPException with a structured detail."""
    status_code = _STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=exc.to_dict())
