from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, time, datetime

from app.models.booking import BookingStatus, BookingType


class SlotSelection(BaseModel):
    date: date
    start_time: time
    end_time: time


class SlotSearchRequest(BaseModel):
    staff_id: int
    date: date
    hours: float = Field(..., gt=0, le=24, description="Requested duration in hours")


class MultiDayPlanRequest(BaseModel):
    staff_id: int
    hours: float = Field(..., gt=0, description="Total hours to spread across days")
    reference_date: Optional[date] = Field(None, description="First day considered (defaults to today)")
    lookahead_days: Optional[int] = Field(None, ge=1, le=90)
    min_daily_hours: Optional[float] = Field(None, gt=0, le=24)


class SingleBookingCreate(BaseModel):
    project_id: int
    staff_id: int
    slot: SlotSelection
    type: Optional[BookingType] = None
    notes: Optional[str] = None


class DualBookingCreate(BaseModel):
    project_id: int
    staff_id: int
    shoot_slot: SlotSelection
    edit_slot: SlotSelection


class MultiDayBookingCreate(BaseModel):
    project_id: int
    staff_id: int
    slots: List[SlotSelection] = Field(..., min_length=1)


class BookingReassign(BaseModel):
    staff_id: Optional[int] = None
    booking_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    id: int
    project_id: int
    staff_id: int
    booking_date: date
    start_time: time
    end_time: time
    hours_booked: float
    status: BookingStatus = BookingStatus.SCHEDULED
    type: Optional[BookingType] = None
    notes: Optional[str] = None
    sequence_index: Optional[int] = None
    sequence_total: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
