from pydantic import BaseModel, model_validator
from typing import Optional
from datetime import date, time, datetime

from app.models.time_off import TimeOffStatus


class TimeOffBase(BaseModel):
    start_date: date
    end_date: date
    is_full_day: bool = True
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    type: str = "holiday"
    reason: Optional[str] = None

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        if not self.is_full_day:
            if self.start_time is None or self.end_time is None:
                raise ValueError("Partial-day time off needs start_time and end_time")
            if self.end_time <= self.start_time:
                raise ValueError("end_time must be after start_time")
        return self


class TimeOffCreate(TimeOffBase):
    staff_id: int


class TimeOffUpdate(BaseModel):
    status: TimeOffStatus


class TimeOffResponse(TimeOffBase):
    id: int
    staff_id: int
    status: TimeOffStatus
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
