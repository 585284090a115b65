from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import time, datetime


class AvailabilityBase(BaseModel):
    day_of_week: int  # 1=Monday, 7=Sunday
    start_time: time
    end_time: time
    is_available: bool = True

    @field_validator("day_of_week")
    @classmethod
    def validate_day_of_week(cls, v):
        if v < 1 or v > 7:
            raise ValueError("day_of_week must be between 1 (Monday) and 7 (Sunday)")
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AvailabilityCreate(AvailabilityBase):
    staff_id: int


class AvailabilityUpdate(BaseModel):
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_available: Optional[bool] = None


class AvailabilityResponse(AvailabilityBase):
    id: int
    staff_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
