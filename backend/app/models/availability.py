from sqlalchemy import Column, Integer, ForeignKey, Boolean, Time, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import date
import enum

from app.core.database import Base


class Weekday(enum.IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return cls(value.isoweekday())

    @property
    def is_weekend(self) -> bool:
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)


class AvailabilityWindow(Base):
    __tablename__ = "staff_availability"
    __table_args__ = (
        UniqueConstraint("staff_id", "day_of_week", name="uq_staff_availability_staff_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 1=Monday, 7=Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    staff = relationship("Staff", back_populates="availability")

    @property
    def weekday(self) -> Weekday:
        return Weekday(self.day_of_week)

    @property
    def span_hours(self) -> float:
        """Length of the working window in hours."""
        start_minutes = self.start_time.hour * 60 + self.start_time.minute
        end_minutes = self.end_time.hour * 60 + self.end_time.minute
        return max(0, end_minutes - start_minutes) / 60

    def __repr__(self):
        return f"<AvailabilityWindow(staff_id={self.staff_id}, day={self.day_of_week}, {self.start_time}-{self.end_time})>"
