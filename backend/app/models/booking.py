from sqlalchemy import Column, Integer, String, Float, ForeignKey, Date, Time, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class BookingStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingType(str, enum.Enum):
    SHOOT = "shoot"
    EDIT = "edit"


class Booking(Base):
    __tablename__ = "project_bookings"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    hours_booked = Column(Float, nullable=False)
    status = Column(SQLEnum(BookingStatus, values_callable=lambda obj: [e.value for e in obj]), default=BookingStatus.SCHEDULED, nullable=False)
    type = Column(SQLEnum(BookingType, values_callable=lambda obj: [e.value for e in obj]), nullable=True)
    notes = Column(String(500))

    # Multi-day sequence tagging
    sequence_index = Column(Integer, nullable=True)
    sequence_total = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    project = relationship("Project", back_populates="bookings")
    staff = relationship("Staff", back_populates="bookings")

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def __repr__(self):
        return f"<Booking(id={self.id}, staff_id={self.staff_id}, date={self.booking_date}, {self.start_time}-{self.end_time})>"
