from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Date, Time, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class TimeOffStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"


class TimeOff(Base):
    __tablename__ = "staff_time_off"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_full_day = Column(Boolean, default=True, nullable=False)
    start_time = Column(Time, nullable=True)  # Only for partial days
    end_time = Column(Time, nullable=True)
    type = Column(String(50), default="holiday")
    reason = Column(String(500))
    status = Column(SQLEnum(TimeOffStatus, values_callable=lambda obj: [e.value for e in obj]), default=TimeOffStatus.PENDING, nullable=False)
    approved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    staff = relationship("Staff", back_populates="time_off")

    def covers(self, target_date) -> bool:
        return self.start_date <= target_date <= self.end_date

    def __repr__(self):
        return f"<TimeOff(id={self.id}, staff_id={self.staff_id}, {self.start_date} to {self.end_date}, status={self.status})>"
