from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True)
    role = Column(String(100))
    department = Column(String(100), index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    availability = relationship("AvailabilityWindow", back_populates="staff")
    bookings = relationship("Booking", back_populates="staff")
    time_off = relationship("TimeOff", back_populates="staff")

    def __repr__(self):
        return f"<Staff(id={self.id}, name={self.name}, department={self.department})>"
