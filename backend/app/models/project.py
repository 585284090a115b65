from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Project(Base):
    """Project record supplied by the surrounding workflow; read for booking hours."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    estimated_hours = Column(Float)
    estimated_shoot_hours = Column(Float)
    estimated_edit_hours = Column(Float)
    assigned_staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    assigned_staff = relationship("Staff")
    bookings = relationship("Booking", back_populates="project")

    def __repr__(self):
        return f"<Project(id={self.id}, title={self.title}, staff_id={self.assigned_staff_id})>"
