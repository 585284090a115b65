from typing import Dict, Any, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.project import Project
from app.services.booking_request import BookingRequest

router = APIRouter()


@router.get("/{project_id}/booking-request")
async def get_booking_request(
    project_id: int,
    earliest_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Hours to book for a project and whether it needs a shoot + edit pair."""
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    request = BookingRequest.from_project(project, earliest_date or date.today())
    return request.to_dict()
