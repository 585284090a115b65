from typing import List
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.time_off import TimeOff, TimeOffStatus
from app.schemas.time_off import TimeOffCreate, TimeOffUpdate, TimeOffResponse

router = APIRouter()

# Pending requests can be decided; approved ones can still be cancelled
ALLOWED_TRANSITIONS = {
    TimeOffStatus.PENDING: {TimeOffStatus.APPROVED, TimeOffStatus.DENIED, TimeOffStatus.CANCELLED},
    TimeOffStatus.APPROVED: {TimeOffStatus.CANCELLED},
}


@router.get("/", response_model=List[TimeOffResponse])
async def list_time_off(
    staff_id: int = None,
    status: TimeOffStatus = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List time off. Can filter by staff_id and status."""
    query = db.query(TimeOff)
    if staff_id:
        query = query.filter(TimeOff.staff_id == staff_id)
    if status:
        query = query.filter(TimeOff.status == status)
    return query.order_by(TimeOff.start_date).offset(skip).limit(limit).all()


@router.post("/", response_model=TimeOffResponse)
async def create_time_off(
    request_data: TimeOffCreate,
    db: Session = Depends(get_db)
):
    """Create a new time off request."""
    time_off = TimeOff(**request_data.model_dump())
    db.add(time_off)
    db.commit()
    db.refresh(time_off)
    return time_off


@router.patch("/{time_off_id}", response_model=TimeOffResponse)
async def update_time_off(
    time_off_id: int,
    request_data: TimeOffUpdate,
    db: Session = Depends(get_db)
):
    """Approve, deny or cancel time off."""
    time_off = db.query(TimeOff).filter(TimeOff.id == time_off_id).first()
    if not time_off:
        raise HTTPException(status_code=404, detail="Time off not found")

    if request_data.status not in ALLOWED_TRANSITIONS.get(time_off.status, set()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change time off from {time_off.status.value} to {request_data.status.value}"
        )

    time_off.status = request_data.status
    if request_data.status == TimeOffStatus.APPROVED:
        time_off.approved_at = datetime.utcnow()

    db.commit()
    db.refresh(time_off)
    return time_off
