from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.availability import AvailabilityWindow
from app.schemas.availability import AvailabilityCreate, AvailabilityUpdate, AvailabilityResponse

router = APIRouter()


@router.get("/staff/{staff_id}", response_model=List[AvailabilityResponse])
async def get_staff_availability(
    staff_id: int,
    db: Session = Depends(get_db)
):
    """Get weekly availability windows for a staff member."""
    availability = db.query(AvailabilityWindow).filter(
        AvailabilityWindow.staff_id == staff_id
    ).order_by(AvailabilityWindow.day_of_week).all()
    return availability


@router.post("/", response_model=AvailabilityResponse)
async def create_availability(
    availability_data: AvailabilityCreate,
    db: Session = Depends(get_db)
):
    """Create or replace the window for a staff member's weekday."""
    # One window per staff member and weekday
    existing = db.query(AvailabilityWindow).filter(
        AvailabilityWindow.staff_id == availability_data.staff_id,
        AvailabilityWindow.day_of_week == availability_data.day_of_week
    ).first()

    if existing:
        for field, value in availability_data.model_dump().items():
            setattr(existing, field, value)
        db.commit()
        db.refresh(existing)
        return existing

    availability = AvailabilityWindow(**availability_data.model_dump())
    db.add(availability)
    db.commit()
    db.refresh(availability)
    return availability


@router.patch("/{availability_id}", response_model=AvailabilityResponse)
async def update_availability(
    availability_id: int,
    availability_data: AvailabilityUpdate,
    db: Session = Depends(get_db)
):
    """Update a window's hours or availability flag."""
    availability = db.query(AvailabilityWindow).filter(AvailabilityWindow.id == availability_id).first()
    if not availability:
        raise HTTPException(status_code=404, detail="Availability not found")

    update_data = availability_data.model_dump(exclude_unset=True)
    start_time = update_data.get("start_time", availability.start_time)
    end_time = update_data.get("end_time", availability.end_time)
    if end_time <= start_time:
        raise HTTPException(status_code=422, detail="end_time must be after start_time")

    for field, value in update_data.items():
        setattr(availability, field, value)

    db.commit()
    db.refresh(availability)
    return availability
