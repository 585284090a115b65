from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.staff import Staff
from app.schemas.staff import StaffResponse
from app.services.staff_roster import StaffRoster

router = APIRouter()


@router.get("/", response_model=List[StaffResponse])
async def list_staff(
    department: str = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List staff. Can filter by department."""
    query = db.query(Staff)
    if department:
        query = query.filter(Staff.department == department)
    return query.order_by(Staff.name).offset(skip).limit(limit).all()


@router.get("/{staff_id}/alternatives", response_model=List[StaffResponse])
async def list_alternatives(staff_id: int, db: Session = Depends(get_db)):
    """Same-department staff who could take the work instead."""
    roster = StaffRoster(db)
    if not roster.get_staff(staff_id):
        raise HTTPException(status_code=404, detail="Staff member not found")
    return roster.find_alternatives(staff_id)
