from typing import Dict, Any, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.staff import Staff
from app.services.capacity_checker import CapacityChecker

router = APIRouter()


@router.get("/staff/{staff_id}")
async def get_staff_capacity(
    staff_id: int,
    hours: float = Query(..., gt=0, description="Hours the project needs"),
    reference_date: Optional[date] = Query(None, description="First day of the period (defaults to today)"),
    days: Optional[int] = Query(None, ge=1, le=31),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Weekly capacity overview for a staff member, with alternates and the multi-day option."""
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found")

    checker = CapacityChecker(db)
    report = checker.check(staff_id, hours, reference_date or date.today(), days)
    return report.to_dict()
