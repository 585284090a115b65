from typing import List
from sqlalchemy.orm import Session

from app.models.staff import Staff


class StaffRoster:
    """Staff lookups used to suggest alternates when capacity is short."""

    def __init__(self, db: Session):
        self.db = db

    def get_staff(self, staff_id: int):
        return self.db.query(Staff).filter(Staff.id == staff_id).first()

    def find_alternatives(self, staff_id: int) -> List[Staff]:
        """Active staff in the same department as staff_id, excluding them."""
        staff = self.get_staff(staff_id)
        if not staff or not staff.department:
            return []
        return self.db.query(Staff).filter(
            Staff.id != staff_id,
            Staff.department == staff.department,
            Staff.is_active.is_(True)
        ).order_by(Staff.name).all()
