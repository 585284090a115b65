from pydantic import BaseModel
from typing import Optional


class StaffResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True

    class Config:
        from_attributes = True
