"""
Схемы для сотрудников
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EmployeeIn(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None  # должность
    territory: Optional[str] = None
    comment: Optional[str] = None


class EmployeeOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    display_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    territory: str
    comment: Optional[str] = None
    equipment_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
