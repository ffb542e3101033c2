"""
Схемы для типов оборудования
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EquipmentTypeIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class EquipmentTypeOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    equipment_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
