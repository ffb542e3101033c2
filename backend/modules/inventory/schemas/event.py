"""
Схемы для событий жизненного цикла оборудования
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EventIn(BaseModel):
    """Сырые поля формы события; проверка: в event_service."""
    category: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[str] = None
    target_employee_id: Optional[str] = None
    target_state: Optional[str] = None


class EventOut(BaseModel):
    id: int
    equipment_id: int
    category: str
    description: Optional[str] = None
    event_date: date
    document_ref: Optional[str] = None
    target_employee_id: Optional[int] = None
    target_state: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Дополнительные поля из JOIN
    target_employee_name: Optional[str] = None
    target_employee_territory: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
