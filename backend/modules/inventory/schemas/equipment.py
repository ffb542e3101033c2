"""Схемы для оборудования."""

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from .credential import CredentialIn, CredentialOut


class EquipmentIn(BaseModel):
    """
    Ввод формы оборудования.

    Поля намеренно "сырые" (строки/числа): проверка и нормализация
    делаются в equipment_service, чтобы вернуть все ошибки списком.
    credentials=None при обновлении оставляет набор без изменений.
    """

    type_id: Optional[int] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    state: Optional[str] = None
    purchase_date: Optional[str] = None
    purchase_place: Optional[str] = None
    price: Optional[Union[float, str]] = None  # "12,50" допускается
    warranty_years: Optional[Union[int, str]] = None
    employee_id: Optional[int] = None
    comment: Optional[str] = None
    credentials: Optional[List[CredentialIn]] = None


class EquipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type_id: Optional[int] = None
    type_label: str = ""
    brand: str
    model: str
    serial_number: Optional[str] = None
    state: str
    purchase_date: Optional[date] = None
    purchase_place: Optional[str] = None
    price: Optional[float] = None
    warranty_years: Optional[int] = None
    employee_id: Optional[int] = None
    employee_label: Optional[str] = None
    comment: Optional[str] = None
    invoice_ref: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Дополнительные поля из JOIN
    type_name: Optional[str] = None
    type_description: Optional[str] = None
    employee_email: Optional[str] = None
    employee_phone: Optional[str] = None
    employee_role: Optional[str] = None
    employee_territory: Optional[str] = None


class EquipmentDetailOut(EquipmentOut):
    credentials: List[CredentialOut] = []


class EmployeeOption(BaseModel):
    id: int
    display_name: str


class FilterOptionsOut(BaseModel):
    types: List[str] = []
    brands: List[str] = []
    years: List[str] = []
    employees: List[EmployeeOption] = []
