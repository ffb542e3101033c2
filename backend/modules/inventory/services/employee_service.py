"""Справочник сотрудников."""

import logging
import re
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.core.config import settings
from backend.modules.inventory.errors import ConflictError, NotFoundError, ValidationError
from backend.modules.inventory.models import Employee, Equipment, EquipmentEvent
from backend.modules.inventory.schemas.employee import EmployeeIn, EmployeeOut
from backend.modules.inventory.schemas.equipment import EquipmentOut
from backend.modules.inventory.services.equipment_service import (
    assign_employee,
    list_equipment,
)
from backend.modules.inventory.services.filters import EquipmentFilter
from backend.modules.inventory.services.transaction import reading, transaction
from backend.modules.inventory.services.validation import clean_text, optional_text

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
PHONE_MIN_DIGITS = 6
DUPLICATE_EMAIL_MESSAGE = "An employee with this email already exists."


def _to_out(employee: Employee, equipment_count: int) -> EmployeeOut:
    out = EmployeeOut.model_validate(employee)
    out.equipment_count = int(equipment_count or 0)
    return out


def _base_query(db: Session):
    return (
        db.query(Employee, func.count(Equipment.id))
        .outerjoin(Equipment, Equipment.employee_id == Employee.id)
        .group_by(Employee.id)
    )


def list_employees(db: Session, order: str = "name") -> List[EmployeeOut]:
    """
    Сотрудники с числом закреплённого оборудования.

    order="name": по фамилии, затем имени; order="territory": сначала
    по территории. Сравнение без учёта регистра.
    """
    name_order = [func.lower(Employee.last_name), func.lower(Employee.first_name), Employee.id]
    if order == "territory":
        name_order.insert(0, func.lower(Employee.territory))
    with reading(db):
        rows = _base_query(db).order_by(*name_order).all()
    return [_to_out(employee, count) for employee, count in rows]


def group_by_territory(employees: List[EmployeeOut]) -> Dict[str, List[EmployeeOut]]:
    """Группировка по территориям; каждая настроенная территория есть в ответе."""
    groups: Dict[str, List[EmployeeOut]] = {t: [] for t in settings.get_territories()}
    for employee in employees:
        groups.setdefault((employee.territory or "").lower(), []).append(employee)
    for members in groups.values():
        members.sort(key=lambda e: (e.display_name.lower(), e.id))
    return groups


def get_employee(db: Session, employee_id: int) -> EmployeeOut:
    with reading(db):
        row = _base_query(db).filter(Employee.id == employee_id).first()
    if not row:
        raise NotFoundError("Employee not found")
    return _to_out(*row)


def list_employee_equipment(db: Session, employee_id: int) -> List[EquipmentOut]:
    get_employee(db, employee_id)
    return list_equipment(db, EquipmentFilter(employee_id=employee_id))


def _validate(payload: EmployeeIn) -> dict:
    errors: List[str] = []
    data = {
        "first_name": clean_text(payload.first_name),
        "last_name": clean_text(payload.last_name),
        "email": optional_text(payload.email),
        "phone": optional_text(payload.phone),
        "role": optional_text(payload.role),
        "territory": clean_text(payload.territory).lower(),
        "comment": optional_text(payload.comment),
    }

    if not data["first_name"]:
        errors.append("First name is required.")
    if not data["last_name"]:
        errors.append("Last name is required.")
    if data["email"] and not EMAIL_RE.match(data["email"]):
        errors.append("Email address is not valid.")
    if data["phone"]:
        digits = re.sub(r"[^\d+]", "", data["phone"])
        if len(digits) < PHONE_MIN_DIGITS:
            errors.append("Phone number is not valid.")
    territories = settings.get_territories()
    if not data["territory"]:
        errors.append("Territory is required.")
    elif data["territory"] not in territories:
        errors.append("Territory must be one of: " + ", ".join(territories) + ".")

    if errors:
        raise ValidationError(errors, data=payload.model_dump())
    return data


def _email_taken(db: Session, email: Optional[str], exclude_id: Optional[int] = None) -> bool:
    if not email:
        return False
    q = db.query(Employee.id).filter(func.lower(Employee.email) == email.lower())
    if exclude_id is not None:
        q = q.filter(Employee.id != exclude_id)
    return q.first() is not None


def create_employee(db: Session, payload: EmployeeIn) -> EmployeeOut:
    data = _validate(payload)
    with transaction(db, conflict_message=DUPLICATE_EMAIL_MESSAGE):
        if _email_taken(db, data["email"]):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        employee = Employee(**data)
        db.add(employee)
    db.refresh(employee)
    logger.info("Создан сотрудник %s (%s)", employee.id, employee.display_name)
    return _to_out(employee, 0)


def update_employee(db: Session, employee_id: int, payload: EmployeeIn) -> EmployeeOut:
    """
    Изменение сотрудника: непереданные поля берутся из текущей записи.
    employee_label закреплённого оборудования обновляется.
    """
    with reading(db):
        current = db.query(Employee).filter(Employee.id == employee_id).first()
    if not current:
        raise NotFoundError("Employee not found")
    merged = {field: getattr(current, field) for field in EmployeeIn.model_fields}
    merged.update(payload.model_dump(exclude_unset=True))
    data = _validate(EmployeeIn(**merged))
    with transaction(db, conflict_message=DUPLICATE_EMAIL_MESSAGE):
        employee = db.query(Employee).filter(Employee.id == employee_id).first()
        if not employee:
            raise NotFoundError("Employee not found")
        if _email_taken(db, data["email"], exclude_id=employee_id):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        for field, value in data.items():
            setattr(employee, field, value)
        for equipment in employee.equipment_items:
            assign_employee(equipment, employee)
    return get_employee(db, employee_id)


def _detach(db: Session, employee_id: int) -> int:
    return (
        db.query(Equipment)
        .filter(Equipment.employee_id == employee_id)
        .update(
            {Equipment.employee_id: None, Equipment.employee_label: None},
            synchronize_session=False,
        )
    )


def detach_employee(db: Session, employee_id: int) -> int:
    """Снимает сотрудника со всего оборудования. Возвращает число строк."""
    with transaction(db):
        if not db.query(Employee.id).filter(Employee.id == employee_id).first():
            raise NotFoundError("Employee not found")
        detached = _detach(db, employee_id)
    return detached


def retire_employee(db: Session, employee_id: int) -> int:
    """
    Удаление сотрудника одной транзакцией: снятие с оборудования,
    обнуление ссылок в событиях Attribution, удаление записи.
    """
    with transaction(db):
        employee = db.query(Employee).filter(Employee.id == employee_id).first()
        if not employee:
            raise NotFoundError("Employee not found")
        detached = _detach(db, employee_id)
        db.query(EquipmentEvent).filter(
            EquipmentEvent.target_employee_id == employee_id
        ).update({EquipmentEvent.target_employee_id: None}, synchronize_session=False)
        db.expire(employee, ["equipment_items"])
        db.delete(employee)
    logger.info("Удалён сотрудник %s, снято оборудования: %s", employee_id, detached)
    return detached
