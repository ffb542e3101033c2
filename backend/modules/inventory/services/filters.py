"""
Критерии фильтрации списка оборудования.

Параметры запроса приходят "как есть" (строки из формы фильтров);
EquipmentFilter.from_params приводит их к типам, build_predicates
собирает из заполненных полей список условий SQLAlchemy.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional

from sqlalchemy import func, literal, or_
from sqlalchemy.sql.elements import ColumnElement

from backend.modules.inventory.constants import FILTER_ALL_SENTINELS, STATE_VALUES
from backend.modules.inventory.models import Employee, Equipment, EquipmentType

_YEAR_RE = re.compile(r"^\d{4}$")


def employee_name_expr():
    """TRIM(first_name || ' ' || last_name) для JOIN на employees."""
    return func.trim(
        func.coalesce(Employee.first_name, "") + literal(" ") + func.coalesce(Employee.last_name, "")
    )


def type_label_expr():
    """Название связанного типа, иначе текстовое поле type_label."""
    return func.coalesce(EquipmentType.name, Equipment.type_label)


def _normalize(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in FILTER_ALL_SENTINELS:
        return None
    return text


@dataclass
class EquipmentFilter:
    search: Optional[str] = None
    state: Optional[str] = None
    type_label: Optional[str] = None
    employee_id: Optional[int] = None
    year: Optional[str] = None
    brand: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        search: Any = None,
        state: Any = None,
        type_label: Any = None,
        employee: Any = None,
        year: Any = None,
        brand: Any = None,
    ) -> "EquipmentFilter":
        state_value = _normalize(state)
        if state_value not in STATE_VALUES:
            state_value = None

        employee_value = _normalize(employee)
        employee_id = int(employee_value) if employee_value and employee_value.isdigit() else None

        year_value = _normalize(year)
        if year_value and not _YEAR_RE.match(year_value):
            year_value = None

        search_value = search.strip() if isinstance(search, str) else None

        return cls(
            search=search_value or None,
            state=state_value,
            type_label=_normalize(type_label),
            employee_id=employee_id,
            year=year_value,
            brand=_normalize(brand),
        )

    def is_empty(self) -> bool:
        return not any(
            (self.search, self.state, self.type_label, self.employee_id, self.year, self.brand)
        )


def build_predicates(criteria: EquipmentFilter) -> List[ColumnElement]:
    """
    Условия WHERE для запроса оборудования.

    Запрос должен содержать LEFT JOIN на employees и equipment_types.
    """
    clauses: List[ColumnElement] = []

    if criteria.search:
        like = f"%{criteria.search}%"
        clauses.append(
            or_(
                Equipment.type_label.ilike(like),
                EquipmentType.name.ilike(like),
                Equipment.brand.ilike(like),
                Equipment.model.ilike(like),
                Equipment.serial_number.ilike(like),
                Equipment.purchase_place.ilike(like),
                Equipment.comment.ilike(like),
                Employee.first_name.ilike(like),
                Employee.last_name.ilike(like),
                employee_name_expr().ilike(like),
                Employee.territory.ilike(like),
            )
        )

    if criteria.state:
        clauses.append(Equipment.state == criteria.state)

    if criteria.type_label:
        clauses.append(type_label_expr() == criteria.type_label)

    if criteria.employee_id is not None:
        clauses.append(Equipment.employee_id == criteria.employee_id)

    if criteria.year:
        clauses.append(func.strftime("%Y", Equipment.purchase_date) == criteria.year)

    if criteria.brand:
        clauses.append(Equipment.brand == criteria.brand)

    return clauses
