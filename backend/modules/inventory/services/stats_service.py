"""Агрегированная статистика инвентаря."""

from typing import Dict, Iterable, List

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from backend.core.config import settings
from backend.modules.inventory.constants import STATE_VALUES, UNASSIGNED_TERRITORY, EquipmentState
from backend.modules.inventory.models import Employee, Equipment, EquipmentType
from backend.modules.inventory.schemas.stats import BreakdownRow, InventoryStatsOut, StateCount
from backend.modules.inventory.services.filters import type_label_expr
from backend.modules.inventory.services.transaction import reading

_VALUE = func.sum(func.coalesce(Equipment.price, 0))


def _rows(result: Iterable) -> List[BreakdownRow]:
    return [
        BreakdownRow(
            key=(key or "").strip(),
            count=int(count or 0),
            total_value=float(value or 0),
        )
        for key, count, value in result
    ]


def _order(rows: List[BreakdownRow], value_order: bool) -> List[BreakdownRow]:
    if value_order:
        return sorted(rows, key=lambda r: (-r.total_value, r.key.lower()))
    return sorted(rows, key=lambda r: r.key.lower())


def _territory_breakdown(db: Session) -> List[BreakdownRow]:
    """Сначала настроенные территории (в порядке настройки), затем non_attribue."""
    territory = func.trim(func.coalesce(Employee.territory, ""))
    key = case((territory == "", UNASSIGNED_TERRITORY), else_=func.lower(territory))
    result = (
        db.query(key, func.count(Equipment.id), _VALUE)
        .select_from(Equipment)
        .outerjoin(Employee, Equipment.employee_id == Employee.id)
        .group_by(key)
        .all()
    )
    summary: Dict[str, BreakdownRow] = {row.key.lower(): row for row in _rows(result)}

    ordered = [
        summary.get(name, BreakdownRow(key=name)) for name in settings.get_territories()
    ]
    if UNASSIGNED_TERRITORY in summary:
        ordered.append(summary[UNASSIGNED_TERRITORY])
    return ordered


def compute_inventory_stats(db: Session, value_order: bool = False) -> InventoryStatsOut:
    """
    Сводка: количества, стоимость и разбивки по территории, типу,
    марке и поставщику. Отсутствующая цена считается нулём.

    value_order=True сортирует разбивки по типу/марке/поставщику по
    убыванию стоимости (так их показывает выгрузка в Excel).
    """
    with reading(db):
        total_count, total_value = (
            db.query(func.count(Equipment.id), _VALUE).select_from(Equipment).one()
        )
        state_counts = dict(
            db.query(Equipment.state, func.count(Equipment.id)).group_by(Equipment.state).all()
        )
        employee_count = db.query(func.count(Employee.id)).scalar()
        type_count = db.query(func.count(EquipmentType.id)).scalar()

        by_territory = _territory_breakdown(db)

        label = type_label_expr()
        by_type = _rows(
            db.query(label, func.count(Equipment.id), _VALUE)
            .select_from(Equipment)
            .outerjoin(EquipmentType, Equipment.type_id == EquipmentType.id)
            .group_by(label)
            .all()
        )
        by_brand = _rows(
            db.query(Equipment.brand, func.count(Equipment.id), _VALUE)
            .filter(Equipment.brand.isnot(None), func.trim(Equipment.brand) != "")
            .group_by(Equipment.brand)
            .all()
        )
        by_vendor = _rows(
            db.query(Equipment.purchase_place, func.count(Equipment.id), _VALUE)
            .filter(Equipment.purchase_place.isnot(None), func.trim(Equipment.purchase_place) != "")
            .group_by(Equipment.purchase_place)
            .all()
        )

    return InventoryStatsOut(
        total_count=int(total_count or 0),
        total_value=float(total_value or 0),
        broken_count=state_counts.get(EquipmentState.BROKEN.value, 0),
        available_count=state_counts.get(EquipmentState.AVAILABLE.value, 0),
        in_service_count=state_counts.get(EquipmentState.IN_SERVICE.value, 0),
        unavailable_count=state_counts.get(EquipmentState.UNAVAILABLE.value, 0),
        employee_count=int(employee_count or 0),
        type_count=int(type_count or 0),
        by_territory=by_territory,
        by_type=_order(by_type, value_order),
        by_brand=_order(by_brand, value_order),
        by_vendor=_order(by_vendor, value_order),
        state_distribution=[
            StateCount(state=state, count=state_counts.get(state, 0)) for state in STATE_VALUES
        ],
    )
