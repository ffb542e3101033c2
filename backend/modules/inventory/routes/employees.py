"""Роуты /inventory/employees: сотрудники."""

from typing import Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.schemas.employee import EmployeeIn, EmployeeOut
from backend.modules.inventory.schemas.equipment import EquipmentOut
from backend.modules.inventory.services import employee_service

router = APIRouter(
    prefix="/employees",
    tags=["employees"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/", response_model=List[EmployeeOut])
def list_employees(
    db: Session = Depends(get_db),
    order: str = Query("name", pattern="^(name|territory)$"),
) -> List[EmployeeOut]:
    return employee_service.list_employees(db, order=order)


@router.get("/by-territory", response_model=Dict[str, List[EmployeeOut]])
def employees_by_territory(db: Session = Depends(get_db)) -> Dict[str, List[EmployeeOut]]:
    return employee_service.group_by_territory(employee_service.list_employees(db))


@router.post("/", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeIn, db: Session = Depends(get_db)) -> EmployeeOut:
    return employee_service.create_employee(db, payload)


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, db: Session = Depends(get_db)) -> EmployeeOut:
    return employee_service.get_employee(db, employee_id)


@router.get("/{employee_id}/equipment", response_model=List[EquipmentOut])
def get_employee_equipment(employee_id: int, db: Session = Depends(get_db)) -> List[EquipmentOut]:
    return employee_service.list_employee_equipment(db, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int, payload: EmployeeIn, db: Session = Depends(get_db)
) -> EmployeeOut:
    return employee_service.update_employee(db, employee_id, payload)


@router.delete("/{employee_id}")
def delete_employee(employee_id: int, db: Session = Depends(get_db)) -> dict:
    """Удаляет сотрудника; его оборудование становится неназначенным."""
    detached = employee_service.retire_employee(db, employee_id)
    return {"message": "Employee deleted", "detached_equipment": detached}
