"""Роуты /inventory/types: типы оборудования."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.schemas.equipment_type import EquipmentTypeIn, EquipmentTypeOut
from backend.modules.inventory.services import type_service

router = APIRouter(
    prefix="/types",
    tags=["types"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/", response_model=List[EquipmentTypeOut])
def list_types(db: Session = Depends(get_db)) -> List[EquipmentTypeOut]:
    return type_service.list_types(db)


@router.post("/", response_model=EquipmentTypeOut, status_code=status.HTTP_201_CREATED)
def create_type(payload: EquipmentTypeIn, db: Session = Depends(get_db)) -> EquipmentTypeOut:
    return type_service.create_type(db, payload)


@router.get("/{type_id}", response_model=EquipmentTypeOut)
def get_type(type_id: int, db: Session = Depends(get_db)) -> EquipmentTypeOut:
    return type_service.get_type(db, type_id)


@router.patch("/{type_id}", response_model=EquipmentTypeOut)
def update_type(
    type_id: int, payload: EquipmentTypeIn, db: Session = Depends(get_db)
) -> EquipmentTypeOut:
    return type_service.update_type(db, type_id, payload)


@router.delete("/{type_id}")
def delete_type(type_id: int, db: Session = Depends(get_db)) -> dict:
    """Удаляет тип; оборудование остаётся, но теряет привязку."""
    detached = type_service.retire_type(db, type_id)
    return {"message": "Equipment type deleted", "detached_equipment": detached}
