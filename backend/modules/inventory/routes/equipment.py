"""Роуты /inventory/equipment: реестр оборудования."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.errors import ValidationError
from backend.modules.inventory.schemas.equipment import (
    EquipmentDetailOut,
    EquipmentIn,
    EquipmentOut,
    FilterOptionsOut,
)
from backend.modules.inventory.services import equipment_service, file_store
from backend.modules.inventory.services.filters import EquipmentFilter

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/equipment",
    tags=["equipment"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/", response_model=List[EquipmentOut])
def list_equipment(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None),
    etat: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    employe: Optional[str] = Query(None),
    annee: Optional[str] = Query(None),
    marque: Optional[str] = Query(None),
) -> List[EquipmentOut]:
    """Список оборудования; фильтры как в форме поиска ("tous"/"toutes" = без фильтра)."""
    criteria = EquipmentFilter.from_params(
        search=search,
        state=etat,
        type_label=type,
        employee=employe,
        year=annee,
        brand=marque,
    )
    return equipment_service.list_equipment(db, criteria)


@router.get("/filter-options", response_model=FilterOptionsOut)
def get_filter_options(db: Session = Depends(get_db)) -> FilterOptionsOut:
    return equipment_service.get_filter_options(db)


@router.post("/", response_model=EquipmentDetailOut, status_code=status.HTTP_201_CREATED)
def create_equipment(payload: EquipmentIn, db: Session = Depends(get_db)) -> EquipmentDetailOut:
    return equipment_service.create_equipment(db, payload)


@router.get("/{equipment_id}", response_model=EquipmentDetailOut)
def get_equipment(equipment_id: int, db: Session = Depends(get_db)) -> EquipmentDetailOut:
    return equipment_service.get_equipment(db, equipment_id)


@router.patch("/{equipment_id}", response_model=EquipmentDetailOut)
def update_equipment(
    equipment_id: int, payload: EquipmentIn, db: Session = Depends(get_db)
) -> EquipmentDetailOut:
    return equipment_service.update_equipment(db, equipment_id, payload)


@router.delete("/{equipment_id}")
def delete_equipment(equipment_id: int, db: Session = Depends(get_db)) -> dict:
    equipment_service.delete_equipment(db, equipment_id)
    return {"message": "Equipment deleted"}


@router.post("/{equipment_id}/invoice", response_model=EquipmentDetailOut)
async def upload_invoice(
    equipment_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
) -> EquipmentDetailOut:
    """Загрузка счёта (PDF или изображение, до 5 МБ)."""
    upload = await file_store.read_upload(file)
    if upload is None:
        raise ValidationError(["An invoice file is required."])
    return equipment_service.attach_invoice(db, equipment_id, upload)


@router.get("/{equipment_id}/invoice")
def download_invoice(equipment_id: int, db: Session = Depends(get_db)) -> FileResponse:
    path = equipment_service.invoice_path(db, equipment_id)
    return FileResponse(path, filename=path.name)


@router.delete("/{equipment_id}/invoice", response_model=EquipmentDetailOut)
def delete_invoice(equipment_id: int, db: Session = Depends(get_db)) -> EquipmentDetailOut:
    return equipment_service.remove_invoice(db, equipment_id)
