"""Роуты /inventory/equipment/{id}/credentials: учётные данные."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.schemas.credential import CredentialOut, CredentialSetIn
from backend.modules.inventory.services import credential_service, equipment_service

router = APIRouter(
    prefix="/equipment/{equipment_id}/credentials",
    tags=["credentials"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[CredentialOut])
def list_credentials(equipment_id: int, db: Session = Depends(get_db)) -> List[CredentialOut]:
    equipment_service.get_equipment(db, equipment_id)
    return credential_service.list_credentials(db, equipment_id)


@router.put("", response_model=List[CredentialOut])
def replace_credentials(
    equipment_id: int, payload: CredentialSetIn, db: Session = Depends(get_db)
) -> List[CredentialOut]:
    """Полная замена набора. Пустой список удаляет все учётные данные."""
    return credential_service.replace_credentials(db, equipment_id, payload.credentials)
