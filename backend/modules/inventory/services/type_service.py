"""Справочник типов оборудования."""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.modules.inventory.errors import ConflictError, NotFoundError, ValidationError
from backend.modules.inventory.models import Equipment, EquipmentType
from backend.modules.inventory.schemas.equipment_type import EquipmentTypeIn, EquipmentTypeOut
from backend.modules.inventory.services.equipment_service import link_type
from backend.modules.inventory.services.transaction import reading, transaction
from backend.modules.inventory.services.validation import clean_text, optional_text

logger = logging.getLogger(__name__)

DUPLICATE_TYPE_MESSAGE = "An equipment type with this name already exists."


def _to_out(item: EquipmentType, equipment_count: int) -> EquipmentTypeOut:
    out = EquipmentTypeOut.model_validate(item)
    out.equipment_count = int(equipment_count or 0)
    return out


def _base_query(db: Session):
    return (
        db.query(EquipmentType, func.count(Equipment.id))
        .outerjoin(Equipment, Equipment.type_id == EquipmentType.id)
        .group_by(EquipmentType.id)
    )


def list_types(db: Session) -> List[EquipmentTypeOut]:
    with reading(db):
        rows = _base_query(db).order_by(func.lower(EquipmentType.name), EquipmentType.id).all()
    return [_to_out(item, count) for item, count in rows]


def get_type(db: Session, type_id: int) -> EquipmentTypeOut:
    with reading(db):
        row = _base_query(db).filter(EquipmentType.id == type_id).first()
    if not row:
        raise NotFoundError("Equipment type not found")
    return _to_out(*row)


def _validate(payload: EquipmentTypeIn) -> dict:
    name = clean_text(payload.name)
    if not name:
        raise ValidationError(["Type name is required."], data=payload.model_dump())
    return {"name": name, "description": optional_text(payload.description)}


def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(EquipmentType.id).filter(func.lower(EquipmentType.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(EquipmentType.id != exclude_id)
    return q.first() is not None


def create_type(db: Session, payload: EquipmentTypeIn) -> EquipmentTypeOut:
    data = _validate(payload)
    with transaction(db, conflict_message=DUPLICATE_TYPE_MESSAGE):
        if _name_taken(db, data["name"]):
            raise ConflictError(DUPLICATE_TYPE_MESSAGE)
        item = EquipmentType(**data)
        db.add(item)
    db.refresh(item)
    logger.info("Создан тип оборудования %s (%s)", item.id, item.name)
    return _to_out(item, 0)


def update_type(db: Session, type_id: int, payload: EquipmentTypeIn) -> EquipmentTypeOut:
    """Изменение типа; при переименовании обновляет type_label у оборудования."""
    with reading(db):
        current = db.query(EquipmentType).filter(EquipmentType.id == type_id).first()
    if not current:
        raise NotFoundError("Equipment type not found")
    merged = {"name": current.name, "description": current.description}
    merged.update(payload.model_dump(exclude_unset=True))
    data = _validate(EquipmentTypeIn(**merged))
    with transaction(db, conflict_message=DUPLICATE_TYPE_MESSAGE):
        item = db.query(EquipmentType).filter(EquipmentType.id == type_id).first()
        if not item:
            raise NotFoundError("Equipment type not found")
        if _name_taken(db, data["name"], exclude_id=type_id):
            raise ConflictError(DUPLICATE_TYPE_MESSAGE)
        renamed = item.name != data["name"]
        item.name = data["name"]
        item.description = data["description"]
        if renamed:
            for equipment in item.equipment_items:
                link_type(equipment, item)
    return get_type(db, type_id)


def _detach(db: Session, type_id: int) -> int:
    return (
        db.query(Equipment)
        .filter(Equipment.type_id == type_id)
        .update({Equipment.type_id: None}, synchronize_session=False)
    )


def detach_type(db: Session, type_id: int) -> int:
    """Отвязывает всё оборудование от типа. Возвращает число строк."""
    with transaction(db):
        if not db.query(EquipmentType.id).filter(EquipmentType.id == type_id).first():
            raise NotFoundError("Equipment type not found")
        detached = _detach(db, type_id)
    return detached


def retire_type(db: Session, type_id: int) -> int:
    """
    Удаление типа: отвязка оборудования и удаление записи в одной транзакции.
    Оборудование сохраняет type_label, поэтому остаётся в статистике по типам.
    """
    with transaction(db):
        item = db.query(EquipmentType).filter(EquipmentType.id == type_id).first()
        if not item:
            raise NotFoundError("Equipment type not found")
        detached = _detach(db, type_id)
        db.expire(item, ["equipment_items"])
        db.delete(item)
    logger.info("Удалён тип оборудования %s, отвязано: %s", type_id, detached)
    return detached
