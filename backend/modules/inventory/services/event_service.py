"""
Журнал событий оборудования.

Attribution и État меняют текущее состояние оборудования в той же
транзакции, что и запись события. Удаление события состояние
оборудования не откатывает.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.modules.inventory.constants import EVENT_CATEGORY_VALUES, STATE_VALUES, EventCategory
from backend.modules.inventory.errors import NotFoundError, ValidationError
from backend.modules.inventory.models import Employee, Equipment, EquipmentEvent
from backend.modules.inventory.schemas.event import EventIn, EventOut
from backend.modules.inventory.services import file_store
from backend.modules.inventory.services.equipment_service import assign_employee
from backend.modules.inventory.services.transaction import reading, transaction
from backend.modules.inventory.services.validation import (
    clean_text,
    optional_text,
    parse_iso_date,
    parse_positive_int,
)

logger = logging.getLogger(__name__)


def _to_out(event: EquipmentEvent) -> EventOut:
    out = EventOut.model_validate(event)
    if event.target_employee is not None:
        out.target_employee_name = event.target_employee.display_name
        out.target_employee_territory = event.target_employee.territory
    return out


def _load_equipment(db: Session, equipment_id: int) -> Equipment:
    equipment = db.query(Equipment).filter(Equipment.id == equipment_id).first()
    if not equipment:
        raise NotFoundError("Equipment not found")
    return equipment


def _load_event(db: Session, equipment_id: int, event_id: int) -> EquipmentEvent:
    event = (
        db.query(EquipmentEvent)
        .filter(EquipmentEvent.id == event_id, EquipmentEvent.equipment_id == equipment_id)
        .first()
    )
    if not event:
        raise NotFoundError("Event not found")
    return event


def list_events(db: Session, equipment_id: int) -> List[EventOut]:
    with reading(db):
        _load_equipment(db, equipment_id)
        events = (
            db.query(EquipmentEvent)
            .filter(EquipmentEvent.equipment_id == equipment_id)
            .order_by(
                EquipmentEvent.event_date.desc(),
                EquipmentEvent.created_at.desc(),
                EquipmentEvent.id.desc(),
            )
            .all()
        )
        return [_to_out(e) for e in events]


def get_event(db: Session, equipment_id: int, event_id: int) -> EventOut:
    with reading(db):
        return _to_out(_load_event(db, equipment_id, event_id))


def _validate(db: Session, payload: EventIn, document: Optional[file_store.UploadedFile]):
    """
    Правила по категории. Возвращает (values, target_employee);
    все нарушения, включая ошибки файла, собираются в один ValidationError.
    """
    errors: List[str] = []
    category = clean_text(payload.category)
    description = optional_text(payload.description)
    target_employee: Optional[Employee] = None
    target_state: Optional[str] = None

    if not category:
        errors.append("Event category is required.")
    elif category not in EVENT_CATEGORY_VALUES:
        errors.append("Event category must be one of: " + ", ".join(EVENT_CATEGORY_VALUES) + ".")

    event_date = parse_iso_date(payload.event_date)
    if not clean_text(payload.event_date):
        errors.append("Event date is required.")
    elif event_date is None:
        errors.append("Event date must use the YYYY-MM-DD format.")

    if category == EventCategory.ATTRIBUTION.value:
        employee_id = parse_positive_int(payload.target_employee_id)
        if employee_id is not None:
            target_employee = db.query(Employee).filter(Employee.id == employee_id).first()
        if target_employee is None:
            errors.append("An attribution event requires an existing employee.")
    elif category == EventCategory.STATE_CHANGE.value:
        target_state = clean_text(payload.target_state)
        if target_state not in STATE_VALUES:
            errors.append("A state change event requires one of: " + ", ".join(STATE_VALUES) + ".")
    elif category == EventCategory.OBSERVATION.value:
        if not description:
            errors.append("An observation event requires a description.")

    if document is not None:
        errors.extend(file_store.validate_upload(document))

    if errors:
        data = payload.model_dump()
        if document is not None:
            data["document"] = document.filename
        raise ValidationError(errors, data=data)

    values = {
        "category": category,
        "description": description,
        "event_date": event_date,
        "target_employee_id": target_employee.id if target_employee else None,
        "target_state": target_state,
    }
    return values, target_employee


def _apply_side_effect(equipment: Equipment, values: dict, target_employee: Optional[Employee]) -> None:
    if values["category"] == EventCategory.ATTRIBUTION.value:
        assign_employee(equipment, target_employee)
    elif values["category"] == EventCategory.STATE_CHANGE.value:
        equipment.state = values["target_state"]


def create_event(
    db: Session,
    equipment_id: int,
    payload: EventIn,
    document: Optional[file_store.UploadedFile] = None,
) -> EventOut:
    with reading(db):
        _load_equipment(db, equipment_id)
        values, target_employee = _validate(db, payload, document)

    new_ref = file_store.save(document.data, document.filename) if document else None
    try:
        with transaction(db):
            equipment = _load_equipment(db, equipment_id)
            event = EquipmentEvent(equipment_id=equipment_id, document_ref=new_ref, **values)
            db.add(event)
            _apply_side_effect(equipment, values, target_employee)
    except Exception:
        file_store.delete(new_ref)
        raise
    logger.info(
        "Событие %s (%s) добавлено к оборудованию %s", event.id, event.category, equipment_id
    )
    return get_event(db, equipment_id, event.id)


def update_event(
    db: Session,
    equipment_id: int,
    event_id: int,
    payload: EventIn,
    document: Optional[file_store.UploadedFile] = None,
    remove_document: bool = False,
) -> EventOut:
    """
    Изменение события. Новый документ заменяет старый; remove_document
    без нового файла убирает вложение. Старый файл удаляется после commit.
    """
    with reading(db):
        _load_event(db, equipment_id, event_id)
        values, target_employee = _validate(db, payload, document)

    new_ref = file_store.save(document.data, document.filename) if document else None
    old_ref = None
    try:
        with transaction(db):
            equipment = _load_equipment(db, equipment_id)
            event = _load_event(db, equipment_id, event_id)
            for field, value in values.items():
                setattr(event, field, value)
            if new_ref or remove_document:
                old_ref = event.document_ref
                event.document_ref = new_ref
            _apply_side_effect(equipment, values, target_employee)
    except Exception:
        file_store.delete(new_ref)
        raise
    file_store.delete(old_ref)
    return get_event(db, equipment_id, event_id)


def delete_event(db: Session, equipment_id: int, event_id: int) -> None:
    """Удаляет событие и его документ; текущее состояние оборудования не меняется."""
    with transaction(db):
        event = _load_event(db, equipment_id, event_id)
        document_ref = event.document_ref
        db.delete(event)
    file_store.delete(document_ref)
    logger.info("Событие %s оборудования %s удалено", event_id, equipment_id)
