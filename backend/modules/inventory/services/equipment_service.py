"""Сервис реестра оборудования."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, contains_eager

from backend.modules.inventory.constants import STATE_VALUES
from backend.modules.inventory.errors import NotFoundError, ValidationError
from backend.modules.inventory.models import (
    Employee,
    Equipment,
    EquipmentEvent,
    EquipmentType,
)
from backend.modules.inventory.schemas.equipment import (
    EmployeeOption,
    EquipmentDetailOut,
    EquipmentIn,
    EquipmentOut,
    FilterOptionsOut,
)
from backend.modules.inventory.services import file_store
from backend.modules.inventory.services.credential_service import (
    list_credentials,
    parse_credential_entries,
    write_credentials,
)
from backend.modules.inventory.services.filters import (
    EquipmentFilter,
    build_predicates,
    type_label_expr,
)
from backend.modules.inventory.services.transaction import reading, transaction
from backend.modules.inventory.services.validation import (
    clean_text,
    optional_text,
    parse_iso_date,
    parse_price,
    parse_warranty,
)

logger = logging.getLogger(__name__)


# --- Единственные точки записи денормализованных полей ---


def assign_employee(equipment: Equipment, employee: Optional[Employee]) -> None:
    """Назначает сотрудника; employee_label всегда равен его display_name."""
    equipment.employee = employee
    if employee is None:
        equipment.employee_id = None
        equipment.employee_label = None
    else:
        equipment.employee_id = employee.id
        equipment.employee_label = employee.display_name


def link_type(equipment: Equipment, equipment_type: Optional[EquipmentType]) -> None:
    """Привязывает тип; type_label повторяет имя типа (при отвязке не трогаем)."""
    equipment.type_ref = equipment_type
    if equipment_type is None:
        equipment.type_id = None
    else:
        equipment.type_id = equipment_type.id
        equipment.type_label = equipment_type.name


# --- Read models ---


def _to_out(equipment: Equipment) -> EquipmentOut:
    out = EquipmentOut.model_validate(equipment)
    out.type_label = equipment.resolved_type_label or ""
    if equipment.type_ref is not None:
        out.type_name = equipment.type_ref.name
        out.type_description = equipment.type_ref.description
    employee = equipment.employee
    if employee is not None:
        out.employee_email = employee.email
        out.employee_phone = employee.phone
        out.employee_role = employee.role
        out.employee_territory = employee.territory
    return out


def _joined_query(db: Session):
    return (
        db.query(Equipment)
        .outerjoin(Employee, Equipment.employee_id == Employee.id)
        .outerjoin(EquipmentType, Equipment.type_id == EquipmentType.id)
        .options(contains_eager(Equipment.employee), contains_eager(Equipment.type_ref))
    )


def default_ordering():
    """Без даты покупки: в конце; затем дата покупки и дата создания по убыванию."""
    return (
        case((Equipment.purchase_date.is_(None), 1), else_=0),
        Equipment.purchase_date.desc(),
        Equipment.created_at.desc(),
        Equipment.id.desc(),
    )


def list_equipment(
    db: Session, criteria: Optional[EquipmentFilter] = None
) -> List[EquipmentOut]:
    criteria = criteria or EquipmentFilter()
    with reading(db):
        q = _joined_query(db)
        for clause in build_predicates(criteria):
            q = q.filter(clause)
        items = q.order_by(*default_ordering()).all()
    return [_to_out(item) for item in items]


def _load(db: Session, equipment_id: int) -> Equipment:
    item = db.query(Equipment).filter(Equipment.id == equipment_id).first()
    if not item:
        raise NotFoundError("Equipment not found")
    return item


def get_equipment(db: Session, equipment_id: int) -> EquipmentDetailOut:
    with reading(db):
        item = _joined_query(db).filter(Equipment.id == equipment_id).first()
    if not item:
        raise NotFoundError("Equipment not found")
    return EquipmentDetailOut(
        **_to_out(item).model_dump(),
        credentials=list_credentials(db, equipment_id),
    )


def get_filter_options(db: Session) -> FilterOptionsOut:
    """Значения для выпадающих списков фильтра (только реально встречающиеся)."""
    with reading(db):
        label = type_label_expr()
        type_rows = (
            db.query(label)
            .select_from(Equipment)
            .outerjoin(EquipmentType, Equipment.type_id == EquipmentType.id)
            .distinct()
            .all()
        )
        brand_rows = db.query(Equipment.brand).distinct().all()
        year = func.strftime("%Y", Equipment.purchase_date)
        year_rows = (
            db.query(year)
            .filter(Equipment.purchase_date.isnot(None))
            .distinct()
            .all()
        )
        employees = (
            db.query(Employee)
            .join(Equipment, Equipment.employee_id == Employee.id)
            .distinct()
            .all()
        )

    types = {clean_text(row[0]) for row in type_rows} - {""}
    brands = {clean_text(row[0]) for row in brand_rows} - {""}
    years = {row[0] for row in year_rows if row[0]}
    options = [
        EmployeeOption(id=e.id, display_name=e.display_name or f"Employee #{e.id}")
        for e in employees
    ]
    return FilterOptionsOut(
        types=sorted(types, key=str.lower),
        brands=sorted(brands, key=str.lower),
        years=sorted(years, reverse=True),
        employees=sorted(options, key=lambda o: (o.display_name.lower(), o.id)),
    )


# --- Запись ---


def _validate(db: Session, raw: Dict[str, Any]):
    """
    Проверяет поля оборудования и набор учётных данных.

    Возвращает (values, equipment_type, employee, credentials); при любой
    ошибке поднимает ValidationError со списком всех нарушений.
    """
    errors: List[str] = []
    values: Dict[str, Any] = {}

    equipment_type = None
    type_id = raw.get("type_id")
    if type_id is None:
        errors.append("Equipment type is required.")
    else:
        equipment_type = db.query(EquipmentType).filter(EquipmentType.id == type_id).first()
        if equipment_type is None:
            errors.append("Selected equipment type does not exist.")

    values["brand"] = clean_text(raw.get("brand"))
    if not values["brand"]:
        errors.append("Brand is required.")
    values["model"] = clean_text(raw.get("model"))
    if not values["model"]:
        errors.append("Model is required.")

    state = clean_text(raw.get("state"))
    if not state:
        errors.append("State is required.")
    elif state not in STATE_VALUES:
        errors.append("State must be one of: " + ", ".join(STATE_VALUES) + ".")
    values["state"] = state

    price, price_error = parse_price(raw.get("price"))
    if price_error:
        errors.append(price_error)
    values["price"] = price

    warranty, warranty_error = parse_warranty(raw.get("warranty_years"))
    if warranty_error:
        errors.append(warranty_error)
    values["warranty_years"] = warranty

    raw_date = raw.get("purchase_date")
    purchase_date = None
    if clean_text(raw_date):
        purchase_date = parse_iso_date(raw_date)
        if purchase_date is None:
            errors.append("Purchase date must use the YYYY-MM-DD format.")
    values["purchase_date"] = purchase_date

    employee = None
    employee_id = raw.get("employee_id")
    if employee_id is not None:
        employee = db.query(Employee).filter(Employee.id == employee_id).first()
        if employee is None:
            errors.append("Selected employee does not exist.")

    values["serial_number"] = optional_text(raw.get("serial_number"))
    values["purchase_place"] = optional_text(raw.get("purchase_place"))
    values["comment"] = optional_text(raw.get("comment"))

    credentials = None
    if raw.get("credentials") is not None:
        credentials, credential_errors = parse_credential_entries(raw["credentials"])
        errors.extend(credential_errors)

    if errors:
        raise ValidationError(errors, data=_echo(raw))
    return values, equipment_type, employee, credentials


def _echo(raw: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(raw)
    if data.get("credentials") is not None:
        data["credentials"] = [
            c.model_dump() if hasattr(c, "model_dump") else c for c in data["credentials"]
        ]
    return data


def _raw_input(payload: EquipmentIn, exclude_unset: bool = False) -> Dict[str, Any]:
    raw = payload.model_dump(exclude_unset=exclude_unset)
    if "credentials" in raw:
        raw["credentials"] = payload.credentials
    return raw


def _apply(equipment: Equipment, values: Dict[str, Any], equipment_type, employee) -> None:
    for field, value in values.items():
        setattr(equipment, field, value)
    link_type(equipment, equipment_type)
    assign_employee(equipment, employee)


def create_equipment(db: Session, payload: EquipmentIn) -> EquipmentDetailOut:
    raw = _raw_input(payload)
    with reading(db):
        values, equipment_type, employee, credentials = _validate(db, raw)
    with transaction(db):
        item = Equipment()
        _apply(item, values, equipment_type, employee)
        db.add(item)
        db.flush()
        if credentials:
            write_credentials(db, item.id, credentials)
    logger.info("Создано оборудование %s (%s %s)", item.id, item.brand, item.model)
    return get_equipment(db, item.id)


def _current_values(item: Equipment) -> Dict[str, Any]:
    return {
        "type_id": item.type_id,
        "brand": item.brand,
        "model": item.model,
        "serial_number": item.serial_number,
        "state": item.state,
        "purchase_date": item.purchase_date.isoformat() if item.purchase_date else None,
        "purchase_place": item.purchase_place,
        "price": item.price,
        "warranty_years": item.warranty_years,
        "employee_id": item.employee_id,
        "comment": item.comment,
        "credentials": None,
    }


def update_equipment(db: Session, equipment_id: int, payload: EquipmentIn) -> EquipmentDetailOut:
    """
    Частичное изменение: непереданные поля берутся из текущей записи,
    затем запись проверяется целиком. credentials=None оставляет набор как есть.
    """
    with reading(db):
        item = _load(db, equipment_id)
        raw = _current_values(item)
        raw.update(_raw_input(payload, exclude_unset=True))
        values, equipment_type, employee, credentials = _validate(db, raw)
    with transaction(db):
        _apply(item, values, equipment_type, employee)
        if credentials is not None:
            write_credentials(db, item.id, credentials)
    return get_equipment(db, equipment_id)


def delete_equipment(db: Session, equipment_id: int) -> None:
    """Удаляет запись (учётные данные и события каскадом), затем файлы."""
    with transaction(db):
        item = _load(db, equipment_id)
        refs = [item.invoice_ref]
        refs.extend(
            ref
            for (ref,) in db.query(EquipmentEvent.document_ref)
            .filter(EquipmentEvent.equipment_id == equipment_id)
            .all()
        )
        db.delete(item)
    for ref in refs:
        file_store.delete(ref)
    logger.info("Удалено оборудование %s", equipment_id)


# --- Счёт (invoice) ---


def attach_invoice(db: Session, equipment_id: int, upload: file_store.UploadedFile) -> EquipmentDetailOut:
    """Прикрепляет счёт; старый файл удаляется только после commit."""
    with reading(db):
        _load(db, equipment_id)
    errors = file_store.validate_upload(upload)
    if errors:
        raise ValidationError(errors, data={"filename": upload.filename})

    ref = file_store.save(upload.data, upload.filename)
    try:
        with transaction(db):
            item = _load(db, equipment_id)
            old_ref = item.invoice_ref
            item.invoice_ref = ref
    except Exception:
        file_store.delete(ref)
        raise
    file_store.delete(old_ref)
    return get_equipment(db, equipment_id)


def remove_invoice(db: Session, equipment_id: int) -> EquipmentDetailOut:
    with transaction(db):
        item = _load(db, equipment_id)
        old_ref = item.invoice_ref
        item.invoice_ref = None
    file_store.delete(old_ref)
    return get_equipment(db, equipment_id)


def invoice_path(db: Session, equipment_id: int):
    """Путь к файлу счёта; NotFoundError если счёта нет."""
    with reading(db):
        item = _load(db, equipment_id)
    if not item.invoice_ref:
        raise NotFoundError("No invoice attached")
    path = file_store.resolve_path(item.invoice_ref)
    if not path.is_file():
        raise NotFoundError("Invoice file is missing")
    return path
