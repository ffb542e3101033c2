"""
Тесты реестра оборудования: проверка ввода, кеш названий, фильтры
"""
import sqlite3

import pytest
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError

from backend.core.config import settings
from backend.modules.inventory.errors import NotFoundError, StoreError, ValidationError
from backend.modules.inventory.models import (
    Equipment,
    EquipmentCredential,
    EquipmentEvent,
)
from backend.modules.inventory.schemas import CredentialIn, EquipmentIn, EventIn
from backend.modules.inventory.services import equipment_service, event_service, file_store
from backend.modules.inventory.services.file_store import UploadedFile
from backend.modules.inventory.services.filters import EquipmentFilter
from backend.modules.inventory.services.transaction import transaction


def test_create_equipment_collects_all_errors(db):
    payload = EquipmentIn(
        brand=" ",
        state="Cassé",
        price="-5",
        warranty_years="1.5",
        purchase_date="2024/01/01",
        employee_id=42,
    )
    with pytest.raises(ValidationError) as exc:
        equipment_service.create_equipment(db, payload)

    assert exc.value.errors == [
        "Equipment type is required.",
        "Brand is required.",
        "Model is required.",
        "State must be one of: En service, Disponible, En panne, Indisponible.",
        "Price must be a non-negative number.",
        "Warranty must be a non-negative whole number of years.",
        "Purchase date must use the YYYY-MM-DD format.",
        "Selected employee does not exist.",
    ]
    assert exc.value.data["price"] == "-5"
    assert db.query(Equipment).count() == 0


def test_price_accepts_comma_decimal(make_type, make_equipment):
    laptop = make_type()
    item = make_equipment(laptop.id, price="12,50", warranty_years="3")
    assert item.price == 12.5
    assert item.warranty_years == 3


def test_unknown_type_rejected(db):
    with pytest.raises(ValidationError) as exc:
        equipment_service.create_equipment(
            db, EquipmentIn(type_id=999, brand="Dell", model="XPS", state="Disponible")
        )
    assert exc.value.errors == ["Selected equipment type does not exist."]


def test_employee_label_follows_assignment(db, make_type, make_employee, make_equipment):
    laptop = make_type()
    jane = make_employee()
    john = make_employee(first_name="John", last_name="Roe")

    item = make_equipment(laptop.id, employee_id=jane.id)
    assert item.employee_label == "Jane Doe"
    assert item.employee_territory == "north"

    item = equipment_service.update_equipment(db, item.id, EquipmentIn(employee_id=john.id))
    assert item.employee_id == john.id
    assert item.employee_label == "John Roe"

    item = equipment_service.update_equipment(db, item.id, EquipmentIn(employee_id=None))
    assert item.employee_id is None
    assert item.employee_label is None


def test_partial_update_keeps_other_fields(db, make_type, make_equipment):
    laptop = make_type()
    item = make_equipment(laptop.id, price="1200", purchase_date="2023-05-01", comment="bureau 3")

    updated = equipment_service.update_equipment(db, item.id, EquipmentIn(state="En panne"))

    assert updated.state == "En panne"
    assert updated.price == 1200.0
    assert updated.purchase_date.isoformat() == "2023-05-01"
    assert updated.comment == "bureau 3"
    assert updated.type_label == "Laptop"


def test_update_validates_whole_record(db, make_type, make_equipment):
    laptop = make_type()
    item = make_equipment(laptop.id)
    with pytest.raises(ValidationError) as exc:
        equipment_service.update_equipment(db, item.id, EquipmentIn(model="", price="abc"))
    assert exc.value.errors == ["Model is required.", "Price must be a non-negative number."]
    assert equipment_service.get_equipment(db, item.id).model == "XPS13"


def test_update_missing_equipment(db):
    with pytest.raises(NotFoundError):
        equipment_service.update_equipment(db, 999, EquipmentIn(state="Disponible"))


def test_credentials_written_with_equipment(db, make_type, make_equipment):
    laptop = make_type()
    item = make_equipment(
        laptop.id,
        credentials=[CredentialIn(name="admin", secret="s3cret"), CredentialIn(name="", secret="")],
    )
    assert [(c.name, c.secret) for c in item.credentials] == [("admin", "s3cret")]

    # credentials не переданы: набор не меняется
    updated = equipment_service.update_equipment(db, item.id, EquipmentIn(comment="x"))
    assert len(updated.credentials) == 1


def test_invalid_credentials_merge_into_equipment_errors(db, make_type):
    laptop = make_type()
    payload = EquipmentIn(
        type_id=laptop.id,
        brand="Dell",
        model="",
        state="Disponible",
        credentials=[CredentialIn(name="admin", secret="")],
    )
    with pytest.raises(ValidationError) as exc:
        equipment_service.create_equipment(db, payload)
    assert exc.value.errors == [
        "Model is required.",
        "each credential must include both a login name and a password",
    ]
    assert exc.value.data["credentials"] == [{"name": "admin", "secret": ""}]


def test_default_ordering(db, make_type, make_equipment):
    laptop = make_type()
    undated = make_equipment(laptop.id, model="Undated")
    old = make_equipment(laptop.id, model="Old", purchase_date="2020-01-01")
    new = make_equipment(laptop.id, model="New", purchase_date="2024-06-01")

    items = equipment_service.list_equipment(db)

    assert [i.id for i in items] == [new.id, old.id, undated.id]


def test_filters(db, make_type, make_employee, make_equipment):
    laptop = make_type("Laptop")
    phone = make_type("Phone")
    jane = make_employee()
    xps = make_equipment(laptop.id, purchase_date="2023-02-01", employee_id=jane.id)
    pixel = make_equipment(
        phone.id, brand="Google", model="Pixel", state="En service", purchase_date="2024-01-10"
    )

    def ids(**params):
        return [i.id for i in equipment_service.list_equipment(db, EquipmentFilter.from_params(**params))]

    assert ids(state="Disponible") == [xps.id]
    assert ids(state="tous") == [pixel.id, xps.id]
    assert ids(type_label="Phone") == [pixel.id]
    assert ids(type_label="toutes") == [pixel.id, xps.id]
    assert ids(employee=str(jane.id)) == [xps.id]
    assert ids(employee="abc") == [pixel.id, xps.id]
    assert ids(year="2023") == [xps.id]
    assert ids(year="23") == [pixel.id, xps.id]
    assert ids(brand="Google") == [pixel.id]
    assert ids(search="jane doe") == [xps.id]
    assert ids(search="north") == [xps.id]
    assert ids(search="PIX") == [pixel.id]
    assert ids(search="Google", state="Disponible") == []


def test_filter_from_params_discards_unknown_values():
    criteria = EquipmentFilter.from_params(
        search="  ", state="Broken", type_label=" tous ", employee="-1", year="20x4", brand=""
    )
    assert criteria.is_empty()


def test_filter_options_skip_blank_values(db, make_type, make_employee, make_equipment):
    laptop = make_type("laptop")
    phone = make_type("Phone")
    jane = make_employee()
    make_equipment(laptop.id, brand="dell", purchase_date="2022-03-01", employee_id=jane.id)
    make_equipment(phone.id, brand="Apple", purchase_date="2024-03-01")
    legacy = make_equipment(phone.id, brand="Apple")

    # Старые записи: пустая марка и тип без привязки
    row = db.get(Equipment, legacy.id)
    row.brand = "   "
    row.type_id = None
    row.type_label = ""
    db.commit()

    options = equipment_service.get_filter_options(db)

    assert options.types == ["laptop", "Phone"]
    assert options.brands == ["Apple", "dell"]
    assert options.years == ["2024", "2022"]
    assert [(e.id, e.display_name) for e in options.employees] == [(jane.id, "Jane Doe")]


def test_delete_equipment_cascades(db, make_type, make_equipment):
    laptop = make_type()
    item = make_equipment(laptop.id, credentials=[CredentialIn(name="root", secret="toor")])
    event_service.create_event(
        db, item.id, EventIn(category="Observation", description="Rayure", event_date="2024-01-01")
    )

    equipment_service.delete_equipment(db, item.id)

    assert db.query(Equipment).count() == 0
    assert db.query(EquipmentCredential).count() == 0
    assert db.query(EquipmentEvent).count() == 0
    with pytest.raises(NotFoundError):
        equipment_service.get_equipment(db, item.id)


def test_store_failure_rolls_back(db, make_type):
    laptop = make_type()
    with pytest.raises(StoreError):
        with transaction(db):
            db.add(Equipment(type_id=laptop.id, brand="Dell", model="XPS", state="Disponible"))
            db.flush()
            raise OperationalError("INSERT ...", {}, Exception("database is locked"))
    assert db.query(Equipment).count() == 0


def test_failed_commit_removes_new_invoice(db, make_type, make_equipment, monkeypatch):
    item = make_equipment(make_type().id)
    invoice = UploadedFile(filename="facture.pdf", content_type="application/pdf", data=b"%PDF-1.4")

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(StoreError):
        equipment_service.attach_invoice(db, item.id, invoice)

    upload_dir = file_store.upload_root()
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []
    assert equipment_service.get_equipment(db, item.id).invoice_ref is None


def test_locked_database_is_store_error(db, make_type):
    laptop = make_type()
    locker = sqlite3.connect(make_url(settings.database_url).database, isolation_level=None)
    try:
        locker.execute("BEGIN EXCLUSIVE")
        with pytest.raises(StoreError):
            equipment_service.create_equipment(
                db, EquipmentIn(type_id=laptop.id, brand="Dell", model="XPS", state="Disponible")
            )
    finally:
        locker.execute("ROLLBACK")
        locker.close()

    assert db.query(Equipment).count() == 0
