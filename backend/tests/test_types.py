"""
Тесты справочника типов оборудования
"""
import pytest

from backend.modules.inventory.errors import ConflictError, NotFoundError, ValidationError
from backend.modules.inventory.models import Equipment
from backend.modules.inventory.schemas import EquipmentTypeIn
from backend.modules.inventory.services import stats_service, type_service


def test_list_types_sorted_case_insensitive_with_counts(db, make_type, make_equipment):
    phone = make_type("phone")
    make_type("Laptop")
    make_type("Écran")
    make_equipment(phone.id)
    make_equipment(phone.id, model="Pixel")

    types = type_service.list_types(db)

    assert [t.name for t in types] == ["Laptop", "phone", "Écran"]
    counts = {t.name: t.equipment_count for t in types}
    assert counts["phone"] == 2
    assert counts["Laptop"] == 0


def test_create_type_requires_name(db):
    with pytest.raises(ValidationError) as exc:
        type_service.create_type(db, EquipmentTypeIn(name="   "))
    assert exc.value.errors == ["Type name is required."]


def test_create_type_trims_and_rejects_duplicates(db, make_type):
    created = make_type("  Laptop  ")
    assert created.name == "Laptop"

    with pytest.raises(ConflictError):
        type_service.create_type(db, EquipmentTypeIn(name="laptop"))


def test_update_type_rename_refreshes_type_label(db, make_type, make_equipment):
    laptop = make_type("Laptop")
    item = make_equipment(laptop.id)

    updated = type_service.update_type(db, laptop.id, EquipmentTypeIn(name="Notebook"))

    assert updated.name == "Notebook"
    row = db.get(Equipment, item.id)
    db.refresh(row)
    assert row.type_label == "Notebook"


def test_update_type_partial_keeps_name(db, make_type):
    laptop = make_type("Laptop", description="portable")
    updated = type_service.update_type(db, laptop.id, EquipmentTypeIn(description="15 pouces"))
    assert updated.name == "Laptop"
    assert updated.description == "15 pouces"


def test_update_type_conflict(db, make_type):
    make_type("Laptop")
    phone = make_type("Phone")
    with pytest.raises(ConflictError):
        type_service.update_type(db, phone.id, EquipmentTypeIn(name="Laptop"))


def test_retire_type_detaches_equipment(db, make_type, make_equipment):
    laptop = make_type("Laptop")
    first = make_equipment(laptop.id)
    second = make_equipment(laptop.id, model="Latitude")

    detached = type_service.retire_type(db, laptop.id)

    assert detached == 2
    db.expire_all()
    for item_id in (first.id, second.id):
        row = db.get(Equipment, item_id)
        assert row is not None
        assert row.type_id is None
        assert row.type_label == "Laptop"
    with pytest.raises(NotFoundError):
        type_service.get_type(db, laptop.id)

    stats = stats_service.compute_inventory_stats(db)
    assert [(r.key, r.count) for r in stats.by_type] == [("Laptop", 2)]


def test_detach_type_keeps_type(db, make_type, make_equipment):
    laptop = make_type("Laptop")
    make_equipment(laptop.id)

    assert type_service.detach_type(db, laptop.id) == 1
    assert type_service.get_type(db, laptop.id).equipment_count == 0


def test_missing_type(db):
    with pytest.raises(NotFoundError):
        type_service.get_type(db, 999)
    with pytest.raises(NotFoundError):
        type_service.retire_type(db, 999)
