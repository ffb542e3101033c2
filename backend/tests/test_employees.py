"""
Тесты справочника сотрудников
"""
import pytest

from backend.modules.inventory.errors import ConflictError, NotFoundError, ValidationError
from backend.modules.inventory.models import Equipment, EquipmentEvent
from backend.modules.inventory.schemas import EmployeeIn, EventIn
from backend.modules.inventory.services import employee_service, event_service


def test_create_employee_collects_all_errors(db):
    payload = EmployeeIn(
        first_name=" ",
        last_name="",
        email="not-an-email",
        phone="12-3",
        territory="atlantis",
    )
    with pytest.raises(ValidationError) as exc:
        employee_service.create_employee(db, payload)

    assert exc.value.errors == [
        "First name is required.",
        "Last name is required.",
        "Email address is not valid.",
        "Phone number is not valid.",
        "Territory must be one of: north, south.",
    ]
    assert exc.value.data["email"] == "not-an-email"


def test_create_employee_requires_territory(db):
    with pytest.raises(ValidationError) as exc:
        employee_service.create_employee(db, EmployeeIn(first_name="A", last_name="B"))
    assert exc.value.errors == ["Territory is required."]


def test_create_employee_normalizes(make_employee):
    employee = make_employee(
        first_name="  Jane ",
        territory="NORTH",
        email="jane@example.com",
        phone="+596 696 12 34 56",
    )
    assert employee.first_name == "Jane"
    assert employee.territory == "north"
    assert employee.display_name == "Jane Doe"
    assert employee.equipment_count == 0


def test_duplicate_email_conflict(db, make_employee):
    make_employee(email="jane@example.com")
    with pytest.raises(ConflictError):
        employee_service.create_employee(
            db,
            EmployeeIn(first_name="J", last_name="D", territory="south", email="JANE@example.com"),
        )


def test_update_employee_refreshes_labels(db, make_type, make_employee, make_equipment):
    laptop = make_type()
    jane = make_employee()
    first = make_equipment(laptop.id, employee_id=jane.id)
    second = make_equipment(laptop.id, employee_id=jane.id, model="Latitude")

    updated = employee_service.update_employee(db, jane.id, EmployeeIn(last_name="Smith"))

    assert updated.display_name == "Jane Smith"
    assert updated.territory == "north"
    assert updated.equipment_count == 2
    db.expire_all()
    for item_id in (first.id, second.id):
        assert db.get(Equipment, item_id).employee_label == "Jane Smith"


def test_retire_employee_detaches_equipment_and_events(db, make_type, make_employee, make_equipment):
    laptop = make_type()
    jane = make_employee()
    item = make_equipment(laptop.id)
    event_service.create_event(
        db,
        item.id,
        EventIn(category="Attribution", event_date="2024-03-01", target_employee_id=str(jane.id)),
    )

    detached = employee_service.retire_employee(db, jane.id)

    assert detached == 1
    db.expire_all()
    row = db.get(Equipment, item.id)
    assert row.employee_id is None
    assert row.employee_label is None
    event = db.query(EquipmentEvent).filter(EquipmentEvent.equipment_id == item.id).one()
    assert event.target_employee_id is None
    with pytest.raises(NotFoundError):
        employee_service.get_employee(db, jane.id)


def test_detach_employee_keeps_record(db, make_type, make_employee, make_equipment):
    laptop = make_type()
    jane = make_employee()
    make_equipment(laptop.id, employee_id=jane.id)

    assert employee_service.detach_employee(db, jane.id) == 1
    assert employee_service.get_employee(db, jane.id).equipment_count == 0


def test_list_employees_ordering(db, make_employee):
    make_employee(first_name="Zoe", last_name="adams", territory="south")
    make_employee(first_name="Bob", last_name="Brown", territory="north")
    make_employee(first_name="Amy", last_name="Adams", territory="north")

    by_name = employee_service.list_employees(db)
    assert [e.display_name for e in by_name] == ["Amy Adams", "Zoe adams", "Bob Brown"]

    by_territory = employee_service.list_employees(db, order="territory")
    assert [e.display_name for e in by_territory] == ["Amy Adams", "Bob Brown", "Zoe adams"]


def test_group_by_territory_lists_every_territory(db, make_employee):
    make_employee(first_name="Bob", last_name="Brown", territory="north")
    make_employee(first_name="Amy", last_name="Adams", territory="north")

    groups = employee_service.group_by_territory(employee_service.list_employees(db))

    assert list(groups.keys()) == ["north", "south"]
    assert [e.display_name for e in groups["north"]] == ["Amy Adams", "Bob Brown"]
    assert groups["south"] == []


def test_list_employee_equipment(db, make_type, make_employee, make_equipment):
    laptop = make_type()
    jane = make_employee()
    mine = make_equipment(laptop.id, employee_id=jane.id)
    make_equipment(laptop.id, model="Other")

    items = employee_service.list_employee_equipment(db, jane.id)
    assert [i.id for i in items] == [mine.id]

    with pytest.raises(NotFoundError):
        employee_service.list_employee_equipment(db, 999)
