"""
Общие фикстуры тестов: временная SQLite БД и каталог вложений,
схема пересоздаётся перед каждым тестом.
"""
import os
import shutil
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="invent97-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'invent97-test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["TERRITORIES"] = "north,south"
os.environ["DB_BUSY_TIMEOUT_SECONDS"] = "1"
os.environ["SEED_ADMIN_USERNAME"] = "admin"
os.environ["SEED_ADMIN_PASSWORD"] = "admin123"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from backend.core.config import settings  # noqa: E402
from backend.core.database import Base, SessionLocal, engine  # noqa: E402
from backend.core.startup_migrations import apply_startup_migrations  # noqa: E402
from backend.main import app  # noqa: E402
from backend.modules.inventory.schemas import EmployeeIn, EquipmentIn, EquipmentTypeIn  # noqa: E402
from backend.modules.inventory.services import (  # noqa: E402
    employee_service,
    equipment_service,
    type_service,
)


@pytest.fixture(autouse=True)
def reset_database():
    """Чистая схема и пустой каталог вложений для каждого теста."""
    Base.metadata.drop_all(bind=engine)
    shutil.rmtree(settings.upload_dir, ignore_errors=True)
    apply_startup_migrations()
    yield


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_TMP_DIR, ignore_errors=True)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "admin", "password": "admin123"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def make_type(db):
    def _make(name="Laptop", description=None):
        return type_service.create_type(db, EquipmentTypeIn(name=name, description=description))

    return _make


@pytest.fixture
def make_employee(db):
    def _make(first_name="Jane", last_name="Doe", territory="north", **extra):
        payload = EmployeeIn(
            first_name=first_name, last_name=last_name, territory=territory, **extra
        )
        return employee_service.create_employee(db, payload)

    return _make


@pytest.fixture
def make_equipment(db):
    def _make(type_id, brand="Dell", model="XPS13", state="Disponible", **extra):
        payload = EquipmentIn(type_id=type_id, brand=brand, model=model, state=state, **extra)
        return equipment_service.create_equipment(db, payload)

    return _make
