"""
Миграции, применяемые при старте приложения.

Упорядоченный список шагов; номер последнего применённого шага хранится
в таблице schema_version. Каждый шаг выполняется в своей транзакции
и применяется ровно один раз, поэтому без Alembic.
"""

import logging
from typing import Callable, List, Tuple

from sqlalchemy import delete, func, insert, select, text
from sqlalchemy.engine import Connection

from backend.core.auth import get_password_hash
from backend.core.config import settings
from backend.core.database import Base, SessionLocal, engine

# Регистрация моделей в Base для create_all
from backend.modules.inventory.models import Admin, SchemaVersion

logger = logging.getLogger(__name__)


def _create_tables(conn: Connection) -> None:
    Base.metadata.create_all(bind=conn)


def _create_indexes(conn: Connection) -> None:
    statements = [
        "CREATE INDEX IF NOT EXISTS idx_equipment_employee_id ON equipment(employee_id)",
        "CREATE INDEX IF NOT EXISTS idx_equipment_type_id ON equipment(type_id)",
        "CREATE INDEX IF NOT EXISTS idx_equipment_purchase_date ON equipment(purchase_date)",
        "CREATE INDEX IF NOT EXISTS idx_equipment_state ON equipment(state)",
        "CREATE INDEX IF NOT EXISTS idx_events_target_employee ON equipment_events(target_employee_id)",
    ]
    for sql in statements:
        conn.execute(text(sql))


def _backfill_type_label(conn: Connection) -> None:
    """Старые записи без текстового типа получают имя связанного типа."""
    conn.execute(
        text("""
            UPDATE equipment
            SET type_label = (SELECT name FROM equipment_types WHERE equipment_types.id = equipment.type_id)
            WHERE type_id IS NOT NULL AND (type_label IS NULL OR TRIM(type_label) = '')
        """)
    )


def _backfill_employee_label(conn: Connection) -> None:
    """employee_label = display_name назначенного сотрудника, NULL без сотрудника."""
    conn.execute(
        text("""
            UPDATE equipment
            SET employee_label = (
                SELECT TRIM(COALESCE(first_name, '') || ' ' || COALESCE(last_name, ''))
                FROM employees WHERE employees.id = equipment.employee_id
            )
            WHERE employee_id IS NOT NULL
        """)
    )
    conn.execute(text("UPDATE equipment SET employee_label = NULL WHERE employee_id IS NULL"))


MIGRATIONS: List[Tuple[int, str, Callable[[Connection], None]]] = [
    (1, "create tables", _create_tables),
    (2, "indexes", _create_indexes),
    (3, "backfill equipment.type_label", _backfill_type_label),
    (4, "backfill equipment.employee_label", _backfill_employee_label),
]


def _current_version() -> int:
    with engine.begin() as conn:
        SchemaVersion.__table__.create(bind=conn, checkfirst=True)
        version = conn.execute(select(func.max(SchemaVersion.version))).scalar()
    return int(version or 0)


def run_migrations() -> int:
    """Применяет недостающие шаги. Возвращает итоговую версию схемы."""
    version = _current_version()
    for number, description, step in MIGRATIONS:
        if number <= version:
            continue
        with engine.begin() as conn:
            step(conn)
            conn.execute(delete(SchemaVersion))
            conn.execute(insert(SchemaVersion).values(version=number))
        logger.info("Миграция %s применена: %s", number, description)
        version = number
    return version


def seed_admin() -> None:
    """Создаёт администратора по умолчанию, если его ещё нет."""
    if not settings.seed_admin_enabled:
        return
    db = SessionLocal()
    try:
        exists = db.query(Admin).filter(Admin.username == settings.seed_admin_username).first()
        if exists:
            return
        db.add(
            Admin(
                username=settings.seed_admin_username,
                password_hash=get_password_hash(settings.seed_admin_password),
            )
        )
        db.commit()
        logger.info("Создан администратор %s", settings.seed_admin_username)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def apply_startup_migrations() -> None:
    """Миграции схемы и seed администратора."""
    try:
        version = run_migrations()
        seed_admin()
    except Exception as e:
        logger.exception("Startup migrations failed: %s", e)
        raise
    logger.info("✅ Startup migrations: схема версии %s готова", version)
