"""Сервис набора учётных данных оборудования."""

from typing import Iterable, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.core.config import settings
from backend.modules.inventory.errors import NotFoundError, ValidationError
from backend.modules.inventory.models import Equipment, EquipmentCredential
from backend.modules.inventory.schemas.credential import CredentialIn
from backend.modules.inventory.services.crypto import decrypt_secret, encrypt_secret
from backend.modules.inventory.services.transaction import reading, transaction
from backend.modules.inventory.services.validation import clean_text

INCOMPLETE_CREDENTIAL_MESSAGE = "each credential must include both a login name and a password"


def parse_credential_entries(
    entries: Iterable[CredentialIn],
) -> Tuple[List[CredentialIn], List[str]]:
    """
    Чистит строки формы учётных данных.

    Обе ячейки пусты: строка молча пропускается (пустая строка формы).
    Заполнена только одна: ошибка. Иначе строка попадает в результат.
    """
    clean: List[CredentialIn] = []
    errors: List[str] = []
    for entry in entries or []:
        name = clean_text(entry.name)
        secret = clean_text(entry.secret)
        if not name and not secret:
            continue
        if not name or not secret:
            if INCOMPLETE_CREDENTIAL_MESSAGE not in errors:
                errors.append(INCOMPLETE_CREDENTIAL_MESSAGE)
            continue
        clean.append(CredentialIn(name=name, secret=secret))
    return clean, errors


def _serialize(credential: EquipmentCredential) -> dict:
    return {
        "id": credential.id,
        "name": credential.name,
        "secret": decrypt_secret(settings.credentials_master_key, credential.secret),
    }


def list_credentials(db: Session, equipment_id: int) -> List[dict]:
    """Учётные данные оборудования по имени (без учёта регистра)."""
    with reading(db):
        rows = (
            db.query(EquipmentCredential)
            .filter(EquipmentCredential.equipment_id == equipment_id)
            .order_by(func.lower(EquipmentCredential.name), EquipmentCredential.id)
            .all()
        )
    return [_serialize(row) for row in rows]


def write_credentials(db: Session, equipment_id: int, entries: List[CredentialIn]) -> None:
    """
    Удаляет все строки оборудования и вставляет новые.
    Коммит: на стороне вызывающего (одна транзакция с остальными изменениями).
    """
    db.query(EquipmentCredential).filter(
        EquipmentCredential.equipment_id == equipment_id
    ).delete(synchronize_session=False)
    for entry in entries:
        db.add(
            EquipmentCredential(
                equipment_id=equipment_id,
                name=entry.name,
                secret=encrypt_secret(settings.credentials_master_key, entry.secret),
            )
        )


def replace_credentials(
    db: Session,
    equipment_id: int,
    entries: Iterable[CredentialIn],
) -> List[dict]:
    """Полная замена набора учётных данных (delete-all-then-insert)."""
    entries = list(entries or [])
    clean, errors = parse_credential_entries(entries)
    if errors:
        raise ValidationError(errors, data=[e.model_dump() for e in entries])

    with transaction(db):
        exists = db.query(Equipment.id).filter(Equipment.id == equipment_id).first()
        if not exists:
            raise NotFoundError("Equipment not found")
        write_credentials(db, equipment_id, clean)
    return list_credentials(db, equipment_id)
