"""
Тесты набора учётных данных оборудования
"""
import pytest

from backend.core.config import settings
from backend.modules.inventory.errors import NotFoundError, StoreError, ValidationError
from backend.modules.inventory.models import EquipmentCredential
from backend.modules.inventory.schemas import CredentialIn
from backend.modules.inventory.services import credential_service
from backend.modules.inventory.services.credential_service import (
    INCOMPLETE_CREDENTIAL_MESSAGE,
    parse_credential_entries,
)
from backend.modules.inventory.services.crypto import decrypt_secret, encrypt_secret


def test_parse_drops_blank_rows_and_flags_half_filled():
    clean, errors = parse_credential_entries(
        [
            CredentialIn(name="  admin ", secret=" pw "),
            CredentialIn(name="", secret="   "),
            CredentialIn(name="user", secret=""),
            CredentialIn(name="", secret="orphan"),
        ]
    )
    assert [(c.name, c.secret) for c in clean] == [("admin", "pw")]
    assert errors == [INCOMPLETE_CREDENTIAL_MESSAGE]


def test_replace_then_clear(db, make_type, make_equipment):
    item = make_equipment(make_type().id)

    stored = credential_service.replace_credentials(
        db,
        item.id,
        [
            CredentialIn(name="wifi", secret="a"),
            CredentialIn(name="Admin", secret="b"),
            CredentialIn(name="bios", secret="c"),
        ],
    )
    assert [c["name"] for c in stored] == ["Admin", "bios", "wifi"]

    assert credential_service.replace_credentials(db, item.id, []) == []
    assert credential_service.list_credentials(db, item.id) == []


def test_invalid_set_leaves_stored_rows(db, make_type, make_equipment):
    item = make_equipment(make_type().id, credentials=[CredentialIn(name="root", secret="toor")])

    with pytest.raises(ValidationError) as exc:
        credential_service.replace_credentials(
            db, item.id, [CredentialIn(name="admin", secret="")]
        )

    assert exc.value.errors == [INCOMPLETE_CREDENTIAL_MESSAGE]
    assert exc.value.data == [{"name": "admin", "secret": ""}]
    stored = credential_service.list_credentials(db, item.id)
    assert [(c["name"], c["secret"]) for c in stored] == [("root", "toor")]


def test_secrets_encrypted_at_rest(db, make_type, make_equipment):
    item = make_equipment(make_type().id, credentials=[CredentialIn(name="root", secret="toor")])

    row = db.query(EquipmentCredential).filter(EquipmentCredential.equipment_id == item.id).one()
    assert row.secret != "toor"
    assert decrypt_secret(settings.credentials_master_key, row.secret) == "toor"


def test_encrypt_roundtrip_uses_fresh_salt():
    first = encrypt_secret("master", "p@ss")
    second = encrypt_secret("master", "p@ss")
    assert first != second
    assert decrypt_secret("master", first) == "p@ss"


def test_replace_for_missing_equipment(db):
    with pytest.raises(NotFoundError):
        credential_service.replace_credentials(db, 999, [CredentialIn(name="a", secret="b")])


def test_decrypt_with_wrong_key_is_store_error():
    packed = encrypt_secret("master", "p@ss")
    with pytest.raises(StoreError):
        decrypt_secret("other", packed)


@pytest.mark.parametrize("stored", ["not-base64!!", "c2hvcnQ=", ""])
def test_damaged_stored_secret_is_store_error(db, make_type, make_equipment, stored):
    item = make_equipment(make_type().id, credentials=[CredentialIn(name="root", secret="toor")])
    row = db.query(EquipmentCredential).filter(EquipmentCredential.equipment_id == item.id).one()
    row.secret = stored
    db.commit()

    with pytest.raises(StoreError):
        credential_service.list_credentials(db, item.id)
