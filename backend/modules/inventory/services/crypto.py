"""
Шифрование паролей оборудования (AES-256-GCM, ключ из PBKDF2-SHA256).

Соль, nonce и шифртекст упакованы в одну base64-строку, поэтому
для секрета достаточно одной текстовой колонки.
"""

import base64
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from backend.modules.inventory.errors import StoreError

logger = logging.getLogger(__name__)

SALT_LEN = 16
NONCE_LEN = 12
KDF_ITERATIONS = 200_000


def _derive_key(master_key: str, salt: bytes) -> bytes:
    if not master_key:
        raise ValueError("CREDENTIALS_MASTER_KEY не задан")
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    return kdf.derive(master_key.encode("utf-8"))


def encrypt_secret(master_key: str, plaintext: str) -> str:
    """Секрет -> base64(salt + nonce + ciphertext)."""
    salt = os.urandom(SALT_LEN)
    nonce = os.urandom(NONCE_LEN)
    sealed = AESGCM(_derive_key(master_key, salt)).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(salt + nonce + sealed).decode("ascii")


def decrypt_secret(master_key: str, packed: str) -> str:
    """
    Обратная операция к encrypt_secret.

    Неверный ключ или повреждённое значение -> StoreError.
    """
    try:
        raw = base64.b64decode(packed.encode("ascii"), validate=True)
        salt, nonce, sealed = raw[:SALT_LEN], raw[SALT_LEN:SALT_LEN + NONCE_LEN], raw[SALT_LEN + NONCE_LEN:]
        if len(salt) != SALT_LEN or len(nonce) != NONCE_LEN:
            raise ValueError("packed secret is truncated")
        plaintext = AESGCM(_derive_key(master_key, salt)).decrypt(nonce, sealed, None)
    except (InvalidTag, ValueError) as e:
        logger.error("Не удалось расшифровать учётные данные: неверный ключ или повреждённые данные")
        raise StoreError("Stored credential could not be decrypted") from e
    return plaintext.decode("utf-8")
