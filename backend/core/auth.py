"""
Аутентификация администратора Invent97
"""
from datetime import datetime, timedelta
from typing import Optional, Dict

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError

from .config import settings

ALGORITHM = settings.algorithm

# OAuth2 схема для получения токена из заголовка Authorization
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_v1_prefix}/auth/login/form",
    auto_error=False
)


def _to_bytes(s: str, max_len: int = 72) -> bytes:
    b = s.encode("utf-8")
    return b[:max_len] if len(b) > max_len else b


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяет пароль против хеша (bcrypt, до 72 байт)."""
    try:
        plain = _to_bytes(plain_password)
        h = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
        return bcrypt.checkpw(plain, h)
    except ValueError:
        # Повреждённый хеш в БД
        return False


def get_password_hash(password: str) -> str:
    """Хеширует пароль (bcrypt, до 72 байт)."""
    plain = _to_bytes(password)
    return bcrypt.hashpw(plain, bcrypt.gensalt()).decode("utf-8")


def create_access_token(
    admin_id: int,
    username: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Создаёт JWT токен администратора.

    Payload структура:
        {
            "sub": "admin_id",
            "username": "admin",
            "exp": 1234567890,
            "iat": 1234567890
        }
    """
    now = datetime.utcnow()
    if expires_delta is not None:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(admin_id),
        "username": username,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[Dict]:
    """
    Декодирует JWT токен.

    Returns:
        Payload токена или None при ошибке
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_token_payload(token: str = Depends(oauth2_scheme)) -> Dict:
    """
    Получает payload из JWT токена.
    Используется как dependency в FastAPI.

    Raises:
        HTTPException: Если токен невалиден или отсутствует
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    return payload


def get_admin_id_from_token(payload: Dict = Depends(get_token_payload)) -> int:
    """Извлекает id администратора из JWT токена."""
    admin_id = payload.get("sub")
    try:
        return int(admin_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Malformed token subject",
        )
