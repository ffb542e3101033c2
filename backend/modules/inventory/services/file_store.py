"""Хранилище вложений: счета оборудования и документы событий."""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from fastapi import UploadFile

from backend.core.config import settings
from backend.modules.inventory.errors import StoreError

logger = logging.getLogger(__name__)

ALLOWED_EXACT_TYPES = {"application/pdf"}
ALLOWED_TYPE_PREFIXES = ("image/",)


@dataclass
class UploadedFile:
    """Файл из запроса, уже прочитанный в память."""

    filename: str
    content_type: str
    data: bytes


def upload_root() -> Path:
    return Path(settings.upload_dir)


async def read_upload(file: Optional[UploadFile]) -> Optional[UploadedFile]:
    """UploadFile -> UploadedFile; пустое поле формы -> None."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    return UploadedFile(
        filename=file.filename,
        content_type=file.content_type or "",
        data=data,
    )


def validate_upload(upload: UploadedFile) -> List[str]:
    """Проверка размера и формата. Ошибки идут в общий список валидации."""
    errors = []
    if len(upload.data) > settings.max_upload_size:
        max_mb = settings.max_upload_size // (1024 * 1024)
        errors.append(f"The file exceeds the maximum allowed size ({max_mb} MB).")
    content_type = (upload.content_type or "").lower()
    if content_type not in ALLOWED_EXACT_TYPES and not content_type.startswith(ALLOWED_TYPE_PREFIXES):
        errors.append("Unsupported file format (PDF or image expected).")
    return errors


def _safe_name(name: str) -> str:
    base = Path(name or "file").name
    return re.sub(r"[^a-zA-Z0-9_.-]", "_", base) or "file"


def save(data: bytes, suggested_name: str) -> str:
    """
    Сохраняет файл и возвращает непрозрачную ссылку на него.

    Ошибка записи -> StoreError: запись в БД после этого не выполняется.
    """
    ref = f"{int(time.time() * 1000)}-{_safe_name(suggested_name)}"
    root = upload_root()
    try:
        root.mkdir(parents=True, exist_ok=True)
        (root / ref).write_bytes(data)
    except OSError as e:
        logger.exception("Не удалось сохранить файл %s: %s", ref, e)
        raise StoreError("Could not store the uploaded file") from e
    return ref


def delete(ref: Optional[str]) -> None:
    """Удаляет файл по ссылке (best-effort, ошибки только в лог)."""
    if not ref:
        return
    path = resolve_path(ref)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Не удалось удалить файл %s: %s", ref, e)


def resolve_path(ref: str) -> Path:
    """Ссылка -> путь на диске (без выхода за пределы каталога вложений)."""
    return upload_root() / Path(ref).name
