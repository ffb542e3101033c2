"""Нормализация "сырых" значений форм."""

import math
import re
from datetime import date
from typing import Any, Optional, Tuple

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def clean_text(value: Any) -> str:
    """Строка без пробелов по краям; не-строки -> ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    cleaned = clean_text(value)
    return cleaned or None


def parse_iso_date(value: Any) -> Optional[date]:
    """YYYY-MM-DD -> date, иначе None."""
    if isinstance(value, date):
        return value
    cleaned = clean_text(value)
    if not _ISO_DATE_RE.match(cleaned):
        return None
    try:
        return date.fromisoformat(cleaned)
    except ValueError:
        return None


def parse_price(value: Any) -> Tuple[Optional[float], Optional[str]]:
    """
    Цена: пусто -> (None, None); "12,50" -> (12.5, None);
    отрицательное или не число -> (None, сообщение).
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = float(value)
    else:
        normalized = clean_text(value).replace(",", ".", 1)
        try:
            parsed = float(normalized)
        except ValueError:
            return None, "Price must be a non-negative number."
    if not math.isfinite(parsed) or parsed < 0:
        return None, "Price must be a non-negative number."
    return parsed, None


def parse_warranty(value: Any) -> Tuple[Optional[int], Optional[str]]:
    """Гарантия в годах: целое >= 0 или пусто."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, None
    message = "Warranty must be a non-negative whole number of years."
    if isinstance(value, bool):
        return None, message
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None, message
        parsed = int(value)
    else:
        cleaned = clean_text(value)
        if not re.fullmatch(r"[+-]?\d+", cleaned):
            return None, message
        parsed = int(cleaned)
    if parsed < 0:
        return None, message
    return parsed, None


def parse_positive_int(value: Any) -> Optional[int]:
    """Положительный целый идентификатор или None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    cleaned = clean_text(value)
    if not cleaned.isdigit():
        return None
    parsed = int(cleaned)
    return parsed if parsed > 0 else None
