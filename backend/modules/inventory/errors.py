"""Ошибки сервисов инвентаря (маппинг в HTTP: backend/main.py)."""

from typing import Any, List, Optional


class InventoryError(Exception):
    """Базовая ошибка модуля инвентаря."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """
    Набор нарушений, найденных при проверке ввода.

    Проверки не останавливаются на первой ошибке: `errors` содержит все
    найденные сообщения, `data`: отклонённый ввод, чтобы клиент мог
    заново показать форму.
    """

    def __init__(self, errors: List[str], data: Optional[Any] = None):
        super().__init__("; ".join(errors))
        self.errors = list(errors)
        self.data = data


class NotFoundError(InventoryError):
    """Запись по идентификатору не найдена."""


class ConflictError(InventoryError):
    """Нарушение уникальности (имя типа, email сотрудника)."""


class StoreError(InventoryError):
    """Хранилище недоступно, занято или повреждено."""

    def __init__(self, message: str = "Operation failed"):
        super().__init__(message)
