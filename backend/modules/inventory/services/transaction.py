"""Единая граница транзакции для сервисов инвентаря."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.modules.inventory.errors import ConflictError, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session, conflict_message: Optional[str] = None) -> Iterator[Session]:
    """
    Выполняет блок в одной транзакции сессии.

    Успех: commit. Любая ошибка: rollback, ничего частичного не остаётся.
    Нарушение уникальности превращается в ConflictError (если задан
    conflict_message), прочие ошибки SQLAlchemy: в StoreError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if conflict_message and "unique" in str(e).lower():
            raise ConflictError(conflict_message) from e
        logger.exception("Нарушение целостности БД: %s", e)
        raise StoreError() from e
    except SQLAlchemyError as e:
        db.rollback()
        # В т.ч. "database is locked" после истечения busy timeout
        logger.exception("Ошибка хранилища: %s", e)
        raise StoreError() from e
    except Exception:
        db.rollback()
        raise


@contextmanager
def reading(db: Session) -> Iterator[Session]:
    """Оборачивает чтение: ошибки хранилища -> StoreError."""
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Ошибка чтения из хранилища: %s", e)
        raise StoreError() from e
