"""
Dependencies для модуля инвентаря.
get_db: общий с core; get_current_admin: администратор из JWT.
"""
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.core.auth import get_admin_id_from_token
from backend.core.database import get_db as core_get_db
from backend.modules.inventory.models import Admin

get_db = core_get_db


def get_current_admin(
    db: Session = Depends(get_db),
    admin_id: int = Depends(get_admin_id_from_token),
) -> Admin:
    """Текущий администратор (единственная роль приложения)."""
    admin = db.query(Admin).filter(Admin.id == admin_id).first()
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Administrator not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return admin
