"""
API роуты для аутентификации
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.core.auth import create_access_token, verify_password
from backend.core.config import settings
from backend.core.database import get_db
from backend.modules.inventory.dependencies import get_current_admin
from backend.modules.inventory.models import Admin

router = APIRouter(prefix=f"{settings.api_v1_prefix}/auth", tags=["auth"])


class LoginRequest(BaseModel):
    """Запрос на вход"""
    username: str
    password: str


class AdminResponse(BaseModel):
    """Информация об администраторе"""
    id: int
    username: str


class LoginResponse(BaseModel):
    """Ответ на вход"""
    access_token: str
    token_type: str = "bearer"
    admin: AdminResponse


def _authenticate(db: Session, username: str, password: str) -> LoginResponse:
    admin = db.query(Admin).filter(Admin.username == username.strip()).first()
    if not admin or not verify_password(password, admin.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    token = create_access_token(admin.id, admin.username)
    return LoginResponse(
        access_token=token,
        admin=AdminResponse(id=admin.id, username=admin.username),
    )


@router.post("/login", response_model=LoginResponse)
async def login(login_data: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """
    Вход в систему.
    Принимает username и password, возвращает JWT токен.
    """
    return _authenticate(db, login_data.username, login_data.password)


@router.post("/login/form", response_model=LoginResponse)
async def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> LoginResponse:
    """Вход через OAuth2 форму (для Swagger UI)."""
    return _authenticate(db, form_data.username, form_data.password)


@router.get("/me", response_model=AdminResponse)
async def get_me(admin: Admin = Depends(get_current_admin)) -> AdminResponse:
    """Текущий администратор"""
    return AdminResponse(id=admin.id, username=admin.username)
