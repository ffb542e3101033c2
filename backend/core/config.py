"""
Конфигурация платформы Invent97
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_strip(s: str) -> List[str]:
    """Разбивает строку по запятой и убирает пробелы."""
    return [x.strip() for x in s.split(",") if x.strip()]


class Settings(BaseSettings):
    """Настройки приложения"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        # Читать переменные окружения (DATABASE_URL -> database_url)
        env_prefix="",
    )

    # Основные настройки
    app_name: str = "Invent97"
    api_v1_prefix: str = "/api/v1"
    debug: bool = False

    # База данных (один файл SQLite, один писатель)
    database_url: str = "sqlite:///./db/invent97.db"
    # Сколько ждать блокировку записи, прежде чем отдать ошибку
    db_busy_timeout_seconds: float = 5.0

    # Вложения (счета, документы событий)
    upload_dir: str = "uploads"
    max_upload_size: int = 5 * 1024 * 1024

    # Территории: в .env строка "martinique,guadeloupe" (не JSON)
    territories: str = "martinique,guadeloupe"

    # JWT аутентификация
    secret_key: str = "invent97-super-secret-key-change-in-production-min-32-chars"
    access_token_expire_minutes: int = 60 * 8
    algorithm: str = "HS256"

    # Seed admin
    seed_admin_enabled: bool = True
    seed_admin_username: str = "admin"
    seed_admin_password: str = "admin123"

    # Ключ шифрования паролей оборудования
    credentials_master_key: str = "invent97-credentials-master-key-change-me"

    # CORS: в .env строка "*" или "http://a,http://b"
    cors_origins: str = "*"

    def get_territories(self) -> List[str]:
        return [t.lower() for t in _split_strip(self.territories)]

    def get_cors_origins(self) -> List[str]:
        out = _split_strip(self.cors_origins)
        return out if out else ["*"]


# Глобальный экземпляр настроек
settings = Settings()

# Валидация критичных настроек при импорте
if len(settings.secret_key) < 32:
    raise ValueError(
        "SECRET_KEY должен быть минимум 32 символа. "
        "Сгенерируйте командой: openssl rand -hex 32"
    )
