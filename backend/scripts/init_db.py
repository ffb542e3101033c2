"""
Скрипт для создания таблиц и seed администратора
"""

import sys
from pathlib import Path

# Добавляем корень проекта в путь
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from backend.core.config import settings  # noqa: E402
from backend.core.startup_migrations import run_migrations, seed_admin  # noqa: E402


def main() -> None:
    print(f"База данных: {settings.database_url}")
    version = run_migrations()
    print(f"✅ Схема версии {version}")
    seed_admin()
    if settings.seed_admin_enabled:
        print(f"✅ Администратор: {settings.seed_admin_username}")


if __name__ == "__main__":
    main()
