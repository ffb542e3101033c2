"""
Резервная копия файла SQLite в db/backups/invent97-backup-<дата>-<время>.db
"""

import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Добавляем корень проекта в путь
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.engine import make_url  # noqa: E402

from backend.core.config import settings  # noqa: E402


def sqlite_path(database_url: str) -> Path:
    """Путь к файлу БД из sqlite:///... URL."""
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite") or not url.database or url.database == ":memory:":
        raise ValueError(f"Резервное копирование поддерживает только файл SQLite: {database_url}")
    return Path(url.database)


def backup_database(db_path: Path, backup_dir: Optional[Path] = None) -> Path:
    """Копирует файл БД; возвращает путь к копии."""
    if not db_path.is_file():
        raise FileNotFoundError(
            f"База данных не найдена: {db_path}. Запустите приложение хотя бы один раз."
        )
    backup_dir = backup_dir or db_path.parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    destination = backup_dir / f"invent97-backup-{stamp}.db"
    shutil.copy2(db_path, destination)
    return destination


def main() -> int:
    try:
        destination = backup_database(sqlite_path(settings.database_url))
    except (OSError, ValueError) as e:
        print(f"❌ Не удалось сохранить базу данных: {e}", file=sys.stderr)
        return 1
    print(f"✅ Резервная копия создана: {destination}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
