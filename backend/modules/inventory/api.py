"""
API роуты модуля инвентаря.
Префикс: /api/v1/inventory. Подроуты: /types, /employees, /equipment, /stats, /export.
"""

from fastapi import APIRouter, Depends

from backend.core.config import settings
from backend.modules.inventory.dependencies import get_current_admin

from .routes import credentials, employees, equipment, events, export, stats, types

router = APIRouter(prefix=f"{settings.api_v1_prefix}/inventory", tags=["inventory"])

router.include_router(types.router)
router.include_router(employees.router)
router.include_router(equipment.router)
router.include_router(credentials.router)
router.include_router(events.router)
router.include_router(stats.router)
router.include_router(export.router)


@router.get("/", dependencies=[Depends(get_current_admin)])
async def inventory_module_info():
    """Информация о модуле инвентаря"""
    return {
        "module": "inventory",
        "name": settings.app_name,
        "version": "1.0.0",
        "territories": settings.get_territories(),
    }
