"""Роуты /inventory/stats: сводная статистика."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.schemas.stats import InventoryStatsOut
from backend.modules.inventory.services.stats_service import compute_inventory_stats

router = APIRouter(prefix="/stats", tags=["stats"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=InventoryStatsOut)
def get_stats(
    db: Session = Depends(get_db),
    order: str = Query("key", pattern="^(key|value)$"),
) -> InventoryStatsOut:
    return compute_inventory_stats(db, value_order=order == "value")
