"""Роуты /inventory/export: выгрузка в CSV и Excel."""

import io
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.services.export_service import (
    XLSX_MEDIA_TYPE,
    build_equipment_csv,
    build_inventory_workbook,
)

router = APIRouter(prefix="/export", tags=["export"], dependencies=[Depends(get_current_admin)])


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


@router.get("/equipment.csv")
def export_equipment_csv(db: Session = Depends(get_db)) -> StreamingResponse:
    content = build_equipment_csv(db)
    filename = f"invent97-export-{_timestamp()}.csv"
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/inventory.xlsx")
def export_inventory_xlsx(db: Session = Depends(get_db)) -> StreamingResponse:
    content = build_inventory_workbook(db)
    filename = f"invent97-inventory-{_timestamp()}.xlsx"
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
