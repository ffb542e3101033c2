"""Роуты /inventory/equipment/{id}/events: журнал событий."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from backend.modules.inventory.dependencies import get_current_admin, get_db
from backend.modules.inventory.errors import NotFoundError
from backend.modules.inventory.schemas.event import EventIn, EventOut
from backend.modules.inventory.services import event_service, file_store

router = APIRouter(
    prefix="/equipment/{equipment_id}/events",
    tags=["events"],
    dependencies=[Depends(get_current_admin)],
)


def _event_form(
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    event_date: Optional[str] = Form(None),
    target_employee_id: Optional[str] = Form(None),
    target_state: Optional[str] = Form(None),
) -> EventIn:
    return EventIn(
        category=category,
        description=description,
        event_date=event_date,
        target_employee_id=target_employee_id,
        target_state=target_state,
    )


@router.get("/", response_model=List[EventOut])
def list_events(equipment_id: int, db: Session = Depends(get_db)) -> List[EventOut]:
    return event_service.list_events(db, equipment_id)


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    equipment_id: int,
    payload: EventIn = Depends(_event_form),
    document: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
) -> EventOut:
    """Новое событие; Attribution и État сразу меняют оборудование."""
    upload = await file_store.read_upload(document)
    return event_service.create_event(db, equipment_id, payload, upload)


@router.get("/{event_id}", response_model=EventOut)
def get_event(equipment_id: int, event_id: int, db: Session = Depends(get_db)) -> EventOut:
    return event_service.get_event(db, equipment_id, event_id)


@router.patch("/{event_id}", response_model=EventOut)
async def update_event(
    equipment_id: int,
    event_id: int,
    payload: EventIn = Depends(_event_form),
    document: Optional[UploadFile] = File(None),
    remove_document: bool = Form(False),
    db: Session = Depends(get_db),
) -> EventOut:
    upload = await file_store.read_upload(document)
    return event_service.update_event(
        db, equipment_id, event_id, payload, upload, remove_document=remove_document
    )


@router.delete("/{event_id}")
def delete_event(equipment_id: int, event_id: int, db: Session = Depends(get_db)) -> dict:
    event_service.delete_event(db, equipment_id, event_id)
    return {"message": "Event deleted"}


@router.get("/{event_id}/document")
def download_document(
    equipment_id: int, event_id: int, db: Session = Depends(get_db)
) -> FileResponse:
    event = event_service.get_event(db, equipment_id, event_id)
    if not event.document_ref:
        raise NotFoundError("No document attached")
    path = file_store.resolve_path(event.document_ref)
    if not path.is_file():
        raise NotFoundError("Document file is missing")
    return FileResponse(path, filename=path.name)
