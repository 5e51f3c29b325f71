import json
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from pydantic import ValidationError
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import EventWizardIn, EventOut, GuideWizardIn, GuideOut
from ..security.rbac import require_admin
from ..services import wizards as wizard_service
from ..services.storage import StorageError

router = APIRouter(prefix="/wizards", tags=["wizards"])

@router.get("/events/steps")
def event_steps() -> list[str]:
    return wizard_service.EVENT_STEPS

@router.post("/events", response_model=EventOut)
def create_event(payload: EventWizardIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    try:
        return wizard_service.create_event(db, payload)
    except wizard_service.WizardError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/events/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    event = wizard_service.get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event

@router.post("/guides", response_model=GuideOut)
def create_guide(
    data: str = Form(...), # GuideWizardIn as JSON
    profile_photo: UploadFile | None = File(None),
    documents: list[UploadFile] = File(default=[]),
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    try:
        payload = GuideWizardIn(**json.loads(data))
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid guide payload: {e}")

    errors = wizard_service.validate_guide(payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))

    photo = (profile_photo.filename or "photo", profile_photo.file.read()) if profile_photo else None
    files = [(d.filename or "document", d.file.read()) for d in documents]
    try:
        photo_url, doc_urls = wizard_service.upload_guide_files(photo, files)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if photo_url:
        payload.profile_photo_url = photo_url
    payload.document_urls = list(payload.document_urls) + doc_urls

    try:
        return wizard_service.create_guide(db, payload)
    except wizard_service.WizardError as e:
        raise HTTPException(status_code=400, detail=str(e))
