from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import ListingSaveIn
from ..security.rbac import require_moderator
from ..services import listings as listing_service
from ..services.fanout import registry

router = APIRouter(prefix="/listings", tags=["listings"])

@router.get("/{kind}/{listing_id}")
def load_listing(kind: str, listing_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    try:
        return listing_service.load_for_edit(db, kind, listing_id)
    except listing_service.ListingNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.post("/{kind}/{listing_id}/draft")
def open_review_draft(kind: str, listing_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    """Seeds a translation draft from the stored record so field edits can fan out."""
    try:
        state = listing_service.load_for_edit(db, kind, listing_id)
    except listing_service.ListingNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    fields = listing_service.get_kind(kind).fields
    draft_id = registry.create(fields, state["translations"])
    return {"draft_id": draft_id, **state}

@router.put("/{kind}/{listing_id}")
def save_listing(kind: str, listing_id: int, payload: ListingSaveIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    try:
        return listing_service.save_changes(db, kind, listing_id, payload)
    except listing_service.ListingNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except listing_service.ListingError as e:
        raise HTTPException(status_code=400, detail=str(e))
