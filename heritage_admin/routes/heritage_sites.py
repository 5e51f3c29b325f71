from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import SiteFilters, SiteCreate, SiteUpdate, SiteOut, SiteWizardIn, OperationResult
from ..security.rbac import require_moderator, require_admin
from ..services import heritage_sites as site_service
from ..services import storage

router = APIRouter(prefix="/heritage-sites", tags=["heritage-sites"])

@router.get("", response_model=list[SiteOut])
def list_sites(
    search: str | None = None,
    status: str | None = None,
    experience: str | None = None,
    site_type: str | None = None,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    return site_service.list_sites(db, SiteFilters(search=search, status=status, experience=experience, site_type=site_type))

@router.get("/{site_id}")
def get_site(site_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    site = site_service.get_site(db, site_id)
    if not site:
        raise HTTPException(status_code=404, detail="Heritage site not found")
    return {
        "site": SiteOut.model_validate(site),
        "translations": site_service.get_site_translations(db, site_id),
        "media": [
            {"media_id": m.media_id, "media_type": m.media_type, "storage_url": m.storage_url, "position": m.position, "is_primary": m.is_primary}
            for m in site.media
        ],
    }

@router.post("", response_model=SiteOut)
def create_site(payload: SiteCreate, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    return site_service.create_site(db, payload)

@router.post("/wizard", response_model=SiteOut)
def save_site_wizard(payload: SiteWizardIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    try:
        return site_service.upsert_site_with_translations(db, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.patch("/{site_id}", response_model=SiteOut)
def update_site(site_id: int, payload: SiteUpdate, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    site = site_service.update_site(db, site_id, payload)
    if not site:
        raise HTTPException(status_code=404, detail="Heritage site not found")
    return site

@router.delete("/{site_id}", response_model=OperationResult)
def delete_site(site_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    result = site_service.delete_site(db, site_id)
    if not result.success:
        raise HTTPException(status_code=404, detail=result.error)
    return result

@router.post("/{site_id}/toggle-status", response_model=OperationResult)
def toggle_status(site_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    result = site_service.toggle_site_status(db, site_id)
    if not result.success:
        raise HTTPException(status_code=404, detail=result.error)
    return result

@router.post("/{site_id}/media")
def upload_site_media(
    site_id: int,
    file: UploadFile = File(...),
    media_type: str = Form("image"),
    position: int = Form(0),
    is_primary: bool = Form(False),
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    if not site_service.get_site(db, site_id):
        raise HTTPException(status_code=404, detail=f"Site with ID {site_id} not found in database. Please save the site first before uploading media.")
    try:
        uploaded = storage.upload_file(file.filename or "upload", file.file.read(), f"sites/{site_id}", file.content_type)
        media = storage.add_site_media(db, site_id, media_type, uploaded["url"], position, is_primary)
    except storage.StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"media_id": media.media_id, "storage_url": media.storage_url, "position": media.position, "is_primary": media.is_primary}

@router.delete("/{site_id}/media/{media_id}", response_model=OperationResult)
def delete_site_media(site_id: int, media_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    result = storage.delete_media_item(db, media_id)
    if not result.success:
        raise HTTPException(status_code=404, detail=result.error)
    return result
