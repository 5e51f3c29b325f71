import logging
from datetime import datetime, timezone
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..logging_setup import log_event
from ..models import HeritageSite, HeritageSiteTranslation, SiteMedia, SiteVisitingHours, SiteTicketType
from ..schemas import SiteFilters, SiteCreate, SiteUpdate, SiteWizardIn, OperationResult
from .localized import save_translations, load_translations
from .storage import delete_files

logger = logging.getLogger(__name__)

SITE_TRANSLATION_FIELDS = ["name", "short_desc", "full_desc", "address", "city", "state", "country"]

def _has_experience(site: HeritageSite, experience: str) -> bool:
    value = site.experience
    if isinstance(value, list):
        return experience in value
    return value == experience

def list_sites(db: Session, filters: SiteFilters | None = None) -> list[HeritageSite]:
    filters = filters or SiteFilters()
    q = db.query(HeritageSite)
    if filters.search and filters.search.strip():
        q = q.filter(HeritageSite.name_default.ilike(f"%{filters.search.strip()}%"))
    if filters.status == "active":
        q = q.filter(HeritageSite.is_active == True)
    elif filters.status == "inactive":
        q = q.filter(HeritageSite.is_active == False)
    if filters.site_type:
        q = q.filter(HeritageSite.site_type == filters.site_type)

    try:
        sites = q.order_by(HeritageSite.updated_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to list heritage sites: {e}")
        return []

    # experience is stored as either a single value or a list
    if filters.experience:
        sites = [s for s in sites if _has_experience(s, filters.experience)]
    return sites

def get_site(db: Session, site_id: int) -> HeritageSite | None:
    return db.query(HeritageSite).filter(HeritageSite.site_id == site_id).first()

def get_site_translations(db: Session, site_id: int) -> dict:
    return load_translations(db, HeritageSiteTranslation, "site_id", site_id, SITE_TRANSLATION_FIELDS)

def create_site(db: Session, payload: SiteCreate) -> HeritageSite:
    data = payload.dict(exclude_unset=True)
    site = HeritageSite(**data)
    if site.is_active is None:
        site.is_active = True
    db.add(site)
    db.commit()
    db.refresh(site)
    log_event("site_created", site_id=site.site_id)
    return site

def update_site(db: Session, site_id: int, payload: SiteUpdate) -> HeritageSite | None:
    site = get_site(db, site_id)
    if not site:
        return None
    for key, value in payload.dict(exclude_unset=True).items():
        setattr(site, key, value)
    site.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(site)
    return site

def delete_site(db: Session, site_id: int) -> OperationResult:
    site = get_site(db, site_id)
    if not site:
        return OperationResult(success=False, error="Heritage site not found")

    urls = [m.storage_url for m in site.media]
    try:
        db.query(HeritageSiteTranslation).filter(HeritageSiteTranslation.site_id == site_id).delete()
        db.delete(site)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete site {site_id}: {e}")
        return OperationResult(success=False, error=str(e))

    failed = delete_files(urls)
    log_event("site_deleted", site_id=site_id, orphaned_files=len(failed) or None)
    return OperationResult(success=True)

def toggle_site_status(db: Session, site_id: int) -> OperationResult:
    site = get_site(db, site_id)
    if not site:
        return OperationResult(success=False, error="Heritage site not found")
    site.is_active = not bool(site.is_active)
    site.updated_at = datetime.now(timezone.utc)
    db.commit()
    log_event("site_status_toggled", site_id=site_id, is_active=site.is_active)
    return OperationResult(success=True)

def upsert_site_with_translations(db: Session, payload: SiteWizardIn) -> HeritageSite:
    """
    Saves the whole heritage-site wizard: base record, per-language
    translations, media, visiting hours and ticket types. All or nothing.
    """
    try:
        if payload.site_id:
            site = get_site(db, payload.site_id)
            if not site:
                raise LookupError(f"Heritage site {payload.site_id} not found")
            for key, value in payload.site.dict(exclude_unset=True).items():
                setattr(site, key, value)
            site.updated_at = datetime.now(timezone.utc)
        else:
            site = HeritageSite(**payload.site.dict(exclude_unset=True))
            if site.is_active is None:
                site.is_active = True
            db.add(site)
        db.flush()

        translations = dict(payload.translations)
        # The default columns are the English copy
        english = {
            "name": site.name_default,
            "short_desc": site.short_desc_default,
            "full_desc": site.full_desc_default,
            "address": site.location_address,
            "city": site.location_city,
            "state": site.location_state,
            "country": site.location_country,
        }
        for field, text in english.items():
            if text and not (translations.get(field) or {}).get("en"):
                translations.setdefault(field, {})["en"] = text
        save_translations(db, HeritageSiteTranslation, "site_id", site.site_id, SITE_TRANSLATION_FIELDS, translations, include_source=True)

        db.query(SiteMedia).filter(SiteMedia.site_id == site.site_id).delete()
        for idx, item in enumerate(payload.media):
            if not item.storage_url or item.storage_url.startswith("blob:"):
                continue
            db.add(SiteMedia(site_id=site.site_id, media_type=item.media_type, storage_url=item.storage_url, position=idx, is_primary=item.is_primary))

        db.query(SiteVisitingHours).filter(SiteVisitingHours.site_id == site.site_id).delete()
        for hours in payload.visiting_hours:
            db.add(SiteVisitingHours(site_id=site.site_id, **hours.dict()))

        db.query(SiteTicketType).filter(SiteTicketType.site_id == site.site_id).delete()
        for ticket in payload.ticket_types:
            db.add(SiteTicketType(site_id=site.site_id, **ticket.dict()))

        db.commit()
    except (SQLAlchemyError, LookupError):
        db.rollback()
        raise

    db.refresh(site)
    log_event("site_wizard_saved", site_id=site.site_id, media=len(payload.media), tickets=len(payload.ticket_types))
    return site
