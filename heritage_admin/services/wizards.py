import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..logging_setup import log_event
from ..models import Event, EventTranslation, EventTimeSlot, EventTicketType, GuideProfile, GuideProfileTranslation, GuideDocument
from ..schemas import EventWizardIn, GuideWizardIn, parse_clock_time
from .localized import save_translations
from .storage import upload_files

logger = logging.getLogger(__name__)

EVENT_TRANSLATION_FIELDS = ["title", "short_description", "full_description"]
EVENT_STEPS = ["Overview", "Schedule", "Venue & Ticket", "Review"]

GUIDE_PHOTO_FOLDER = "localguide/profile"
GUIDE_DOCUMENT_FOLDER = "localguide/documents"

class WizardError(Exception):
    pass

def _stored_status(status: str) -> str:
    if status == "submit":
        return "submitted"
    if status == "draft":
        return "draft"
    raise WizardError(f"Invalid status: {status}")

def _ends_after(start: str | None, end: str | None) -> bool:
    if not start or not end:
        return True
    return parse_clock_time(end) > parse_clock_time(start)

def validate_event(payload: EventWizardIn) -> list[str]:
    errors = []
    if not payload.title.strip():
        errors.append("Title is required")
    if payload.start_date and payload.end_date and payload.end_date < payload.start_date:
        errors.append("End date must be on or after start date")
    for i, slot in enumerate(payload.time_slots):
        if not _ends_after(slot.start, slot.end):
            errors.append(f"Time slot {i + 1}: end must be after start")
    for i, fee in enumerate(payload.fee_items):
        if fee.amount < 0:
            errors.append(f"Ticket {i + 1}: amount cannot be negative")
    # drafts may be saved half-filled
    if payload.status == "submit" and payload.is_paid_event:
        if not any(f.amount > 0 for f in payload.fee_items):
            errors.append("Paid events need at least one priced ticket")
    return errors

def create_event(db: Session, payload: EventWizardIn) -> Event:
    status = _stored_status(payload.status)
    errors = validate_event(payload)
    if errors:
        raise WizardError("; ".join(errors))

    event = Event(
        organizer_user_id=payload.organizer_user_id,
        site_id=payload.site_id,
        title=payload.title.strip(),
        short_description=payload.short_description,
        full_description=payload.full_description,
        category=payload.category,
        start_date=payload.start_date,
        end_date=payload.end_date,
        venue_name=payload.venue_name,
        venue_address=payload.venue_address,
        city=payload.city,
        state=payload.state,
        latitude=payload.latitude,
        longitude=payload.longitude,
        capacity=payload.capacity,
        is_paid=payload.is_paid_event,
        amenities=list(payload.amenities),
        cover_image_url=payload.cover_image_url,
        status=status,
    )
    try:
        db.add(event)
        db.flush()
        for idx, slot in enumerate(payload.time_slots):
            db.add(EventTimeSlot(event_id=event.event_id, start_time=slot.start, end_time=slot.end, description=slot.description, position=idx))
        # free events carry no tickets even if the form still holds some
        if payload.is_paid_event:
            for idx, fee in enumerate(payload.fee_items):
                db.add(EventTicketType(
                    event_id=event.event_id,
                    ticket_type=fee.ticket_type,
                    amount=fee.amount,
                    currency=settings.default_currency,
                    description=fee.description,
                    position=idx,
                ))
        if payload.translations:
            save_translations(db, EventTranslation, "event_id", event.event_id, EVENT_TRANSLATION_FIELDS, payload.translations)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(event)
    log_event("event_wizard_saved", event_id=event.event_id, status=status, slots=len(payload.time_slots))
    return event

def get_event(db: Session, event_id: int) -> Event | None:
    return db.query(Event).filter(Event.event_id == event_id).first()

def validate_guide(payload: GuideWizardIn) -> list[str]:
    errors = []
    if not payload.guide_name.strip():
        errors.append("Guide name is required")
    if payload.experience < 0:
        errors.append("Experience cannot be negative")
    for label, rate in (("Hourly", payload.hourly_rate), ("Half day", payload.half_day_rate), ("Full day", payload.full_day_rate)):
        if rate < 0:
            errors.append(f"{label} rate cannot be negative")
    if not _ends_after(payload.weekday_start, payload.weekday_end):
        errors.append("Weekday end time must be after start time")
    if not _ends_after(payload.weekend_start, payload.weekend_end):
        errors.append("Weekend end time must be after start time")
    if payload.status == "submit":
        if not payload.languages:
            errors.append("At least one language is required")
        if not payload.available_days:
            errors.append("At least one available day is required")
    return errors

def upload_guide_files(photo: tuple[str, bytes] | None, documents: list[tuple[str, bytes]]) -> tuple[str | None, list[str]]:
    photo_url = None
    if photo:
        photo_url = upload_files([photo], GUIDE_PHOTO_FOLDER)[0]["url"]
    doc_urls = [d["url"] for d in upload_files(documents, GUIDE_DOCUMENT_FOLDER)]
    return photo_url, doc_urls

def create_guide(db: Session, payload: GuideWizardIn) -> GuideProfile:
    status = _stored_status(payload.status)
    errors = validate_guide(payload)
    if errors:
        raise WizardError("; ".join(errors))

    guide = GuideProfile(
        user_id=payload.user_id,
        guide_name=payload.guide_name.strip(),
        address=payload.address,
        area=payload.area,
        city=payload.city,
        state=payload.state,
        languages=list(payload.languages),
        specializations=list(payload.specializations),
        experience_years=payload.experience,
        coverage_area=payload.coverage_area,
        email=payload.email,
        phone=payload.phone,
        show_contact=payload.show_contact,
        hourly_rate=payload.hourly_rate,
        half_day_rate=payload.half_day_rate,
        full_day_rate=payload.full_day_rate,
        available_days=list(payload.available_days),
        weekday_start=payload.weekday_start,
        weekday_end=payload.weekday_end,
        weekend_start=payload.weekend_start,
        weekend_end=payload.weekend_end,
        profile_photo_url=payload.profile_photo_url,
        status=status,
    )
    try:
        db.add(guide)
        db.flush()
        if payload.bio:
            save_translations(db, GuideProfileTranslation, "guide_id", guide.guide_id, ["bio"], {"bio": payload.bio}, include_source=True)
        for url in payload.document_urls:
            db.add(GuideDocument(guide_id=guide.guide_id, document_url=url, file_name=url.rsplit("/", 1)[-1]))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(guide)
    log_event("guide_wizard_saved", guide_id=guide.guide_id, status=status, documents=len(payload.document_urls))
    return guide
