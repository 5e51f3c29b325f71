import pytest
from datetime import date
from unittest.mock import patch
from pydantic import ValidationError

from heritage_admin.models import EventTimeSlot, EventTicketType, EventTranslation, GuideProfileTranslation, GuideDocument
from heritage_admin.schemas import EventWizardIn, GuideWizardIn
from heritage_admin.services import wizards

def _event(**overrides):
    data = {
        "title": "Diwali at the Fort",
        "start_date": date(2026, 11, 8),
        "end_date": date(2026, 11, 9),
        "time_slots": [{"start": "18:00", "end": "21:00", "description": "Lamp lighting"}],
        "venue_name": "Amber Fort",
        "is_paid_event": True,
        "fee_items": [{"ticket_type": "Adult", "amount": 250}, {"ticket_type": "Child", "amount": 0}],
        "amenities": ["parking", "food stalls"],
        "translations": {"title": {"hi": "किले में दिवाली"}},
        "status": "submit",
    }
    data.update(overrides)
    return EventWizardIn(**data)

def test_create_event(db):
    event = wizards.create_event(db, _event())

    assert event.status == "submitted"
    assert event.is_paid is True
    assert event.amenities == ["parking", "food stalls"]
    assert db.query(EventTimeSlot).one().description == "Lamp lighting"
    tickets = db.query(EventTicketType).order_by(EventTicketType.position).all()
    assert [(t.ticket_type, t.amount, t.currency) for t in tickets] == [("Adult", 250, "INR"), ("Child", 0, "INR")]
    assert db.query(EventTranslation).one().language_code == "HI"

def test_paid_event_needs_priced_ticket(db):
    with pytest.raises(wizards.WizardError) as exc:
        wizards.create_event(db, _event(fee_items=[{"ticket_type": "Free pass", "amount": 0}]))
    assert "priced ticket" in str(exc.value)

def test_paid_draft_may_be_incomplete(db):
    event = wizards.create_event(db, _event(fee_items=[], status="draft"))
    assert event.status == "draft"

def test_free_event_drops_tickets(db):
    wizards.create_event(db, _event(is_paid_event=False))
    assert db.query(EventTicketType).count() == 0

def test_event_date_and_slot_checks(db):
    errors = wizards.validate_event(_event(
        end_date=date(2026, 11, 1),
        time_slots=[{"start": "21:00", "end": "18:00"}],
    ))
    assert "End date must be on or after start date" in errors
    assert "Time slot 1: end must be after start" in errors

def test_invalid_status(db):
    with pytest.raises(wizards.WizardError):
        wizards.create_event(db, _event(status="publish"))

def _guide(**overrides):
    data = {
        "guide_name": "Meera Sharma",
        "city": "Jaipur",
        "bio": {"en": "Ten years guiding in Jaipur.", "hi": "जयपुर में दस साल।", "fr": ""},
        "languages": ["English", "Hindi"],
        "specializations": ["Forts"],
        "experience": 10,
        "hourly_rate": 800,
        "available_days": ["Mon", "Sat"],
        "weekday_start": "09:00",
        "weekday_end": "18:00",
        "document_urls": ["http://x/localguide/documents/1_licence.pdf"],
        "status": "submit",
    }
    data.update(overrides)
    return GuideWizardIn(**data)

def test_create_guide(db):
    guide = wizards.create_guide(db, _guide())

    assert guide.status == "submitted"
    assert guide.experience_years == 10
    assert guide.languages == ["English", "Hindi"]
    bios = {t.language_code: t.bio for t in db.query(GuideProfileTranslation).all()}
    assert bios == {"EN": "Ten years guiding in Jaipur.", "HI": "जयपुर में दस साल।"}
    assert db.query(GuideDocument).one().file_name == "1_licence.pdf"

def test_submitted_guide_needs_languages_and_days(db):
    errors = wizards.validate_guide(_guide(languages=[], available_days=[]))
    assert "At least one language is required" in errors
    assert "At least one available day is required" in errors
    assert wizards.validate_guide(_guide(languages=[], available_days=[], status="draft")) == []

def test_guide_rate_and_hours_checks():
    errors = wizards.validate_guide(_guide(hourly_rate=-1, weekday_end="08:00"))
    assert "Hourly rate cannot be negative" in errors
    assert "Weekday end time must be after start time" in errors

def test_upload_guide_files():
    def fake_upload(files, folder):
        return [{"url": f"http://x/{folder}/{name}"} for name, _ in files]

    with patch("heritage_admin.services.wizards.upload_files", side_effect=fake_upload):
        photo_url, docs = wizards.upload_guide_files(("me.jpg", b"1"), [("id.pdf", b"2"), ("licence.pdf", b"3")])

    assert photo_url == "http://x/localguide/profile/me.jpg"
    assert docs == ["http://x/localguide/documents/id.pdf", "http://x/localguide/documents/licence.pdf"]

@pytest.mark.parametrize("start,end", [("9:00", "10:30"), ("09:00 AM", "01:15 PM"), ("11:45am", "12:30 pm")])
def test_slot_times_compare_as_clock_times(start, end):
    assert wizards.validate_event(_event(time_slots=[{"start": start, "end": end}])) == []

def test_slot_times_are_stored_as_24h(db):
    wizards.create_event(db, _event(time_slots=[{"start": "6:00 PM", "end": "9:30 PM"}]))
    slot = db.query(EventTimeSlot).one()
    assert (slot.start_time, slot.end_time) == ("18:00", "21:30")

def test_guide_hours_accept_am_pm():
    assert wizards.validate_guide(_guide(weekday_start="9:00 AM", weekday_end="6:00 PM")) == []
    errors = wizards.validate_guide(_guide(weekend_start="2:00 PM", weekend_end="11:00 AM"))
    assert "Weekend end time must be after start time" in errors

def test_unreadable_time_is_rejected():
    with pytest.raises(ValidationError):
        _event(time_slots=[{"start": "noon", "end": "13:00"}])
