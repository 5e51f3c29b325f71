import json
from datetime import datetime
from unittest.mock import MagicMock, patch

from heritage_admin.config import settings
from heritage_admin.models import AdminUser, Food, Hotel, HotelBooking, FoodBooking, HeritageSite
from heritage_admin.routes.translations import get_debouncer
from heritage_admin.schemas import TranslationResult
from heritage_admin.security.auth import get_password_hash, verify_password, create_access_token
from heritage_admin.security.rbac import has_role
from heritage_admin.services.fanout import registry, TranslationDebouncer

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_password_hashing_round_trip():
    hashed = get_password_hash("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("x", None)

def test_role_ranking():
    assert has_role(AdminUser(role="superadmin"), "admin")
    assert has_role(AdminUser(role="admin"), "moderator")
    assert not has_role(AdminUser(role="moderator"), "admin")

def test_requires_authentication(client):
    r = client.get("/bookings")
    assert r.status_code == 401

def test_invalid_token_is_rejected(client):
    r = client.get("/bookings", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401

def test_login_sets_cookie(client, db):
    db.add(AdminUser(email="Root@Heritage.test", role="superadmin", is_active=True, password_hash=get_password_hash("pw-123456")))
    db.commit()

    r = client.post("/auth/login", data={"username": "root@heritage.test", "password": "pw-123456"})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    assert "access_token" in r.headers.get("set-cookie", "")

    bad = client.post("/auth/login", data={"username": "root@heritage.test", "password": "nope"})
    assert bad.status_code == 401

def test_me(client, moderator_headers):
    r = client.get("/auth/me", headers=moderator_headers)
    assert r.status_code == 200
    assert r.json()["role"] == "moderator"

def test_only_superadmin_creates_admins(client, db, admin_headers):
    r = client.post("/auth/admins", json={"name": "New", "email": "new@heritage.test", "password": "pw"}, headers=admin_headers)
    assert r.status_code == 403

    root = AdminUser(email="root@heritage.test", role="superadmin", is_active=True)
    db.add(root)
    db.commit()
    headers = {"Authorization": f"Bearer {create_access_token({'sub': str(root.id)})}"}
    r = client.post("/auth/admins", json={"name": "New", "email": "new@heritage.test", "password": "pw", "role": "admin"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["role"] == "admin"

def _seed_bookings(db):
    db.add(Hotel(hotel_id=1, hotel_name="Lake Palace"))
    db.add(HotelBooking(booking_id=1, hotel_id=1, booking_status="pending", guest_full_name="Asha", created_at=datetime(2026, 3, 1)))
    db.add(FoodBooking(booking_id=2, booking_status="confirmed", created_at=datetime(2026, 3, 2)))
    db.commit()

def test_list_and_detail_bookings(client, db, moderator_headers):
    _seed_bookings(db)
    r = client.get("/bookings", headers=moderator_headers)
    assert r.status_code == 200
    assert [(b["module_type"], b["id"]) for b in r.json()] == [("food", 2), ("hotel", 1)]

    r = client.get("/bookings", params={"module_type": "hotel", "search": "asha"}, headers=moderator_headers)
    assert [b["booking_reference"] for b in r.json()] == ["HTL-1"]

    assert client.get("/bookings/hotel/1", headers=moderator_headers).json()["customer_name"] == "Asha"
    assert client.get("/bookings/hotel/99", headers=moderator_headers).status_code == 404

def test_booking_status_update_needs_admin(client, db, moderator_headers, admin_headers):
    _seed_bookings(db)
    body = {"module_type": "hotel", "status": "confirmed"}
    assert client.patch("/bookings/1/status", json=body, headers=moderator_headers).status_code == 403

    r = client.patch("/bookings/1/status", json=body, headers=admin_headers)
    assert r.json() == {"success": True, "error": None}
    assert db.query(HotelBooking).get(1).booking_status == "confirmed"

def test_food_payment_update_is_rejected(client, db, admin_headers):
    _seed_bookings(db)
    r = client.patch("/bookings/2/payment-status", json={"module_type": "food", "status": "paid"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Payment status updates are not supported for food bookings"

def test_booking_summary(client, db, moderator_headers):
    _seed_bookings(db)
    r = client.get("/bookings/summary", headers=moderator_headers)
    assert r.json()["total"] == 2
    assert r.json()["by_status"] == {"pending": 1, "confirmed": 1}

def test_verification_flow(client, db, moderator_headers):
    db.add(Hotel(hotel_id=3, hotel_name="Haveli", status="draft"))
    db.commit()

    records = client.get("/verification", params={"entity_type": "Hotel"}, headers=moderator_headers).json()
    assert records[0]["status"] == "Pending"

    r = client.post("/verification/3/approve", json={"entity_type": "Hotel"}, headers=moderator_headers)
    assert r.status_code == 200
    assert db.query(Hotel).get(3).status == "published"

    r = client.post("/verification/3/reject", json={"entity_type": "Castle"}, headers=moderator_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Unknown entity type: Castle"

def test_site_media_upload_requires_saved_site(client, uploads, admin_headers):
    r = client.post("/heritage-sites/42/media", files={"file": ("a.jpg", b"x", "image/jpeg")}, headers=admin_headers)
    assert r.status_code == 404
    assert "Please save the site first" in r.json()["detail"]

def test_site_media_upload(client, db, uploads, admin_headers):
    db.add(HeritageSite(site_id=1, name_default="Amber Fort"))
    db.commit()
    r = client.post("/heritage-sites/1/media", files={"file": ("gate.jpg", b"x", "image/jpeg")}, data={"is_primary": "true"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["is_primary"] is True
    assert "/storage/v1/object/public/heritage/sites/1/" in r.json()["storage_url"]

def test_media_upload_rejects_oversized(client, uploads, moderator_headers, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)
    r = client.post("/media", files=[("files", ("big.jpg", b"12345", "image/jpeg"))], headers=moderator_headers)
    assert r.status_code == 400
    assert 'File "big.jpg"' in r.json()["detail"]

def test_draft_edit_schedules_debounced_fanout(client, moderator_headers):
    scheduler = MagicMock()
    client.app.dependency_overrides[get_debouncer] = lambda: TranslationDebouncer(registry, scheduler=scheduler)

    draft = client.post("/translations/drafts", json={"fields": ["hotel_name"]}, headers=moderator_headers).json()
    r = client.post(f"/translations/drafts/{draft['draft_id']}/edit", json={"field": "hotel_name", "text": "Lake Palace"}, headers=moderator_headers)

    assert r.status_code == 200
    assert r.json()["scheduled"] is True
    assert r.json()["values"]["hotel_name"]["en"] == "Lake Palace"
    assert scheduler.add_job.call_args.kwargs["replace_existing"] is True

    assert client.delete(f"/translations/drafts/{draft['draft_id']}", headers=moderator_headers).status_code == 200
    assert client.get(f"/translations/drafts/{draft['draft_id']}", headers=moderator_headers).status_code == 404

def test_direct_translate(client, moderator_headers):
    with patch("heritage_admin.services.translation.translate", return_value=TranslationResult(success=True, translations={"hi": ["नमस्ते"]})):
        r = client.post("/translations/translate", json={"text": "Hello", "target": "hi"}, headers=moderator_headers)
    assert r.json()["translations"] == {"hi": ["नमस्ते"]}

def test_listing_review_roundtrip(client, db, moderator_headers):
    db.add(Hotel(hotel_id=8, hotel_name="Haveli"))
    db.commit()

    opened = client.post("/listings/hotels/8/draft", headers=moderator_headers).json()
    assert opened["translations"]["hotel_name"]["en"] == "Haveli"
    assert opened["draft_id"]

    r = client.put("/listings/hotels/8", json={"fields": {"city": "Jodhpur"}, "hero_media": []}, headers=moderator_headers)
    assert r.status_code == 400

    r = client.put("/listings/hotels/8", json={"fields": {"city": "Jodhpur"}}, headers=moderator_headers)
    assert r.status_code == 200
    assert r.json()["listing"]["city"] == "Jodhpur"

    assert client.get("/listings/hotels/99", headers=moderator_headers).status_code == 404

def test_event_wizard_endpoint(client, admin_headers):
    body = {"title": "Heritage Walk", "is_paid_event": True, "fee_items": [], "status": "submit"}
    assert client.post("/wizards/events", json=body, headers=admin_headers).status_code == 400

    body["fee_items"] = [{"ticket_type": "Adult", "amount": 100}]
    r = client.post("/wizards/events", json=body, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "submitted"

def test_guide_wizard_endpoint_uploads_files(client, uploads, admin_headers):
    data = {"guide_name": "Meera", "languages": ["Hindi"], "available_days": ["Mon"], "status": "submit"}
    r = client.post(
        "/wizards/guides",
        data={"data": json.dumps(data)},
        files=[("profile_photo", ("me.jpg", b"img", "image/jpeg")), ("documents", ("id.pdf", b"pdf", "application/pdf"))],
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert "/localguide/profile/" in r.json()["profile_photo_url"]

def test_verification_all_filter_from_dropdown(client, db, moderator_headers):
    db.add(Hotel(hotel_id=3, hotel_name="Haveli", status="draft"))
    db.add(HeritageSite(site_id=1, name_default="Amber Fort", is_active=True))
    db.commit()
    r = client.get("/verification", params={"status": "All", "entity_type": "All"}, headers=moderator_headers)
    assert {rec["entity_type"] for rec in r.json()} == {"Hotel", "Heritage Site"}

def test_food_hours_with_bad_day_are_a_client_error(client, db, moderator_headers):
    db.add(Food(food_id=3, food_name="Thali House"))
    db.commit()
    r = client.put("/listings/food/3", json={"hours": [{"day_of_week": "monday"}]}, headers=moderator_headers)
    assert r.status_code == 422
