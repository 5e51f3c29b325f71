import pytest
from datetime import datetime, date

from heritage_admin.models import (
    HeritageUser, Hotel, HotelBooking, Tour, TourBooking, EventBooking, FoodBooking, Food,
    GuideBooking, Artisan, Artwork, ProductOrder,
)
from heritage_admin.schemas import BookingFilters
from heritage_admin.services import bookings

def _seed(db):
    owner = HeritageUser(user_id=1, full_name="Hotel Owner")
    tourist = HeritageUser(user_id=2, full_name="Asha Traveller")
    artisan_user = HeritageUser(user_id=3, full_name="Potter")
    db.add_all([owner, tourist, artisan_user])
    db.add(Hotel(hotel_id=10, owner_user_id=1, hotel_name="Lake Palace"))
    db.add(Tour(tour_id=20, operator_user_id=1, tour_name="Old City Walk"))
    db.add(Food(food_id=30, owner_user_id=1, food_name="Thali House"))
    db.add(Artisan(artisan_id=40, user_id=3, artisan_name="Blue Pottery"))
    db.add(Artwork(artwork_id=41, artisan_id=40, artwork_name="Vase"))
    db.add_all([
        HotelBooking(booking_id=1, hotel_id=10, user_id=2, booking_reference="HTL-9001", booking_status="confirmed",
                     payment_status="paid", total_amount=5000, currency="INR", guest_full_name="Asha Traveller",
                     guest_email="asha@example.com", guest_phone="+91 99999", created_at=datetime(2026, 3, 5, 10, 0)),
        HotelBooking(booking_id=2, hotel_id=10, user_id=None, created_at=datetime(2026, 3, 1, 9, 0)),
        TourBooking(booking_id=3, tour_id=20, created_by=2, booking_code="TOUR-77", status="completed",
                    payment_status="pending", total_amount=1200, currency="INR", contact_full_name="Asha Traveller",
                    contact_email="asha@example.com", created_at=datetime(2026, 3, 6, 8, 0)),
        EventBooking(booking_id=4, user_id=2, booking_status="cancelled", attendee_name="Ravi", attendee_email="ravi@example.com",
                     total_amount=300, currency="USD", created_at=datetime(2026, 3, 2, 12, 0)),
        FoodBooking(booking_id=5, restaurant_id=30, user_id=2, booking_status="pending", customer_name="Asha Traveller",
                    customer_email="asha@example.com", total_amount=800, created_at=datetime(2026, 3, 4, 12, 0)),
        GuideBooking(booking_id=6, guide_user_id=1, tourist_user_id=2, booking_status="confirmed", payment_status="paid",
                     total_amount=1500, customer_name="Asha Traveller", created_at=datetime(2026, 3, 3, 7, 0)),
        ProductOrder(booking_id=7, artwork_id=41, buyer_user_id=2, order_reference="PRD-ABC", order_status="confirmed",
                     payment_status="paid", total_amount=2500.5, currency="INR", buyer_name="Asha Traveller",
                     created_at=datetime(2026, 3, 7, 15, 0)),
    ])
    db.commit()

def test_list_all_modules_newest_first(db):
    _seed(db)
    result = bookings.list_bookings(db)
    assert [(b.module_type, b.id) for b in result] == [
        ("product", 7), ("tour", 3), ("hotel", 1), ("food", 5), ("guide", 6), ("event", 4), ("hotel", 2),
    ]

def test_mapping_defaults(db):
    _seed(db)
    b = bookings.get_booking_details(db, 2, "hotel")
    assert b.booking_reference == "HTL-2"
    assert b.status == "pending"
    assert b.payment_status == "pending"
    assert b.total_amount == 0
    assert b.currency == "INR"
    assert b.raw["hotel_id"] == 10

def test_module_specific_columns(db):
    _seed(db)
    tour = bookings.get_booking_details(db, 3, "tour")
    assert tour.booking_reference == "TOUR-77"
    assert tour.status == "completed"
    assert tour.customer_name == "Asha Traveller"
    event = bookings.get_booking_details(db, 4, "event")
    assert event.booking_reference == "EVT-4"
    assert event.customer_phone is None
    food = bookings.get_booking_details(db, 5, "food")
    assert food.payment_status == "pending"

def test_unknown_module_and_missing_row(db):
    _seed(db)
    assert bookings.get_booking_details(db, 1, "spa") is None
    assert bookings.get_booking_details(db, 999, "hotel") is None
    assert bookings.list_bookings(db, BookingFilters(module_type="spa")) == []

def test_filters(db):
    _seed(db)
    hotel_only = bookings.list_bookings(db, BookingFilters(module_type="hotel"))
    assert {b.id for b in hotel_only} == {1, 2}

    confirmed = bookings.list_bookings(db, BookingFilters(status="confirmed"))
    assert {(b.module_type, b.id) for b in confirmed} == {("hotel", 1), ("guide", 6), ("product", 7)}

    by_email = bookings.list_bookings(db, BookingFilters(search="ASHA@example"))
    assert {b.module_type for b in by_email} == {"hotel", "tour", "food"}

    by_ref = bookings.list_bookings(db, BookingFilters(search="9001"))
    assert [b.id for b in by_ref] == [1]

def test_food_has_no_payment_filter(db):
    _seed(db)
    paid = bookings.list_bookings(db, BookingFilters(payment_status="paid"))
    assert ("food", 5) in {(b.module_type, b.id) for b in paid}
    assert ("tour", 3) not in {(b.module_type, b.id) for b in paid}

def test_local_day_bounds_use_configured_timezone():
    start, end = bookings.local_day_bounds(date(2026, 3, 5), date(2026, 3, 5))
    assert start == datetime(2026, 3, 4, 18, 30)
    assert end == datetime(2026, 3, 5, 18, 30)

def test_date_range_filter(db):
    _seed(db)
    result = bookings.list_bookings(db, BookingFilters(date_from=date(2026, 3, 5), date_to=date(2026, 3, 6)))
    assert {(b.module_type, b.id) for b in result} == {("hotel", 1), ("tour", 3)}

def test_update_status_stamps_updated_at(db):
    _seed(db)
    result = bookings.update_booking_status(db, 3, "tour", "cancelled")
    assert result.success
    row = db.query(TourBooking).get(3)
    assert row.status == "cancelled"
    assert row.updated_at is not None

def test_update_errors(db):
    _seed(db)
    assert bookings.update_booking_status(db, 1, "spa", "x").error == "Invalid module type"
    assert bookings.update_payment_status(db, 1, "spa", "x").error == "Invalid module type"
    assert bookings.update_booking_status(db, 404, "hotel", "x").error == "Booking not found"
    food = bookings.update_payment_status(db, 5, "food", "paid")
    assert not food.success
    assert food.error == "Payment status updates are not supported for food bookings"

def test_update_payment_status(db):
    _seed(db)
    assert bookings.update_payment_status(db, 2, "hotel", "refunded").success
    assert db.query(HotelBooking).get(2).payment_status == "refunded"

def test_customer_perspective_resolves_owner(db):
    _seed(db)
    result = bookings.get_user_bookings(db, 2, "customer")
    assert {b.perspective for b in result} == {"customer"}
    counterparties = {(b.module_type, b.counterparty_user_id) for b in result}
    assert ("hotel", 1) in counterparties
    assert ("tour", 1) in counterparties
    assert ("product", 3) in counterparties
    assert ("guide", 1) in counterparties

def test_owner_perspective(db):
    _seed(db)
    result = bookings.get_user_bookings(db, 1, "owner")
    assert {(b.module_type, b.id) for b in result} == {("hotel", 1), ("hotel", 2), ("tour", 3), ("food", 5), ("guide", 6)}
    hotel = next(b for b in result if b.id == 1 and b.module_type == "hotel")
    assert hotel.counterparty_user_id == 2

def test_auto_perspective_merges_sides(db):
    _seed(db)
    artisan = bookings.get_user_bookings(db, 3, "auto")
    assert [(b.module_type, b.perspective) for b in artisan] == [("product", "owner")]

def test_unknown_perspective(db):
    with pytest.raises(bookings.BookingError):
        bookings.get_user_bookings(db, 1, "supplier")

def test_summary(db):
    _seed(db)
    summary = bookings.summarize_bookings(bookings.list_bookings(db))
    assert summary.total == 7
    assert summary.by_module["hotel"] == 2
    assert summary.by_status["confirmed"] == 3
    # confirmed/completed/paid only; the cancelled USD booking is excluded
    assert summary.revenue == {"INR": 10200.5}
