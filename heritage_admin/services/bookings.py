# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import logging
from dataclasses import dataclass
from datetime import datetime, date, time, timedelta, timezone
from typing import Callable

import pytz
from sqlalchemy import inspect as sa_inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..logging_setup import log_event
from ..models import (
    HotelBooking, TourBooking, EventBooking, FoodBooking, GuideBooking, ProductOrder,
    Hotel, Tour, Event, Food, Artwork, Artisan,
)
from ..schemas import Booking, BookingFilters, BookingSummary, OperationResult

logger = logging.getLogger(__name__)

class BookingError(Exception):
    pass

@dataclass(frozen=True)
class BookingModule:
    key: str
    model: type
    status_column: str
    reference_column: str
    prefix: str
    name_column: str
    email_column: str
    phone_column: str | None
    customer_column: str
    listing_column: str | None
    payment_column: str | None
    # SQL condition selecting the bookings made on listings owned by a user
    owner_filter: Callable[[int], object]
    # (listing model, listing key column, owner column) used to resolve a listing's owner
    owner_lookup: tuple | None = None

def _artwork_owner_ids(user_id: int):
    return select(Artwork.artwork_id).join(Artisan, Artisan.artisan_id == Artwork.artisan_id).where(Artisan.user_id == user_id)

MODULES: dict[str, BookingModule] = {
    "hotel": BookingModule(
        key="hotel", model=HotelBooking, status_column="booking_status",
        reference_column="booking_reference", prefix="HTL-",
        name_column="guest_full_name", email_column="guest_email", phone_column="guest_phone",
        customer_column="user_id", listing_column="hotel_id", payment_column="payment_status",
        owner_filter=lambda uid: HotelBooking.hotel_id.in_(select(Hotel.hotel_id).where(Hotel.owner_user_id == uid)),
        owner_lookup=(Hotel, "hotel_id", "owner_user_id"),
    ),
    "tour": BookingModule(
        key="tour", model=TourBooking, status_column="status",
        reference_column="booking_code", prefix="TOUR-",
        name_column="contact_full_name", email_column="contact_email", phone_column="contact_phone",
        customer_column="created_by", listing_column="tour_id", payment_column="payment_status",
        owner_filter=lambda uid: TourBooking.tour_id.in_(select(Tour.tour_id).where(Tour.operator_user_id == uid)),
        owner_lookup=(Tour, "tour_id", "operator_user_id"),
    ),
    "event": BookingModule(
        key="event", model=EventBooking, status_column="booking_status",
        reference_column="booking_reference", prefix="EVT-",
        name_column="attendee_name", email_column="attendee_email", phone_column=None,
        customer_column="user_id", listing_column="event_id", payment_column="payment_status",
        owner_filter=lambda uid: EventBooking.event_id.in_(select(Event.event_id).where(Event.organizer_user_id == uid)),
        owner_lookup=(Event, "event_id", "organizer_user_id"),
    ),
    "food": BookingModule(
        key="food", model=FoodBooking, status_column="booking_status",
        reference_column="booking_reference", prefix="FOOD-",
        name_column="customer_name", email_column="customer_email", phone_column="customer_phone",
        customer_column="user_id", listing_column="restaurant_id", payment_column=None,
        owner_filter=lambda uid: FoodBooking.restaurant_id.in_(select(Food.food_id).where(Food.owner_user_id == uid)),
        owner_lookup=(Food, "food_id", "owner_user_id"),
    ),
    "guide": BookingModule(
        key="guide", model=GuideBooking, status_column="booking_status",
        reference_column="booking_reference", prefix="GUIDE-",
        name_column="customer_name", email_column="customer_email", phone_column="customer_phone",
        customer_column="tourist_user_id", listing_column="guide_user_id", payment_column="payment_status",
        owner_filter=lambda uid: GuideBooking.guide_user_id == uid,
    ),
    "product": BookingModule(
        key="product", model=ProductOrder, status_column="order_status",
        reference_column="order_reference", prefix="PRD-",
        name_column="buyer_name", email_column="buyer_email", phone_column="buyer_phone",
        customer_column="buyer_user_id", listing_column="artwork_id", payment_column="payment_status",
        owner_filter=lambda uid: ProductOrder.artwork_id.in_(_artwork_owner_ids(uid)),
    ),
}

MODULE_TYPES = list(MODULES.keys())

CONFIRMED_STATUSES = {"confirmed", "completed"}

def get_module(module_type: str | None) -> BookingModule | None:
    return MODULES.get((module_type or "").strip().lower())

def local_day_bounds(day_from: date | None, day_to: date | None) -> tuple[datetime | None, datetime | None]:
    """
    Turns an inclusive local-date range into naive UTC [start, end) bounds.
    """
    tz = pytz.timezone(settings.timezone)
    start = end = None
    if day_from:
        start = tz.localize(datetime.combine(day_from, time.min)).astimezone(pytz.utc).replace(tzinfo=None)
    if day_to:
        end = tz.localize(datetime.combine(day_to + timedelta(days=1), time.min)).astimezone(pytz.utc).replace(tzinfo=None)
    return start, end

def _row_to_dict(row) -> dict:
    return {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}

def map_booking(module: BookingModule, row) -> Booking:
    raw = _row_to_dict(row)
    payment = raw.get(module.payment_column) if module.payment_column else None
    amount = raw.get("total_amount")
    return Booking(
        id=row.booking_id,
        module_type=module.key,
        booking_reference=raw.get(module.reference_column) or f"{module.prefix}{row.booking_id}",
        status=raw.get(module.status_column) or "pending",
        payment_status=payment or "pending",
        total_amount=float(amount) if amount is not None else 0,
        currency=raw.get("currency") or settings.default_currency,
        customer_name=raw.get(module.name_column),
        customer_email=raw.get(module.email_column),
        customer_phone=raw.get(module.phone_column) if module.phone_column else None,
        user_id=raw.get(module.customer_column),
        listing_id=raw.get(module.listing_column) if module.listing_column else None,
        created_at=raw.get("created_at"),
        updated_at=raw.get("updated_at"),
        raw=raw,
    )

def _sort_key(b: Booking):
    ts = b.created_at
    if ts is None:
        return datetime.min
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts

def _filtered_query(db: Session, module: BookingModule, filters: BookingFilters):
    model = module.model
    q = db.query(model)
    if filters.status:
        q = q.filter(getattr(model, module.status_column) == filters.status)
    if filters.payment_status and module.payment_column:
        q = q.filter(getattr(model, module.payment_column) == filters.payment_status)

    start, end = local_day_bounds(filters.date_from, filters.date_to)
    if start:
        q = q.filter(model.created_at >= start)
    if end:
        q = q.filter(model.created_at < end)

    if filters.search and filters.search.strip():
        pattern = f"%{filters.search.strip()}%"
        columns = [module.reference_column, module.name_column, module.email_column, module.phone_column]
        q = q.filter(or_(*[getattr(model, c).ilike(pattern) for c in columns if c]))

    return q.order_by(model.created_at.desc())

def list_bookings(db: Session, filters: BookingFilters | None = None) -> list[Booking]:
    filters = filters or BookingFilters()
    if filters.module_type:
        module = get_module(filters.module_type)
        if not module:
            logger.warning(f"Unknown booking module: {filters.module_type}")
            return []
        modules = [module]
    else:
        modules = list(MODULES.values())

    bookings = []
    try:
        for module in modules:
            rows = _filtered_query(db, module, filters).all()
            bookings.extend(map_booking(module, row) for row in rows)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list bookings: {e}")
        return []

    bookings.sort(key=_sort_key, reverse=True)
    return bookings

def get_booking_details(db: Session, booking_id: int, module_type: str) -> Booking | None:
    module = get_module(module_type)
    if not module:
        return None
    try:
        row = db.query(module.model).filter(module.model.booking_id == booking_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load {module_type} booking {booking_id}: {e}")
        return None
    return map_booking(module, row) if row else None

def _update_column(db: Session, booking_id: int, module: BookingModule, column: str, value: str, event: str) -> OperationResult:
    try:
        row = db.query(module.model).filter(module.model.booking_id == booking_id).first()
        if not row:
            return OperationResult(success=False, error="Booking not found")
        setattr(row, column, value)
        row.updated_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update {module.key} booking {booking_id}: {e}")
        return OperationResult(success=False, error=str(e))

    log_event(event, booking_id=booking_id, module_type=module.key, value=value)
    return OperationResult(success=True)

def update_booking_status(db: Session, booking_id: int, module_type: str, status: str) -> OperationResult:
    module = get_module(module_type)
    if not module:
        return OperationResult(success=False, error="Invalid module type")
    return _update_column(db, booking_id, module, module.status_column, status, "booking_status_updated")

def update_payment_status(db: Session, booking_id: int, module_type: str, payment_status: str) -> OperationResult:
    module = get_module(module_type)
    if not module:
        return OperationResult(success=False, error="Invalid module type")
    if not module.payment_column:
        return OperationResult(success=False, error=f"Payment status updates are not supported for {module.key} bookings")
    return _update_column(db, booking_id, module, module.payment_column, payment_status, "booking_payment_updated")

def _listing_owner(db: Session, module: BookingModule, listing_id: int | None, cache: dict) -> int | None:
    if listing_id is None:
        return None
    key = (module.key, listing_id)
    if key in cache:
        return cache[key]

    owner = None
    if module.key == "guide":
        owner = listing_id
    elif module.key == "product":
        owner = db.query(Artisan.user_id).join(Artwork, Artwork.artisan_id == Artisan.artisan_id).filter(Artwork.artwork_id == listing_id).scalar()
    elif module.owner_lookup:
        listing_model, key_column, owner_column = module.owner_lookup
        owner = db.query(getattr(listing_model, owner_column)).filter(getattr(listing_model, key_column) == listing_id).scalar()
    cache[key] = owner
    return owner

def get_user_bookings(db: Session, user_id: int, perspective: str = "customer") -> list[Booking]:
    """
    Bookings seen from one user's side.

    customer: bookings the user made, counterparty is the listing owner.
    owner: bookings made on the user's listings, counterparty is the customer.
    auto: both, customer side first; a booking on one's own listing appears once.
    """
    if perspective not in ("customer", "owner", "auto"):
        raise BookingError(f"Unknown perspective: {perspective}")

    sides = ["customer", "owner"] if perspective == "auto" else [perspective]
    seen = set()
    owners_cache = {}
    results = []
    try:
        for module in MODULES.values():
            model = module.model
            for side in sides:
                if side == "customer":
                    condition = getattr(model, module.customer_column) == user_id
                else:
                    condition = module.owner_filter(user_id)
                rows = db.query(model).filter(condition).order_by(model.created_at.desc()).all()
                for row in rows:
                    if (module.key, row.booking_id) in seen:
                        continue
                    seen.add((module.key, row.booking_id))
                    booking = map_booking(module, row)
                    booking.perspective = side
                    if side == "customer":
                        booking.counterparty_user_id = _listing_owner(db, module, booking.listing_id, owners_cache)
                    else:
                        booking.counterparty_user_id = booking.user_id
                    results.append(booking)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load bookings for user {user_id}: {e}")
        return []

    results.sort(key=_sort_key, reverse=True)
    return results

def summarize_bookings(bookings: list[Booking]) -> BookingSummary:
    by_module = {key: 0 for key in MODULE_TYPES}
    by_status = {}
    revenue = {}
    for b in bookings:
        by_module[b.module_type] = by_module.get(b.module_type, 0) + 1
        by_status[b.status] = by_status.get(b.status, 0) + 1
        if b.status in CONFIRMED_STATUSES or b.payment_status == "paid":
            revenue[b.currency] = round(revenue.get(b.currency, 0) + b.total_amount, 2)
    return BookingSummary(total=len(bookings), by_module=by_module, by_status=by_status, revenue=revenue)
