# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Float, JSON, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# --- Admin console accounts ---

class AdminUser(Base):
    __tablename__ = "admin_users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="moderator") # superadmin, admin, moderator
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

# --- Platform users ---

class UserType(Base):
    __tablename__ = "heritage_usertype"
    user_type_id = Column(Integer, primary_key=True)
    type_key = Column(String, nullable=False, unique=True)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    translations = relationship("UserTypeTranslation", back_populates="user_type", cascade="all, delete-orphan")

class UserTypeTranslation(Base):
    __tablename__ = "heritage_usertypetranslation"
    translation_id = Column(Integer, primary_key=True)
    user_type_id = Column(Integer, ForeignKey("heritage_usertype.user_type_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    type_name = Column(String, nullable=False)

    user_type = relationship("UserType", back_populates="translations")

class HeritageUser(Base):
    __tablename__ = "heritage_user"
    user_id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=True)
    email = Column(String, index=True, nullable=True)
    phone = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)
    user_type_id = Column(Integer, ForeignKey("heritage_usertype.user_type_id"), nullable=True, index=True)
    is_verified = Column(Boolean, default=False)
    user_type_verified = Column(Boolean, nullable=True) # vendor approval
    language_code = Column(String(8), default="EN")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user_type = relationship("UserType")
    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")

class UserProfile(Base):
    __tablename__ = "heritage_user_profile"
    profile_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=False, unique=True)
    avatar_url = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    is_facebook_connected = Column(Boolean, default=False)
    is_instagram_connected = Column(Boolean, default=False)
    is_twitter_connected = Column(Boolean, default=False)

    user = relationship("HeritageUser", back_populates="profile")

class Notification(Base):
    __tablename__ = "heritage_notification"
    notification_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    entity_type = Column(String, nullable=True)
    entity_id = Column(Integer, nullable=True)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

# --- Heritage sites ---

class HeritageSite(Base):
    __tablename__ = "heritage_site"
    site_id = Column(Integer, primary_key=True, index=True)
    name_default = Column(String, nullable=False)
    short_desc_default = Column(Text, nullable=True)
    full_desc_default = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    vr_link = Column(Text, nullable=True)
    qr_link = Column(Text, nullable=True)
    meta_title_def = Column(String, nullable=True)
    meta_description_def = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    site_type = Column(String, nullable=True)
    entry_fee = Column(Float, nullable=True)
    entry_type = Column(String, nullable=True) # free, paid
    experience = Column(JSON, nullable=True) # legacy string or list
    accessibility = Column(JSON, nullable=True)
    location_address = Column(Text, nullable=True)
    location_area = Column(String, nullable=True)
    location_city = Column(String, nullable=True)
    location_state = Column(String, nullable=True)
    location_country = Column(String, nullable=True)
    location_postal_code = Column(String, nullable=True)
    hero_image_url = Column(Text, nullable=True)
    video_360_url = Column(Text, nullable=True)
    ar_mode_available = Column(Boolean, nullable=True)
    opening_hours = Column(JSON, nullable=True)
    amenities = Column(JSON, nullable=True)
    booking_url = Column(Text, nullable=True)
    booking_online_available = Column(Boolean, nullable=True)
    site_map_url = Column(Text, nullable=True)
    cultural_etiquettes = Column(JSON, nullable=True)
    transport_options = Column(JSON, nullable=True)
    nearby_attractions = Column(JSON, nullable=True)
    photography_allowed = Column(String, nullable=True) # free, paid, restricted
    photograph_amount = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    translations = relationship("HeritageSiteTranslation", cascade="all, delete-orphan")
    media = relationship("SiteMedia", cascade="all, delete-orphan", order_by="SiteMedia.position")
    visiting_hours = relationship("SiteVisitingHours", cascade="all, delete-orphan")
    ticket_types = relationship("SiteTicketType", cascade="all, delete-orphan")

class HeritageSiteTranslation(Base):
    __tablename__ = "heritage_sitetranslation"
    translation_id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("heritage_site.site_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    name = Column(String, nullable=True)
    short_desc = Column(Text, nullable=True)
    full_desc = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("site_id", "language_code", name="uq_site_lang"),)

class SiteMedia(Base):
    __tablename__ = "heritage_sitemedia"
    media_id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("heritage_site.site_id"), nullable=False, index=True)
    media_type = Column(String, nullable=False, default="image") # image, audio, video, document
    storage_url = Column(Text, nullable=False)
    position = Column(Integer, default=0)
    is_primary = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class SiteVisitingHours(Base):
    __tablename__ = "heritage_sitevisitinghours"
    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("heritage_site.site_id"), nullable=False, index=True)
    day_of_week = Column(String, nullable=False)
    is_open = Column(Boolean, default=True)
    opening_time = Column(String, nullable=True)
    closing_time = Column(String, nullable=True)

class SiteTicketType(Base):
    __tablename__ = "heritage_siteticket"
    id = Column(Integer, primary_key=True)
    site_id = Column(Integer, ForeignKey("heritage_site.site_id"), nullable=False, index=True)
    visitor_type = Column(String, nullable=False)
    amount = Column(Float, default=0)
    currency = Column(String(8), default="INR")

# --- Hotels ---

class Hotel(Base):
    __tablename__ = "heritage_hotel"
    hotel_id = Column(Integer, primary_key=True, index=True)
    owner_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    hotel_name = Column(String, nullable=True)
    subtitle = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    address_line1 = Column(String, nullable=True)
    address_line2 = Column(String, nullable=True)
    area_or_zone = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    checkin_time = Column(String, nullable=True)
    checkout_time = Column(String, nullable=True)
    base_price_from = Column(Float, nullable=True)
    currency = Column(String(8), default="INR")
    priority_level = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    status = Column(String, default="draft") # draft, pending, published
    property_rules = Column(Text, nullable=True)
    quick_rules = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class HotelTranslation(Base):
    __tablename__ = "heritage_hoteltranslation"
    translation_id = Column(Integer, primary_key=True)
    hotel_id = Column(Integer, ForeignKey("heritage_hotel.hotel_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    hotel_name = Column(String, nullable=True)
    subtitle = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    address_line1 = Column(String, nullable=True)
    address_line2 = Column(String, nullable=True)
    area_or_zone = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("hotel_id", "language_code", name="uq_hotel_lang"),)

class HotelMedia(Base):
    __tablename__ = "heritage_hotelmedia"
    media_id = Column(Integer, primary_key=True)
    hotel_id = Column(Integer, ForeignKey("heritage_hotel.hotel_id"), nullable=False, index=True)
    media_type = Column(String, nullable=False, default="gallery") # hero, gallery
    media_url = Column(Text, nullable=False)
    alt_text = Column(String, nullable=True)
    position = Column(Integer, default=0)
    is_primary = Column(Boolean, default=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

class RoomType(Base):
    __tablename__ = "heritage_roomtype"
    room_type_id = Column(Integer, primary_key=True)
    hotel_id = Column(Integer, ForeignKey("heritage_hotel.hotel_id"), nullable=False, index=True)
    room_category = Column(String, default="room") # room, suite, dorm
    room_name = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    base_price = Column(Float, nullable=True)
    currency = Column(String(8), default="INR")
    max_guests = Column(Integer, nullable=True)
    area_sqft = Column(Float, nullable=True)
    is_featured = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    tax_percentage = Column(Float, nullable=True)
    available_rooms = Column(Integer, default=0)
    allow_extra_beds = Column(Boolean, default=False)
    max_extra_beds = Column(Integer, default=0)
    extra_bed_price = Column(Float, default=0)

class RoomTypeTranslation(Base):
    __tablename__ = "heritage_roomtypetranslation"
    translation_id = Column(Integer, primary_key=True)
    room_type_id = Column(Integer, ForeignKey("heritage_roomtype.room_type_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    room_name = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("room_type_id", "language_code", name="uq_room_lang"),)

# --- Food vendors ---

class Food(Base):
    __tablename__ = "heritage_food"
    food_id = Column(Integer, primary_key=True, index=True)
    owner_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    food_name = Column(String, nullable=True)
    subtitle = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    address_line1 = Column(String, nullable=True)
    area_or_zone = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)
    status = Column(String, default="pending") # pending, published
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class FoodTranslation(Base):
    __tablename__ = "heritage_foodtranslation"
    translation_id = Column(Integer, primary_key=True)
    food_id = Column(Integer, ForeignKey("heritage_food.food_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    food_name = Column(String, nullable=True)
    subtitle = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    address_line1 = Column(String, nullable=True)
    area_or_zone = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("food_id", "language_code", name="uq_food_lang"),)

class FoodMedia(Base):
    __tablename__ = "heritage_foodmedia"
    media_id = Column(Integer, primary_key=True)
    food_id = Column(Integer, ForeignKey("heritage_food.food_id"), nullable=False, index=True)
    media_type = Column(String, nullable=False, default="gallery") # hero, gallery, menu
    media_url = Column(Text, nullable=False)
    alt_text = Column(String, nullable=True)
    position = Column(Integer, default=0)
    is_primary = Column(Boolean, default=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

class FoodHours(Base):
    __tablename__ = "heritage_foodhours"
    id = Column(Integer, primary_key=True)
    food_id = Column(Integer, ForeignKey("heritage_food.food_id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False) # 1 = Monday ... 7 = Sunday
    open_time = Column(String, nullable=True)
    close_time = Column(String, nullable=True)
    is_closed = Column(Boolean, default=False)

    __table_args__ = (UniqueConstraint("food_id", "day_of_week", name="uq_food_day"),)

# --- Artisans & artworks ---

class Artisan(Base):
    __tablename__ = "heritage_artisan"
    artisan_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    artisan_name = Column(String, nullable=True)
    short_bio = Column(Text, nullable=True)
    craft_type = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

class Artwork(Base):
    __tablename__ = "heritage_artwork"
    artwork_id = Column(Integer, primary_key=True, index=True)
    artisan_id = Column(Integer, ForeignKey("heritage_artisan.artisan_id"), nullable=True, index=True)
    artwork_name = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    price = Column(Float, nullable=True)
    currency = Column(String(8), default="INR")
    category = Column(String, nullable=True)
    tax_percentage = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class ArtworkTranslation(Base):
    __tablename__ = "heritage_artworktranslation"
    translation_id = Column(Integer, primary_key=True)
    artwork_id = Column(Integer, ForeignKey("heritage_artwork.artwork_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    artwork_name = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("artwork_id", "language_code", name="uq_artwork_lang"),)

class ArtworkMedia(Base):
    __tablename__ = "heritage_artworkmedia"
    media_id = Column(Integer, primary_key=True)
    artwork_id = Column(Integer, ForeignKey("heritage_artwork.artwork_id"), nullable=False, index=True)
    media_type = Column(String, nullable=False, default="image")
    media_url = Column(Text, nullable=False)
    alt_text = Column(String, nullable=True)
    position = Column(Integer, default=0)
    is_primary = Column(Boolean, default=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

# --- Events, tours, guides ---

class Event(Base):
    __tablename__ = "heritage_event"
    event_id = Column(Integer, primary_key=True, index=True)
    organizer_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    site_id = Column(Integer, ForeignKey("heritage_site.site_id"), nullable=True)
    title = Column(String, nullable=False)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    venue_name = Column(String, nullable=True)
    venue_address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    capacity = Column(Integer, nullable=True)
    is_paid = Column(Boolean, default=False)
    amenities = Column(JSON, nullable=True)
    cover_image_url = Column(Text, nullable=True)
    status = Column(String, default="draft") # draft, submitted, published
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    time_slots = relationship("EventTimeSlot", cascade="all, delete-orphan", order_by="EventTimeSlot.position")
    tickets = relationship("EventTicketType", cascade="all, delete-orphan", order_by="EventTicketType.position")

class EventTranslation(Base):
    __tablename__ = "heritage_eventtranslation"
    translation_id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("heritage_event.event_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    title = Column(String, nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("event_id", "language_code", name="uq_event_lang"),)

class EventTimeSlot(Base):
    __tablename__ = "heritage_eventtimeslot"
    slot_id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("heritage_event.event_id"), nullable=False, index=True)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    position = Column(Integer, default=0)

class EventTicketType(Base):
    __tablename__ = "heritage_eventticket"
    ticket_id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("heritage_event.event_id"), nullable=False, index=True)
    ticket_type = Column(String, nullable=False)
    amount = Column(Float, default=0)
    currency = Column(String(8), default="INR")
    description = Column(Text, nullable=True)
    position = Column(Integer, default=0)

class Tour(Base):
    __tablename__ = "heritage_tour"
    tour_id = Column(Integer, primary_key=True, index=True)
    operator_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    tour_name = Column(String, nullable=True)
    status = Column(String, default="draft")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class GuideProfile(Base):
    __tablename__ = "heritage_guide_profile"
    guide_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    guide_name = Column(String, nullable=False)
    address = Column(Text, nullable=True)
    area = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    languages = Column(JSON, nullable=True)
    specializations = Column(JSON, nullable=True)
    experience_years = Column(Integer, default=0)
    coverage_area = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    show_contact = Column(Boolean, default=True)
    hourly_rate = Column(Float, default=0)
    half_day_rate = Column(Float, default=0)
    full_day_rate = Column(Float, default=0)
    available_days = Column(JSON, nullable=True)
    weekday_start = Column(String, nullable=True)
    weekday_end = Column(String, nullable=True)
    weekend_start = Column(String, nullable=True)
    weekend_end = Column(String, nullable=True)
    profile_photo_url = Column(Text, nullable=True)
    status = Column(String, default="draft") # draft, submitted
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    documents = relationship("GuideDocument", cascade="all, delete-orphan")

class GuideProfileTranslation(Base):
    __tablename__ = "heritage_guide_profiletranslation"
    translation_id = Column(Integer, primary_key=True)
    guide_id = Column(Integer, ForeignKey("heritage_guide_profile.guide_id"), nullable=False, index=True)
    language_code = Column(String(8), nullable=False)
    bio = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("guide_id", "language_code", name="uq_guide_lang"),)

class GuideDocument(Base):
    __tablename__ = "heritage_guide_document"
    document_id = Column(Integer, primary_key=True)
    guide_id = Column(Integer, ForeignKey("heritage_guide_profile.guide_id"), nullable=False, index=True)
    document_url = Column(Text, nullable=False)
    file_name = Column(String, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

# --- Bookings (one table per module) ---

class HotelBooking(Base):
    __tablename__ = "heritage_hotelbooking"
    booking_id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String, nullable=True, index=True)
    hotel_id = Column(Integer, ForeignKey("heritage_hotel.hotel_id"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    room_type_id = Column(Integer, ForeignKey("heritage_roomtype.room_type_id"), nullable=True)
    booking_status = Column(String, nullable=True)
    payment_status = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    guest_full_name = Column(String, nullable=True)
    guest_email = Column(String, nullable=True)
    guest_phone = Column(String, nullable=True)
    check_in_date = Column(Date, nullable=True)
    check_out_date = Column(Date, nullable=True)
    num_guests = Column(Integer, nullable=True)
    num_rooms = Column(Integer, nullable=True)
    special_requests = Column(Text, nullable=True)
    payment_method = Column(String, nullable=True)
    payment_reference = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class TourBooking(Base):
    __tablename__ = "heritage_tour_booking"
    booking_id = Column(Integer, primary_key=True, index=True)
    booking_code = Column(String, nullable=True, index=True)
    tour_id = Column(Integer, ForeignKey("heritage_tour.tour_id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    status = Column(String, nullable=True)
    payment_status = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    contact_full_name = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    selected_date = Column(Date, nullable=True)
    num_travelers = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class EventBooking(Base):
    __tablename__ = "heritage_eventbooking"
    booking_id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String, nullable=True, index=True)
    event_id = Column(Integer, ForeignKey("heritage_event.event_id"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    booking_status = Column(String, nullable=True)
    payment_status = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    attendee_name = Column(String, nullable=True)
    attendee_email = Column(String, nullable=True)
    event_date = Column(Date, nullable=True)
    num_tickets = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class FoodBooking(Base):
    # no payment columns: food orders are settled at the venue
    __tablename__ = "heritage_fv_foodbooking"
    booking_id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String, nullable=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("heritage_food.food_id"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    booking_status = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    booking_date = Column(Date, nullable=True)
    num_guests = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class GuideBooking(Base):
    __tablename__ = "heritage_guide_booking"
    booking_id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String, nullable=True, index=True)
    guide_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    tourist_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    booking_status = Column(String, nullable=True)
    payment_status = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    service_date = Column(Date, nullable=True)
    service_duration = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class ProductOrder(Base):
    __tablename__ = "heritage_product_order"
    booking_id = Column(Integer, primary_key=True, index=True)
    order_reference = Column(String, nullable=True, index=True)
    artwork_id = Column(Integer, ForeignKey("heritage_artwork.artwork_id"), nullable=True, index=True)
    buyer_user_id = Column(Integer, ForeignKey("heritage_user.user_id"), nullable=True, index=True)
    order_status = Column(String, nullable=True)
    payment_status = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    buyer_name = Column(String, nullable=True)
    buyer_email = Column(String, nullable=True)
    buyer_phone = Column(String, nullable=True)
    quantity = Column(Integer, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
