from pydantic import BaseModel, Field, validator
from datetime import datetime, date, time
from typing import Any

# Wall-clock inputs arrive either as 24h "9:00" / "09:00" or as "09:00 AM"
CLOCK_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M%p", "%I:%M:%S %p")

def parse_clock_time(value: str) -> time:
    text = " ".join(str(value).strip().upper().split())
    for fmt in CLOCK_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised time of day: {value!r}")

def drop_all_choice(value):
    """Filter dropdowns send "All" (or "all") for no filter."""
    if isinstance(value, str) and value.strip().lower() in ("", "all"):
        return None
    return value

def normalize_clock(value):
    """Stores every time of day as zero-padded 24h HH:MM."""
    if value is None or isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return parse_clock_time(value).strftime("%H:%M")

class OperationResult(BaseModel):
    success: bool
    error: str | None = None

# --- Auth ---

class AdminCreate(BaseModel):
    name: str
    email: str
    password: str
    role: str = "moderator"

class AdminOut(BaseModel):
    id: int
    email: str
    name: str | None = None
    role: str
    is_active: bool
    created_at: datetime | None = None
    class Config:
        from_attributes = True

# --- Translation ---

class TranslateIn(BaseModel):
    text: str | list[str]
    target: str | list[str]
    source: str | None = None

class TranslationResult(BaseModel):
    success: bool
    translations: dict[str, list[str]] = Field(default_factory=dict)
    error: str | None = None

class FieldEditIn(BaseModel):
    field: str
    text: str
    source: str = "en"

class DraftSeedIn(BaseModel):
    fields: list[str]
    values: dict[str, dict[str, str]] = Field(default_factory=dict)

# --- Bookings ---

class BookingFilters(BaseModel):
    module_type: str | None = None
    status: str | None = None
    payment_status: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None

    @validator("module_type", "status", "payment_status", pre=True)
    def no_all(cls, v):
        return drop_all_choice(v)

class Booking(BaseModel):
    id: int
    module_type: str
    booking_reference: str
    status: str
    payment_status: str
    total_amount: float
    currency: str
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    user_id: int | None = None
    listing_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    perspective: str | None = None
    counterparty_user_id: int | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

class BookingStatusIn(BaseModel):
    module_type: str
    status: str

class BookingSummary(BaseModel):
    total: int
    by_module: dict[str, int]
    by_status: dict[str, int]
    revenue: dict[str, float]

# --- Users ---

class UserFilters(BaseModel):
    user_type_id: int | None = None
    is_verified: bool | None = None
    is_active: bool | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None

class UserTypeOut(BaseModel):
    user_type_id: int
    type_key: str
    type_name: str
    display_order: int | None = None

class UserOut(BaseModel):
    user_id: int
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    user_type_id: int | None = None
    user_type_name: str | None = None
    is_verified: bool = False
    user_type_verified: bool | None = None
    is_active: bool = True
    language_code: str | None = None
    created_at: datetime | None = None
    avatar_url: str | None = None
    tags: list[str] | None = None
    is_facebook_connected: bool = False
    is_instagram_connected: bool = False
    is_twitter_connected: bool = False

class UserUpdate(BaseModel):
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    user_type_id: int | None = None
    is_active: bool | None = None
    language_code: str | None = None
    tags: list[str] | None = None
    avatar_url: str | None = None

# --- Verification ---

class VerificationRecord(BaseModel):
    id: int
    entity_type: str
    name: str
    subtitle: str | None = None
    location: str
    submitted_on: str | None = None
    status: str
    user_id: int | None = None

class VerificationFilters(BaseModel):
    entity_type: str | None = None
    status: str | None = None
    search: str | None = None
    date_from: date | None = None
    date_to: date | None = None

    @validator("entity_type", "status", pre=True)
    def no_all(cls, v):
        return drop_all_choice(v)

class RejectIn(BaseModel):
    entity_type: str
    reason: str | None = None

class ApproveIn(BaseModel):
    entity_type: str

# --- Heritage sites ---

class SiteFilters(BaseModel):
    search: str | None = None
    status: str | None = None # active, inactive
    experience: str | None = None
    site_type: str | None = None

    @validator("status", "experience", "site_type", pre=True)
    def no_all(cls, v):
        return drop_all_choice(v)

class SiteBase(BaseModel):
    name_default: str | None = None
    short_desc_default: str | None = None
    full_desc_default: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    vr_link: str | None = None
    qr_link: str | None = None
    meta_title_def: str | None = None
    meta_description_def: str | None = None
    is_active: bool | None = None
    site_type: str | None = None
    entry_fee: float | None = None
    entry_type: str | None = None
    experience: str | list[str] | None = None
    accessibility: list[str] | None = None
    location_address: str | None = None
    location_area: str | None = None
    location_city: str | None = None
    location_state: str | None = None
    location_country: str | None = None
    location_postal_code: str | None = None
    hero_image_url: str | None = None
    video_360_url: str | None = None
    ar_mode_available: bool | None = None
    opening_hours: dict[str, Any] | None = None
    amenities: list[str] | None = None
    booking_url: str | None = None
    booking_online_available: bool | None = None
    site_map_url: str | None = None
    cultural_etiquettes: list[str] | None = None
    transport_options: list[str] | None = None
    nearby_attractions: list[str] | None = None
    photography_allowed: str | None = None
    photograph_amount: float | None = None

class SiteCreate(SiteBase):
    name_default: str

class SiteUpdate(SiteBase):
    pass

class SiteOut(SiteBase):
    site_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    class Config:
        from_attributes = True

class VisitingHoursIn(BaseModel):
    day_of_week: str
    is_open: bool = True
    opening_time: str | None = None
    closing_time: str | None = None

    @validator("opening_time", "closing_time", pre=True)
    def parse_times(cls, v):
        return normalize_clock(v)

class SiteTicketIn(BaseModel):
    visitor_type: str
    amount: float = 0
    currency: str = "INR"

class SiteMediaIn(BaseModel):
    media_type: str = "image"
    storage_url: str
    is_primary: bool = False

class SiteWizardIn(BaseModel):
    site_id: int | None = None
    site: SiteCreate
    translations: dict[str, dict[str, str]] = Field(default_factory=dict)
    media: list[SiteMediaIn] = Field(default_factory=list)
    visiting_hours: list[VisitingHoursIn] = Field(default_factory=list)
    ticket_types: list[SiteTicketIn] = Field(default_factory=list)

# --- Review dialogs ---

class MediaItemIn(BaseModel):
    media_id: int | None = None
    media_url: str | None = None
    media_type: str | None = None
    alt_text: str | None = None
    is_primary: bool | None = None
    file_name: str | None = None
    file_data: str | None = None # base64 payload for new uploads

class RoomTypeIn(BaseModel):
    room_type_id: int | None = None
    room_category: str | None = None
    room_name: str | None = None
    short_description: str | None = None
    base_price: float | None = None
    currency: str | None = None
    max_guests: int | None = None
    area_sqft: float | None = None
    is_featured: bool | None = None
    is_active: bool | None = None
    tax_percentage: float | None = None
    available_rooms: int | None = None
    allow_extra_beds: bool | None = None
    max_extra_beds: int | None = None
    extra_bed_price: float | None = None
    translations: dict[str, dict[str, str]] = Field(default_factory=dict)

class FoodHoursIn(BaseModel):
    day_of_week: int
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False

    @validator("open_time", "close_time", pre=True)
    def parse_times(cls, v):
        return normalize_clock(v)

class ListingSaveIn(BaseModel):
    fields: dict[str, Any] = Field(default_factory=dict)
    translations: dict[str, dict[str, str]] = Field(default_factory=dict)
    hero_media: list[MediaItemIn] | None = None
    gallery_media: list[MediaItemIn] | None = None
    room_types: list[RoomTypeIn] | None = None
    hours: list[FoodHoursIn] | None = None

# --- Wizards ---

class TimeSlotIn(BaseModel):
    start: str
    end: str
    description: str | None = None

    @validator("start", "end", pre=True)
    def parse_times(cls, v):
        return normalize_clock(v)

class FeeItemIn(BaseModel):
    ticket_type: str
    amount: float = 0
    description: str | None = None

class EventWizardIn(BaseModel):
    title: str
    short_description: str | None = None
    full_description: str | None = None
    category: str | None = None
    organizer_user_id: int | None = None
    site_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    time_slots: list[TimeSlotIn] = Field(default_factory=list)
    venue_name: str | None = None
    venue_address: str | None = None
    city: str | None = None
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    capacity: int | None = None
    is_paid_event: bool = False
    fee_items: list[FeeItemIn] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    cover_image_url: str | None = None
    translations: dict[str, dict[str, str]] = Field(default_factory=dict)
    status: str = "draft" # draft, submit

class EventOut(BaseModel):
    event_id: int
    title: str
    status: str
    start_date: date | None = None
    end_date: date | None = None
    is_paid: bool
    amenities: list[str] | None = None
    class Config:
        from_attributes = True

class GuideWizardIn(BaseModel):
    guide_name: str
    user_id: int | None = None
    address: str | None = None
    area: str | None = None
    city: str | None = None
    state: str | None = None
    bio: dict[str, str] = Field(default_factory=dict)
    languages: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    experience: int = 0
    coverage_area: str | None = None
    email: str | None = None
    phone: str | None = None
    show_contact: bool = True
    hourly_rate: float = 0
    half_day_rate: float = 0
    full_day_rate: float = 0
    available_days: list[str] = Field(default_factory=list)
    weekday_start: str | None = None
    weekday_end: str | None = None
    weekend_start: str | None = None
    weekend_end: str | None = None
    profile_photo_url: str | None = None
    document_urls: list[str] = Field(default_factory=list)
    status: str = "draft"

    @validator("weekday_start", "weekday_end", "weekend_start", "weekend_end", pre=True)
    def parse_times(cls, v):
        return normalize_clock(v)

class GuideOut(BaseModel):
    guide_id: int
    guide_name: str
    status: str
    profile_photo_url: str | None = None
    languages: list[str] | None = None
    class Config:
        from_attributes = True

class MediaOut(BaseModel):
    url: str
    path: str
    file_name: str
    size: int
