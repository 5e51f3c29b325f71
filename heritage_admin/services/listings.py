# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..logging_setup import log_event
from ..models import (
    Hotel, HotelTranslation, HotelMedia, RoomType, RoomTypeTranslation,
    Food, FoodTranslation, FoodMedia, FoodHours,
    Artwork, ArtworkTranslation, ArtworkMedia,
)
from ..schemas import ListingSaveIn, RoomTypeIn, FoodHoursIn
from .localized import load_translations, merge_translations, save_translations
from .media_sync import MediaChanges, sync_media
from .storage import StorageError

logger = logging.getLogger(__name__)

HOTEL_FIELDS = ["hotel_name", "subtitle", "short_description", "full_description", "address_line1", "address_line2", "area_or_zone", "city", "state"]
FOOD_FIELDS = ["food_name", "subtitle", "short_description", "full_description", "address_line1", "area_or_zone", "city", "state"]
ARTWORK_FIELDS = ["artwork_name", "short_description", "full_description"]
ROOM_FIELDS = ["room_name", "short_description"]

MIN_HERO_IMAGES = 1
MAX_HERO_IMAGES = 10

class ListingNotFound(Exception):
    pass

class ListingError(Exception):
    pass

@dataclass(frozen=True)
class ListingKind:
    key: str
    model: type
    id_column: str
    translation_model: type
    fields: list
    media_model: type
    # artworks keep their English copy in the translation table as well
    include_source: bool = False

LISTINGS: dict[str, ListingKind] = {
    "hotels": ListingKind("hotels", Hotel, "hotel_id", HotelTranslation, HOTEL_FIELDS, HotelMedia),
    "food": ListingKind("food", Food, "food_id", FoodTranslation, FOOD_FIELDS, FoodMedia),
    "artworks": ListingKind("artworks", Artwork, "artwork_id", ArtworkTranslation, ARTWORK_FIELDS, ArtworkMedia, include_source=True),
}

def get_kind(kind: str) -> ListingKind:
    config = LISTINGS.get(kind)
    if not config:
        raise ListingNotFound(f"Unknown listing kind: {kind}")
    return config

def _row_to_dict(row) -> dict:
    return {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}

def _media_dict(row) -> dict:
    return {
        "media_id": row.media_id,
        "media_url": row.media_url,
        "media_type": row.media_type,
        "alt_text": row.alt_text,
        "position": row.position,
        "is_primary": bool(row.is_primary),
    }

def _media_folder(kind: ListingKind, listing) -> str:
    if kind.key == "artworks":
        return f"artisanartwork/{listing.artisan_id or 'unassigned'}"
    return f"{kind.key}/{getattr(listing, kind.id_column)}"

def _get_listing(db: Session, kind: ListingKind, listing_id: int):
    listing = db.query(kind.model).filter(getattr(kind.model, kind.id_column) == listing_id).first()
    if not listing:
        raise ListingNotFound(f"{kind.key} {listing_id} not found")
    return listing

def load_for_edit(db: Session, kind_key: str, listing_id: int) -> dict:
    kind = get_kind(kind_key)
    listing = _get_listing(db, kind, listing_id)

    stored = load_translations(db, kind.translation_model, kind.id_column, listing_id, kind.fields)
    base = {f: {"en": getattr(listing, f) or ""} for f in kind.fields}
    translations = merge_translations(stored, base)

    media_rows = (
        db.query(kind.media_model)
        .filter(getattr(kind.media_model, kind.id_column) == listing_id)
        .order_by(kind.media_model.position.asc())
        .all()
    )
    out = {
        "listing": _row_to_dict(listing),
        "translations": translations,
        "media": [_media_dict(m) for m in media_rows],
    }

    if kind.key == "hotels":
        out["hero_media"] = [m for m in out["media"] if m["media_type"] == "hero"]
        out["gallery_media"] = [m for m in out["media"] if m["media_type"] != "hero"]
        rooms = db.query(RoomType).filter(RoomType.hotel_id == listing_id).order_by(RoomType.room_type_id.asc()).all()
        out["room_types"] = []
        for room in rooms:
            room_dict = _row_to_dict(room)
            stored_room = load_translations(db, RoomTypeTranslation, "room_type_id", room.room_type_id, ROOM_FIELDS)
            room_dict["translations"] = merge_translations(stored_room, {f: {"en": getattr(room, f) or ""} for f in ROOM_FIELDS})
            out["room_types"].append(room_dict)
    elif kind.key == "food":
        hours = db.query(FoodHours).filter(FoodHours.food_id == listing_id).order_by(FoodHours.day_of_week.asc()).all()
        out["hours"] = [_row_to_dict(h) for h in hours]

    return out

def _apply_fields(kind: ListingKind, listing, fields: dict, translations: dict):
    columns = {attr.key for attr in sa_inspect(kind.model).column_attrs}
    protected = {kind.id_column, "created_at", "updated_at"}
    for key, value in fields.items():
        if key in columns and key not in protected:
            setattr(listing, key, value)
        else:
            logger.warning(f"Ignoring unknown {kind.key} field: {key}")

    # English edits made in the translation grid land on the base record
    for f in kind.fields:
        english = (translations.get(f) or {}).get("en")
        if f not in fields and english and english.strip():
            setattr(listing, f, english.strip())

def _validate_heroes(payload: ListingSaveIn):
    if payload.hero_media is None:
        return
    usable = [m for m in payload.hero_media if m.file_data or (m.media_url and not m.media_url.startswith("blob:"))]
    if len(usable) < MIN_HERO_IMAGES:
        raise ListingError("At least one hero image is required")
    if len(usable) > MAX_HERO_IMAGES:
        raise ListingError(f"A maximum of {MAX_HERO_IMAGES} hero images is allowed")

def _save_room_type(db: Session, hotel_id: int, room_in: RoomTypeIn):
    data = room_in.dict(exclude_unset=True, exclude={"room_type_id", "translations"})
    room = None
    if room_in.room_type_id:
        room = db.query(RoomType).filter(RoomType.room_type_id == room_in.room_type_id, RoomType.hotel_id == hotel_id).first()
        if not room:
            raise ListingError(f"Room type {room_in.room_type_id} does not belong to hotel {hotel_id}")
    if room is None:
        room = RoomType(hotel_id=hotel_id)
        db.add(room)
    for key, value in data.items():
        setattr(room, key, value)
    db.flush()
    if room_in.translations:
        save_translations(db, RoomTypeTranslation, "room_type_id", room.room_type_id, ROOM_FIELDS, room_in.translations)
    return room

def _save_food_hours(db: Session, food_id: int, hours: list[FoodHoursIn]):
    db.query(FoodHours).filter(FoodHours.food_id == food_id).delete()
    for h in hours:
        if h.day_of_week < 1 or h.day_of_week > 7:
            raise ListingError(f"Invalid day_of_week: {h.day_of_week}")
        db.add(FoodHours(
            food_id=food_id,
            day_of_week=h.day_of_week,
            open_time=h.open_time,
            close_time=h.close_time,
            is_closed=h.is_closed,
        ))

def save_changes(db: Session, kind_key: str, listing_id: int, payload: ListingSaveIn) -> dict:
    """
    Saves a moderator's edits to one listing and returns the reloaded state.
    Raises ListingNotFound / ListingError; nothing is written on failure.
    Files of removed media are deleted only after commit, and files uploaded
    by a failed save are deleted again.
    """
    kind = get_kind(kind_key)
    listing = _get_listing(db, kind, listing_id)
    if kind.key == "hotels":
        _validate_heroes(payload)

    folder = _media_folder(kind, listing)
    changes = MediaChanges()
    try:
        _apply_fields(kind, listing, payload.fields, payload.translations)
        if hasattr(listing, "updated_at"):
            listing.updated_at = datetime.now(timezone.utc)

        if payload.translations:
            save_translations(db, kind.translation_model, kind.id_column, listing_id, kind.fields, payload.translations, include_source=kind.include_source)

        if kind.key == "hotels":
            if payload.hero_media is not None:
                sync_media(db, HotelMedia, "hotel_id", listing_id, payload.hero_media, folder, changes, media_type="hero", primary_first=True)
            if payload.gallery_media is not None:
                sync_media(db, HotelMedia, "hotel_id", listing_id, payload.gallery_media, folder, changes, media_type="gallery")
            for room_in in payload.room_types or []:
                _save_room_type(db, listing_id, room_in)
        elif kind.key == "food":
            if payload.gallery_media is not None:
                sync_media(db, FoodMedia, "food_id", listing_id, payload.gallery_media, folder, changes, media_type="gallery", primary_first=True)
            if payload.hours is not None:
                _save_food_hours(db, listing_id, payload.hours)
        else:
            if payload.gallery_media is not None:
                sync_media(db, ArtworkMedia, "artwork_id", listing_id, payload.gallery_media, folder, changes, primary_first=True)

        db.commit()
    except (SQLAlchemyError, StorageError, ListingError) as e:
        db.rollback()
        changes.rollback()
        logger.error(f"Failed to save {kind.key} {listing_id}: {e}")
        if isinstance(e, ListingError):
            raise
        raise ListingError(str(e)) from e

    failed = changes.commit()
    log_event("listing_saved", kind=kind.key, listing_id=listing_id, orphaned_files=len(failed) or None)
    return load_for_edit(db, kind_key, listing_id)
