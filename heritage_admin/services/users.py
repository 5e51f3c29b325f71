import logging
from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..logging_setup import log_event
from ..models import HeritageUser, UserType, UserProfile
from ..schemas import UserFilters, UserOut, UserTypeOut, UserUpdate, OperationResult, Booking
from . import bookings as booking_service

logger = logging.getLogger(__name__)

def resolve_type_name(user_type: UserType | None, user_type_id: int | None = None) -> str | None:
    """EN translation, then any translation, then the key, then a placeholder."""
    if user_type is None:
        return f"Type {user_type_id}" if user_type_id is not None else None
    translations = list(user_type.translations or [])
    for t in translations:
        if (t.language_code or "").upper() == "EN" and t.type_name:
            return t.type_name
    for t in translations:
        if t.type_name:
            return t.type_name
    return user_type.type_key or f"Type {user_type.user_type_id}"

def to_user_out(user: HeritageUser) -> UserOut:
    profile = user.profile
    return UserOut(
        user_id=user.user_id,
        full_name=user.full_name,
        email=user.email,
        phone=user.phone,
        user_type_id=user.user_type_id,
        user_type_name=resolve_type_name(user.user_type, user.user_type_id),
        is_verified=bool(user.is_verified),
        user_type_verified=user.user_type_verified,
        is_active=user.is_active if user.is_active is not None else True,
        language_code=user.language_code,
        created_at=user.created_at,
        avatar_url=profile.avatar_url if profile else None,
        tags=profile.tags if profile else None,
        is_facebook_connected=bool(profile and profile.is_facebook_connected),
        is_instagram_connected=bool(profile and profile.is_instagram_connected),
        is_twitter_connected=bool(profile and profile.is_twitter_connected),
    )

def list_users(db: Session, filters: UserFilters | None = None) -> list[UserOut]:
    filters = filters or UserFilters()
    q = db.query(HeritageUser).options(
        selectinload(HeritageUser.user_type).selectinload(UserType.translations),
        selectinload(HeritageUser.profile),
    )
    if filters.user_type_id is not None:
        q = q.filter(HeritageUser.user_type_id == filters.user_type_id)
    if filters.is_verified is not None:
        q = q.filter(HeritageUser.is_verified == filters.is_verified)
    if filters.is_active is not None:
        q = q.filter(HeritageUser.is_active == filters.is_active)

    start, end = booking_service.local_day_bounds(filters.date_from, filters.date_to)
    if start:
        q = q.filter(HeritageUser.created_at >= start)
    if end:
        q = q.filter(HeritageUser.created_at < end)

    if filters.search and filters.search.strip():
        pattern = f"%{filters.search.strip()}%"
        q = q.filter(or_(
            HeritageUser.full_name.ilike(pattern),
            HeritageUser.email.ilike(pattern),
            HeritageUser.phone.ilike(pattern),
        ))

    try:
        users = q.order_by(HeritageUser.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to list users: {e}")
        return []
    return [to_user_out(u) for u in users]

def get_user_details(db: Session, user_id: int) -> UserOut | None:
    try:
        user = db.query(HeritageUser).filter(HeritageUser.user_id == user_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load user {user_id}: {e}")
        return None
    return to_user_out(user) if user else None

def get_user_bookings(db: Session, user_id: int, perspective: str = "auto") -> list[Booking]:
    return booking_service.get_user_bookings(db, user_id, perspective)

def update_user(db: Session, user_id: int, payload: UserUpdate) -> OperationResult:
    user = db.query(HeritageUser).filter(HeritageUser.user_id == user_id).first()
    if not user:
        return OperationResult(success=False, error="User not found")

    data = payload.dict(exclude_unset=True)
    profile_fields = {k: data.pop(k) for k in ("tags", "avatar_url") if k in data}
    for key, value in data.items():
        setattr(user, key, value)
    if profile_fields:
        if not user.profile:
            user.profile = UserProfile(user_id=user.user_id)
        for key, value in profile_fields.items():
            setattr(user.profile, key, value)
    user.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update user {user_id}: {e}")
        return OperationResult(success=False, error=str(e))
    log_event("user_updated", user_id=user_id, fields=",".join(sorted(payload.dict(exclude_unset=True))))
    return OperationResult(success=True)

def toggle_user_verification(db: Session, user_id: int) -> OperationResult:
    user = db.query(HeritageUser).filter(HeritageUser.user_id == user_id).first()
    if not user:
        return OperationResult(success=False, error="User not found")
    user.is_verified = not bool(user.is_verified)
    user.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        return OperationResult(success=False, error=str(e))
    log_event("user_verification_toggled", user_id=user_id, is_verified=user.is_verified)
    return OperationResult(success=True)

def delete_user(db: Session, user_id: int) -> OperationResult:
    user = db.query(HeritageUser).filter(HeritageUser.user_id == user_id).first()
    if not user:
        return OperationResult(success=False, error="User not found")
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete user {user_id}: {e}")
        return OperationResult(success=False, error=str(e))
    log_event("user_deleted", user_id=user_id)
    return OperationResult(success=True)

def get_user_types(db: Session) -> list[UserTypeOut]:
    try:
        types = (
            db.query(UserType)
            .options(selectinload(UserType.translations))
            .filter(UserType.is_active == True)
            .order_by(UserType.display_order.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load user types: {e}")
        return []
    return [
        UserTypeOut(user_type_id=t.user_type_id, type_key=t.type_key, type_name=resolve_type_name(t), display_order=t.display_order)
        for t in types
    ]
