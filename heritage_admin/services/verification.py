# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..logging_setup import log_event
from ..models import HeritageSite, HeritageUser, Hotel, Food, Artisan, Notification
from ..schemas import VerificationFilters, VerificationRecord, OperationResult

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "India"

# heritage_usertype ids of vendor accounts that need approval
TOUR_OPERATOR_TYPE_ID = 10
LOCAL_GUIDE_TYPE_ID = 11
EVENT_OPERATOR_TYPE_ID = 13

class VerificationError(Exception):
    pass

@dataclass(frozen=True)
class EntityConfig:
    model: type
    id_column: str
    name_column: str
    subtitle_column: str | None
    status_column: str
    approve_value: Any
    reject_value: Any
    owner_column: str | None = None
    user_type_id: int | None = None

ENTITY_TYPES: dict[str, EntityConfig] = {
    "Heritage Site": EntityConfig(HeritageSite, "site_id", "name_default", "short_desc_default", "is_active", True, False),
    "Local Guide": EntityConfig(HeritageUser, "user_id", "full_name", "email", "user_type_verified", True, False, "user_id", LOCAL_GUIDE_TYPE_ID),
    "Hotel": EntityConfig(Hotel, "hotel_id", "hotel_name", "subtitle", "status", "published", "draft", "owner_user_id"),
    "Event Operator": EntityConfig(HeritageUser, "user_id", "full_name", "email", "user_type_verified", True, False, "user_id", EVENT_OPERATOR_TYPE_ID),
    "Tour Operator": EntityConfig(HeritageUser, "user_id", "full_name", "email", "user_type_verified", True, False, "user_id", TOUR_OPERATOR_TYPE_ID),
    "Food Vendor": EntityConfig(Food, "food_id", "food_name", "subtitle", "status", "published", "pending", "owner_user_id"),
    "Artisan": EntityConfig(Artisan, "artisan_id", "artisan_name", "craft_type", "is_verified", True, False, "user_id"),
}

def map_status(value) -> str:
    if isinstance(value, bool):
        return "Approved" if value else "Pending"
    if value is None:
        return "Pending"
    v = str(value).strip().lower()
    if v in ("approved", "active", "published"):
        return "Approved"
    if v in ("rejected", "cancelled", "archived"):
        return "Rejected"
    return "Pending"

def get_entity_config(entity_type: str) -> EntityConfig:
    config = ENTITY_TYPES.get(entity_type)
    if not config:
        raise VerificationError(f"Unknown entity type: {entity_type}")
    return config

def _entity_query(db: Session, config: EntityConfig):
    q = db.query(config.model)
    if config.user_type_id is not None:
        q = q.filter(config.model.user_type_id == config.user_type_id)
    return q

def _created_naive(row) -> datetime:
    ts = getattr(row, "created_at", None)
    if ts is None:
        return datetime.min
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts

def _to_record(entity_type: str, config: EntityConfig, row) -> VerificationRecord:
    created = getattr(row, "created_at", None)
    return VerificationRecord(
        id=getattr(row, config.id_column),
        entity_type=entity_type,
        name=getattr(row, config.name_column) or f"{entity_type} #{getattr(row, config.id_column)}",
        subtitle=getattr(row, config.subtitle_column) if config.subtitle_column else None,
        location=DEFAULT_LOCATION,
        submitted_on=created.date().isoformat() if created else None,
        status=map_status(getattr(row, config.status_column)),
        user_id=getattr(row, config.owner_column) if config.owner_column else None,
    )

def _matches(record: VerificationRecord, filters: VerificationFilters) -> bool:
    if filters.status and record.status.lower() != filters.status.lower():
        return False
    if filters.search and filters.search.strip():
        needle = filters.search.strip().lower()
        haystack = [record.name, record.subtitle or "", record.entity_type]
        if not any(needle in h.lower() for h in haystack):
            return False
    if filters.date_from or filters.date_to:
        if not record.submitted_on:
            return False
        if filters.date_from and record.submitted_on < filters.date_from.isoformat():
            return False
        if filters.date_to and record.submitted_on > filters.date_to.isoformat():
            return False
    return True

def list_verification_records(db: Session, filters: VerificationFilters | None = None) -> list[VerificationRecord]:
    filters = filters or VerificationFilters()
    if filters.entity_type:
        if filters.entity_type not in ENTITY_TYPES:
            logger.warning(f"Unknown entity type filter: {filters.entity_type}")
            return []
        types = [filters.entity_type]
    else:
        types = list(ENTITY_TYPES.keys())

    rows = []
    for entity_type in types:
        config = ENTITY_TYPES[entity_type]
        try:
            for row in _entity_query(db, config).all():
                rows.append((_created_naive(row), _to_record(entity_type, config, row)))
        except SQLAlchemyError as e:
            # one broken table must not hide the others
            logger.error(f"Failed to load {entity_type} records: {e}")

    rows.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in rows if _matches(record, filters)]

def _set_status(db: Session, entity_type: str, entity_id: int, approve: bool, reason: str | None = None) -> OperationResult:
    try:
        config = get_entity_config(entity_type)
    except VerificationError as e:
        return OperationResult(success=False, error=str(e))

    row = _entity_query(db, config).filter(getattr(config.model, config.id_column) == entity_id).first()
    if not row:
        return OperationResult(success=False, error=f"{entity_type} {entity_id} not found")

    setattr(row, config.status_column, config.approve_value if approve else config.reject_value)
    if hasattr(row, "updated_at"):
        row.updated_at = datetime.now(timezone.utc)

    if not approve:
        db.add(Notification(
            user_id=getattr(row, config.owner_column) if config.owner_column else None,
            entity_type=entity_type,
            entity_id=entity_id,
            title=f"{entity_type} verification rejected",
            body=reason or "No reason provided",
        ))

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update {entity_type} {entity_id}: {e}")
        return OperationResult(success=False, error=str(e))

    log_event("verification_decision", entity_type=entity_type, entity_id=entity_id, decision="approved" if approve else "rejected")
    return OperationResult(success=True)

def approve_entity(db: Session, entity_type: str, entity_id: int) -> OperationResult:
    return _set_status(db, entity_type, entity_id, approve=True)

def reject_entity(db: Session, entity_type: str, entity_id: int, reason: str | None = None) -> OperationResult:
    return _set_status(db, entity_type, entity_id, approve=False, reason=reason)
