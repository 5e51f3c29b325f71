from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import VerificationFilters, VerificationRecord, ApproveIn, RejectIn, OperationResult
from ..security.rbac import require_moderator
from ..services import verification as verification_service

router = APIRouter(prefix="/verification", tags=["verification"])

@router.get("", response_model=list[VerificationRecord])
def list_records(
    entity_type: str | None = None,
    status: str | None = None,
    search: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    filters = VerificationFilters(entity_type=entity_type, status=status, search=search, date_from=date_from, date_to=date_to)
    return verification_service.list_verification_records(db, filters)

@router.get("/entity-types")
def entity_types(_: AdminUser = Depends(require_moderator)) -> list[str]:
    return list(verification_service.ENTITY_TYPES.keys())

def _check(result: OperationResult) -> OperationResult:
    if not result.success:
        status_code = 404 if result.error and result.error.endswith("not found") else 400
        raise HTTPException(status_code=status_code, detail=result.error)
    return result

@router.post("/{entity_id}/approve", response_model=OperationResult)
def approve(entity_id: int, payload: ApproveIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    return _check(verification_service.approve_entity(db, payload.entity_type, entity_id))

@router.post("/{entity_id}/reject", response_model=OperationResult)
def reject(entity_id: int, payload: RejectIn, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    return _check(verification_service.reject_entity(db, payload.entity_type, entity_id, payload.reason))
