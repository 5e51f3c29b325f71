from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import UserFilters, UserOut, UserTypeOut, UserUpdate, OperationResult, Booking
from ..security.rbac import require_moderator, require_admin
from ..services import users as user_service
from ..services.bookings import BookingError

router = APIRouter(prefix="/users", tags=["users"])

def _check(result: OperationResult) -> OperationResult:
    if not result.success:
        raise HTTPException(status_code=404 if result.error == "User not found" else 400, detail=result.error)
    return result

@router.get("", response_model=list[UserOut])
def list_users(
    user_type_id: int | None = None,
    is_verified: bool | None = None,
    is_active: bool | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    filters = UserFilters(
        user_type_id=user_type_id, is_verified=is_verified, is_active=is_active,
        date_from=date_from, date_to=date_to, search=search,
    )
    return user_service.list_users(db, filters)

@router.get("/types", response_model=list[UserTypeOut])
def user_types(db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    return user_service.get_user_types(db)

@router.get("/{user_id}", response_model=UserOut)
def user_details(user_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_moderator)):
    user = user_service.get_user_details(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/{user_id}/bookings", response_model=list[Booking])
def user_bookings(
    user_id: int,
    perspective: str = Query("auto"),
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    try:
        return user_service.get_user_bookings(db, user_id, perspective)
    except BookingError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.patch("/{user_id}", response_model=OperationResult)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    return _check(user_service.update_user(db, user_id, payload))

@router.post("/{user_id}/toggle-verification", response_model=OperationResult)
def toggle_verification(user_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    return _check(user_service.toggle_user_verification(db, user_id))

@router.delete("/{user_id}", response_model=OperationResult)
def delete_user(user_id: int, db: Session = Depends(get_db), _: AdminUser = Depends(require_admin)):
    return _check(user_service.delete_user(db, user_id))
