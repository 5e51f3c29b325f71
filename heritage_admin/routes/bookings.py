from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import Booking, BookingFilters, BookingStatusIn, BookingSummary, OperationResult
from ..security.rbac import require_moderator, require_admin
from ..services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])

def _filters(
    module_type: str | None = None,
    status: str | None = None,
    payment_status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
) -> BookingFilters:
    return BookingFilters(
        module_type=module_type, status=status, payment_status=payment_status,
        date_from=date_from, date_to=date_to, search=search,
    )

@router.get("", response_model=list[Booking])
def list_bookings(
    filters: BookingFilters = Depends(_filters),
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    return booking_service.list_bookings(db, filters)

@router.get("/summary", response_model=BookingSummary)
def bookings_summary(
    filters: BookingFilters = Depends(_filters),
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    return booking_service.summarize_bookings(booking_service.list_bookings(db, filters))

@router.get("/user/{user_id}", response_model=list[Booking])
def user_bookings(
    user_id: int,
    perspective: str = Query("auto"),
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    try:
        return booking_service.get_user_bookings(db, user_id, perspective)
    except booking_service.BookingError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/{module_type}/{booking_id}", response_model=Booking)
def booking_details(
    module_type: str,
    booking_id: int,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_moderator),
):
    booking = booking_service.get_booking_details(db, booking_id, module_type)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking

def _check(result: OperationResult) -> OperationResult:
    if not result.success:
        code = 404 if result.error == "Booking not found" else 400
        raise HTTPException(status_code=code, detail=result.error)
    return result

@router.patch("/{booking_id}/status", response_model=OperationResult)
def update_status(
    booking_id: int,
    payload: BookingStatusIn,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    return _check(booking_service.update_booking_status(db, booking_id, payload.module_type, payload.status))

@router.patch("/{booking_id}/payment-status", response_model=OperationResult)
def update_payment_status(
    booking_id: int,
    payload: BookingStatusIn,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_admin),
):
    return _check(booking_service.update_payment_status(db, booking_id, payload.module_type, payload.status))
