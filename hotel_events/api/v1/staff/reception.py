from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import require_roles
from hotel_events.models.booking import BookingStatus
from hotel_events.models.user import User, RoleName
from hotel_events.schemas.booking import Booking as BookingSchema
from hotel_events.services import bookings as booking_service

router = APIRouter(prefix="/reception", tags=["Reception"])

get_current_receptionist = require_roles(RoleName.RECEPTIONIST, RoleName.GENERAL_MANAGER)


@router.get("/verify", response_model=BookingSchema)
def verify(
    ref: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_receptionist),
):
    return booking_service.find_by_reference_code(db, ref.strip())


@router.get("/arrivals", response_model=list[BookingSchema])
def todays_arrivals(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_receptionist),
):
    today = date.today()
    return booking_service.list_bookings(
        db, status=BookingStatus.CONFIRMED, start_date=today, end_date=today,
    )


@router.patch("/bookings/{id}/check-in", response_model=BookingSchema)
def check_in(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_receptionist),
):
    return booking_service.check_in(db, id, current_user)
