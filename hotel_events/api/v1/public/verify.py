from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.schemas.booking import BookingVerification
from hotel_events.services import bookings as booking_service

router = APIRouter(tags=["Verification"])


@router.get("/verify-booking", response_model=BookingVerification)
def verify_booking(ref: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """Look a booking up by the reference code carried in its QR link."""
    return booking_service.find_by_reference_code(db, ref.strip())
