from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import require_roles
from hotel_events.models.booking import BookingStatus
from hotel_events.models.user import User, RoleName
from hotel_events.schemas.booking import Booking as BookingSchema, CateringUpdate
from hotel_events.services import bookings as booking_service

router = APIRouter(prefix="/catering", tags=["Catering"])

get_current_catering_lead = require_roles(RoleName.CATERING_TEAM_LEADER, RoleName.GENERAL_MANAGER)


@router.get("/tasks", response_model=list[BookingSchema])
def catering_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_catering_lead),
):
    """Confirmed bookings that asked for catering."""
    return booking_service.list_bookings(db, status=BookingStatus.CONFIRMED, has_catering=True)


@router.patch("/bookings/{id}/confirm", response_model=BookingSchema)
def confirm_catering(
    id: int,
    body: CateringUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_catering_lead),
):
    return booking_service.record_catering(
        db, id, current_user, body.catering_notes, body.catering_status,
    )
