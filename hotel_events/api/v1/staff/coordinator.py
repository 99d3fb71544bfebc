from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import require_roles
from hotel_events.models.booking import BookingStatus
from hotel_events.models.user import User, RoleName
from hotel_events.schemas.booking import Booking as BookingSchema, SetupUpdate
from hotel_events.services import bookings as booking_service

router = APIRouter(prefix="/coordinator", tags=["Coordinator"])

get_current_coordinator = require_roles(RoleName.EVENT_COORDINATOR, RoleName.GENERAL_MANAGER)


@router.get("/tasks", response_model=list[BookingSchema])
def my_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_coordinator),
):
    """Confirmed bookings assigned to the current coordinator."""
    return booking_service.list_bookings(
        db, coordinator_id=current_user.id, status=BookingStatus.CONFIRMED,
    )


@router.get("/bookings", response_model=list[BookingSchema])
def confirmed_bookings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_coordinator),
):
    return booking_service.list_bookings(db, status=BookingStatus.CONFIRMED)


@router.patch("/bookings/{id}/setup", response_model=BookingSchema)
def confirm_setup(
    id: int,
    body: SetupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_coordinator),
):
    return booking_service.record_setup(
        db, id, current_user, body.coordinator_notes, body.setup_status,
    )
