from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import get_current_guest
from hotel_events.models.booking import BookingStatus
from hotel_events.models.user import User
from hotel_events.schemas.booking import Booking as BookingSchema, BookingCreate, BookingUpdate
from hotel_events.schemas.common import PaginatedResponse, paginate
from hotel_events.services import bookings as booking_service
from hotel_events.services import venues as venue_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _dump(model):
    return model.model_dump(exclude_unset=True) if model is not None else None


@router.post("/", response_model=BookingSchema, status_code=status.HTTP_201_CREATED)
def create_booking(
    body: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_guest),
):
    venue = venue_service.get_venue(db, body.venue_id)
    return booking_service.create_booking(
        db,
        guest=current_user,
        venue=venue,
        event_type=body.event_type,
        event_date=body.event_date,
        start_time=body.start_time,
        end_time=body.end_time,
        guest_count=body.guest_count,
        special_requests=body.special_requests,
        decor=_dump(body.decor_preferences),
        catering=_dump(body.catering_preferences),
    )


@router.get("/", response_model=PaginatedResponse[BookingSchema])
def list_my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_guest),
):
    items = booking_service.list_bookings(db, guest_id=current_user.id, status=status_filter)
    return paginate(items, page, limit)


@router.get("/{id}", response_model=BookingSchema)
def get_booking(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_guest),
):
    return booking_service.get_booking_for_guest(db, id, current_user.id)


@router.patch("/{id}", response_model=BookingSchema)
def update_booking(
    id: int,
    body: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_guest),
):
    """Edit a booking that is still pending."""
    return booking_service.update_booking_details(
        db,
        id,
        current_user.id,
        event_type=body.event_type,
        guest_count=body.guest_count,
        special_requests=body.special_requests,
        decor=_dump(body.decor_preferences),
        catering=_dump(body.catering_preferences),
    )


@router.patch("/{id}/cancel", response_model=BookingSchema)
def cancel_booking(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_guest),
):
    return booking_service.cancel_booking_for_guest(db, id, current_user.id)
