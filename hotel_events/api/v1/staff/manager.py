from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import get_current_manager
from hotel_events.models.booking import BookingStatus
from hotel_events.models.user import User
from hotel_events.schemas.booking import Booking as BookingSchema, CoordinatorAssignment
from hotel_events.schemas.common import CountResponse, PaginatedResponse, paginate
from hotel_events.schemas.notification import CleanupStats, NotificationSend
from hotel_events.schemas.user import (
    PasswordChange, RoleAssignment, StaffUserCreate, User as UserSchema,
)
from hotel_events.schemas.venue import Venue as VenueSchema, VenueCreate, VenueUpdate
from hotel_events.services import bookings as booking_service
from hotel_events.services import notifications as notification_service
from hotel_events.services import users as user_service
from hotel_events.services import venues as venue_service

router = APIRouter(prefix="/manager", tags=["Manager"])


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@router.get("/bookings", response_model=PaginatedResponse[BookingSchema])
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    venue_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    items = booking_service.list_bookings(
        db, venue_id=venue_id, status=status_filter, start_date=start_date, end_date=end_date,
    )
    return paginate(items, page, limit)


@router.get("/bookings/pending", response_model=list[BookingSchema])
def pending_bookings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return booking_service.list_bookings(db, status=BookingStatus.PENDING)


@router.patch("/bookings/{id}/confirm", response_model=BookingSchema)
def confirm_booking(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return booking_service.confirm_booking(db, id)


@router.patch("/bookings/{id}/cancel", response_model=BookingSchema)
def cancel_booking(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return booking_service.cancel_booking(db, id)


@router.patch("/bookings/{id}/complete", response_model=BookingSchema)
def complete_booking(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return booking_service.complete_booking(db, id)


@router.patch("/bookings/{id}/assign", response_model=BookingSchema)
def assign_coordinator(
    id: int,
    body: CoordinatorAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return booking_service.assign_coordinator(db, id, body.coordinator_id)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=list[UserSchema])
def list_users(
    active_only: bool = False,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.list_users(db, active_only=active_only, search=search)


@router.post("/users", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(
    body: StaffUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.create_user(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
        role_name=body.role,
    )


@router.patch("/users/{id}/activate", response_model=UserSchema)
def activate_user(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.activate_user(db, id)


@router.patch("/users/{id}/deactivate", response_model=UserSchema)
def deactivate_user(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.deactivate_user(db, id)


@router.patch("/users/{id}/password", response_model=UserSchema)
def change_password(
    id: int,
    body: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.change_password(db, id, body.new_password)


@router.post("/users/{id}/roles", response_model=UserSchema)
def assign_role(
    id: int,
    body: RoleAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.assign_role(db, id, body.role)


@router.delete("/users/{id}/roles/{role}", response_model=UserSchema)
def remove_role(
    id: int,
    role: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return user_service.remove_role(db, id, role)


# ---------------------------------------------------------------------------
# Venues
# ---------------------------------------------------------------------------


@router.post("/venues", response_model=VenueSchema, status_code=status.HTTP_201_CREATED)
def create_venue(
    body: VenueCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return venue_service.create_venue(db, **body.model_dump())


@router.get("/venues", response_model=list[VenueSchema])
def list_all_venues(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return venue_service.list_venues(db, active_only=False)


@router.patch("/venues/{id}", response_model=VenueSchema)
def update_venue(
    id: int,
    body: VenueUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return venue_service.update_venue(db, id, **body.model_dump(exclude_unset=True))


@router.patch("/venues/{id}/activate", response_model=VenueSchema)
def activate_venue(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return venue_service.activate_venue(db, id)


@router.patch("/venues/{id}/deactivate", response_model=VenueSchema)
def deactivate_venue(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return venue_service.deactivate_venue(db, id)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@router.post("/notifications", response_model=CountResponse, status_code=status.HTTP_201_CREATED)
def send_notification(
    body: NotificationSend,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    sent = notification_service.broadcast(
        db,
        current_user,
        body.target_type,
        body.message,
        body.alert_type,
        user_id=body.user_id,
        role_name=body.role_name,
    )
    return {"count": sent}


@router.get("/notifications/cleanup", response_model=CleanupStats)
def cleanup_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return notification_service.cleanup_stats(db)


@router.post("/notifications/cleanup", response_model=CountResponse)
def trigger_cleanup(
    days: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_manager),
):
    return {"count": notification_service.cleanup_old_notifications(db, days=days)}
