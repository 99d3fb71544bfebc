"""
Booking workflow: creation, status changes and the staff-side updates that
hang off a booking.

Every booking holds its time through a BOOKED ``VenueAvailability`` row that
points back at it. The row is written in the same transaction as the booking,
released when the booking is cancelled, and taken again if a cancelled
booking is revived.
"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hotel_events.core.config import settings
from hotel_events.core.exceptions import (
    ConflictError, InvalidStateError, NotFoundError, ValidationError, VenueUnavailableError,
)
from hotel_events.models.availability import VenueAvailability, AvailabilityStatus
from hotel_events.models.booking import (
    Booking, BookingStatus, CateringPreferences, DecorPreferences,
)
from hotel_events.models.notification import AlertType
from hotel_events.models.user import User, RoleName
from hotel_events.models.venue import Venue
from hotel_events.services.conflicts import find_conflicting_slots, is_venue_available
from hotel_events.services.notifications import notify_role, send_notification
from hotel_events.services.status_dispatch import dispatch_booking_status
from hotel_events.utils.qr import generate_booking_qr_data_url, get_verification_url
from hotel_events.utils.reference_code import is_valid_reference_code, make_unique_reference_code

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

# Slot statuses that mean the time is already spoken for
TAKEN_STATUSES = (
    AvailabilityStatus.BOOKED,
    AvailabilityStatus.MAINTENANCE,
    AvailabilityStatus.BLOCKED,
)

_DETAIL_FIELDS = ("event_type", "guest_count", "special_requests")


# ---------------------------------------------------------------------------
# Cost
# ---------------------------------------------------------------------------


def whole_hours_between(start_time: time, end_time: time) -> int:
    """Whole hours from start to end; partial hours are dropped."""
    delta = datetime.combine(date.min, end_time) - datetime.combine(date.min, start_time)
    return max(0, int(delta.total_seconds() // 3600))


def calculate_total_cost(venue: Venue, start_time: time, end_time: time) -> Decimal:
    hours = whole_hours_between(start_time, end_time)
    return (Decimal(venue.hourly_rate) * hours).quantize(Decimal("0.01"))


# ---------------------------------------------------------------------------
# Slot bookkeeping
# ---------------------------------------------------------------------------


def _ensure_time_free(db: Session, venue_id: int, event_date: date, start_time: time, end_time: time) -> None:
    taken = find_conflicting_slots(
        db, venue_id, event_date, start_time, end_time,
        statuses=TAKEN_STATUSES, lock=True,
    )
    if taken:
        db.rollback()
        raise VenueUnavailableError("Venue is already booked for the selected time")


def _hold_slot(db: Session, booking: Booking) -> VenueAvailability:
    """Add the BOOKED slot that holds the booking's time."""
    slot = VenueAvailability(
        venue_id=booking.venue_id,
        date=booking.event_date,
        start_time=booking.start_time,
        end_time=booking.end_time,
        status=AvailabilityStatus.BOOKED,
        booking_id=booking.id,
        notes=f"Booking {booking.reference_code}",
    )
    db.add(slot)

    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise VenueUnavailableError("Venue is already booked for the selected time")
    return slot


def _release_slots(db: Session, booking: Booking) -> int:
    return db.query(VenueAvailability).filter(
        VenueAvailability.booking_id == booking.id,
        VenueAvailability.status == AvailabilityStatus.BOOKED,
    ).delete(synchronize_session="fetch")


def _apply_preferences(booking: Booking, decor: Optional[dict], catering: Optional[dict]) -> None:
    if decor is not None:
        if booking.decor_preferences is None:
            booking.decor_preferences = DecorPreferences(**decor)
        else:
            for field, value in decor.items():
                setattr(booking.decor_preferences, field, value)
    if catering is not None:
        if booking.catering_preferences is None:
            booking.catering_preferences = CateringPreferences(**catering)
        else:
            for field, value in catering.items():
                setattr(booking.catering_preferences, field, value)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def create_booking(
    db: Session,
    guest: User,
    venue: Venue,
    event_type: str,
    event_date: date,
    start_time: time,
    end_time: time,
    guest_count: int,
    special_requests: Optional[str] = None,
    decor: Optional[dict] = None,
    catering: Optional[dict] = None,
) -> Booking:
    """
    Book ``venue`` for ``guest``.

    The availability check, the booking row, its preferences and the BOOKED
    slot are written in one transaction. Status side effects (notifications)
    run after the commit and never undo the booking.

    Raises ValidationError for bad input and VenueUnavailableError when the
    time is not free.
    """
    if not event_type or not event_type.strip():
        raise ValidationError("Event type cannot be empty")
    if guest_count < 1:
        raise ValidationError("Guest count must be at least 1")
    if guest_count > venue.capacity:
        raise ValidationError(f"Guest count exceeds venue capacity of {venue.capacity}")
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")
    if not venue.is_active:
        raise ValidationError("Venue is not active")

    if not is_venue_available(db, venue.id, event_date, start_time, end_time):
        raise VenueUnavailableError("Venue is not available for the selected time")
    _ensure_time_free(db, venue.id, event_date, start_time, end_time)

    reference_code = make_unique_reference_code(db)
    booking = Booking(
        guest_id=guest.id,
        venue_id=venue.id,
        event_type=event_type.strip(),
        event_date=event_date,
        start_time=start_time,
        end_time=end_time,
        guest_count=guest_count,
        total_cost=calculate_total_cost(venue, start_time, end_time),
        status=BookingStatus.PENDING,
        reference_code=reference_code,
        verification_url=get_verification_url(reference_code),
        qr_code=generate_booking_qr_data_url(reference_code),
        special_requests=special_requests,
    )
    _apply_preferences(booking, decor, catering)
    db.add(booking)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Could not allocate a unique booking reference code")

    _hold_slot(db, booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking created: %s for venue %s on %s", reference_code, venue.id, event_date)

    dispatch_booking_status(db, booking)
    return booking


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_booking(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def get_booking_for_guest(db: Session, booking_id: int, guest_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id, Booking.guest_id == guest_id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def find_by_reference_code(db: Session, reference_code: str) -> Booking:
    if not is_valid_reference_code(reference_code):
        raise ValidationError("Invalid reference code format")
    booking = db.query(Booking).filter(Booking.reference_code == reference_code).first()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def list_bookings(
    db: Session,
    guest_id: Optional[int] = None,
    venue_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    coordinator_id: Optional[int] = None,
    has_catering: Optional[bool] = None,
) -> List[Booking]:
    query = db.query(Booking)
    if guest_id is not None:
        query = query.filter(Booking.guest_id == guest_id)
    if venue_id is not None:
        query = query.filter(Booking.venue_id == venue_id)
    if status:
        query = query.filter(Booking.status == status)
    if start_date:
        query = query.filter(Booking.event_date >= start_date)
    if end_date:
        query = query.filter(Booking.event_date <= end_date)
    if coordinator_id is not None:
        query = query.filter(Booking.assigned_coordinator_id == coordinator_id)
    if has_catering is True:
        query = query.filter(Booking.catering_preferences.has())
    elif has_catering is False:
        query = query.filter(~Booking.catering_preferences.has())
    return query.order_by(Booking.event_date, Booking.start_time, Booking.id).all()


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------


def update_booking_status(db: Session, booking_id: int, new_status: BookingStatus) -> Booking:
    """
    Move a booking to ``new_status`` and run its side effects.

    Transitions are only checked when ``ENFORCE_BOOKING_TRANSITIONS`` is on.
    Cancelling releases the booking's slot; leaving CANCELLED takes the time
    again and fails with VenueUnavailableError if it has been given away.
    """
    booking = get_booking(db, booking_id)
    old_status = booking.status

    if settings.ENFORCE_BOOKING_TRANSITIONS and new_status not in ALLOWED_TRANSITIONS[old_status]:
        raise InvalidStateError(
            f"Cannot change booking from {old_status.value} to {new_status.value}"
        )

    if new_status == BookingStatus.CANCELLED and old_status != BookingStatus.CANCELLED:
        released = _release_slots(db, booking)
        logger.info("Released %d slot(s) held by booking %s", released, booking.reference_code)
    elif old_status == BookingStatus.CANCELLED and new_status != BookingStatus.CANCELLED:
        if not is_venue_available(db, booking.venue_id, booking.event_date, booking.start_time, booking.end_time):
            raise VenueUnavailableError("Venue is not available for the selected time")
        _ensure_time_free(db, booking.venue_id, booking.event_date, booking.start_time, booking.end_time)
        _hold_slot(db, booking)

    booking.status = new_status
    db.commit()
    db.refresh(booking)
    logger.info(
        "Booking %s status changed from %s to %s",
        booking.reference_code, old_status.value, new_status.value,
    )

    dispatch_booking_status(db, booking)
    return booking


def confirm_booking(db: Session, booking_id: int) -> Booking:
    return update_booking_status(db, booking_id, BookingStatus.CONFIRMED)


def cancel_booking(db: Session, booking_id: int) -> Booking:
    return update_booking_status(db, booking_id, BookingStatus.CANCELLED)


def complete_booking(db: Session, booking_id: int) -> Booking:
    return update_booking_status(db, booking_id, BookingStatus.COMPLETED)


def cancel_booking_for_guest(db: Session, booking_id: int, guest_id: int) -> Booking:
    booking = get_booking_for_guest(db, booking_id, guest_id)
    if booking.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
        raise InvalidStateError(f"A {booking.status.value.lower()} booking cannot be cancelled")
    return cancel_booking(db, booking.id)


# ---------------------------------------------------------------------------
# Edits and staff updates
# ---------------------------------------------------------------------------


def update_booking_details(
    db: Session,
    booking_id: int,
    guest_id: int,
    event_type: Optional[str] = None,
    guest_count: Optional[int] = None,
    special_requests: Optional[str] = None,
    decor: Optional[dict] = None,
    catering: Optional[dict] = None,
) -> Booking:
    """Guest edits; only allowed while the booking is PENDING. Time and venue are fixed."""
    booking = get_booking_for_guest(db, booking_id, guest_id)
    if booking.status != BookingStatus.PENDING:
        raise InvalidStateError("Only pending bookings can be edited")

    if event_type is not None and not event_type.strip():
        raise ValidationError("Event type cannot be empty")
    if guest_count is not None:
        if guest_count < 1:
            raise ValidationError("Guest count must be at least 1")
        if guest_count > booking.venue.capacity:
            raise ValidationError(f"Guest count exceeds venue capacity of {booking.venue.capacity}")

    if event_type is not None:
        event_type = event_type.strip()
    changes = {"event_type": event_type, "guest_count": guest_count, "special_requests": special_requests}
    for field in _DETAIL_FIELDS:
        if changes[field] is not None:
            setattr(booking, field, changes[field])
    _apply_preferences(booking, decor, catering)

    db.commit()
    db.refresh(booking)
    logger.info("Booking %s updated by guest", booking.reference_code)
    return booking


def assign_coordinator(db: Session, booking_id: int, coordinator_id: int) -> Booking:
    booking = get_booking(db, booking_id)
    coordinator = db.query(User).filter(User.id == coordinator_id).first()
    if not coordinator:
        raise NotFoundError("User not found")
    if not coordinator.has_role(RoleName.EVENT_COORDINATOR):
        raise ValidationError("User is not an event coordinator")

    booking.assigned_coordinator_id = coordinator.id
    send_notification(
        db, coordinator,
        f"You have been assigned to booking {booking.reference_code} on {booking.event_date}",
        AlertType.COORDINATION_ALERT,
    )
    db.commit()
    db.refresh(booking)
    logger.info("Coordinator %s assigned to booking %s", coordinator.username, booking.reference_code)
    return booking


def record_setup(
    db: Session,
    booking_id: int,
    actor: User,
    coordinator_notes: Optional[str],
    setup_status: Optional[str],
) -> Booking:
    booking = get_booking(db, booking_id)
    booking.coordinator_notes = coordinator_notes
    booking.setup_status = setup_status
    send_notification(
        db, actor,
        f"Setup confirmed for booking {booking.reference_code}",
        AlertType.SETUP_COMPLETE,
    )
    db.commit()
    db.refresh(booking)
    logger.info("Setup recorded for booking %s: %s", booking.reference_code, setup_status)
    return booking


def record_catering(
    db: Session,
    booking_id: int,
    actor: User,
    catering_notes: Optional[str],
    catering_status: Optional[str],
) -> Booking:
    booking = get_booking(db, booking_id)
    booking.catering_notes = catering_notes
    booking.catering_status = catering_status
    send_notification(
        db, actor,
        f"Catering confirmed for booking {booking.reference_code}",
        AlertType.CATERING_CONFIRMED,
    )
    db.commit()
    db.refresh(booking)
    logger.info("Catering recorded for booking %s: %s", booking.reference_code, catering_status)
    return booking


def check_in(db: Session, booking_id: int, receptionist: User) -> Booking:
    booking = get_booking(db, booking_id)
    if booking.status != BookingStatus.CONFIRMED:
        raise InvalidStateError("Only confirmed bookings can be checked in")

    booking.checked_in_at = datetime.now(timezone.utc)
    notify_role(
        db, RoleName.EVENT_COORDINATOR,
        f"Guest {booking.guest.full_name} has arrived for booking {booking.reference_code}",
        AlertType.GUEST_ARRIVAL,
        sender=receptionist,
    )
    db.commit()
    db.refresh(booking)
    logger.info("Guest checked in for booking %s", booking.reference_code)
    return booking
