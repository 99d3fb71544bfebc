"""
Side effects that follow a booking status change.

Handlers are plain functions registered under ``<status>_booking`` (e.g.
``confirmed_booking``) rather than the ``<status>BookingStrategy`` class names
of a strategy-object design; the key is only used for lookup and logging.
``dispatch_booking_status`` looks the handler up by
the booking's current status, commits the notifications it queued, and never
lets a failure escape: the status change itself is already committed.
"""

import logging
from typing import Callable, Dict

from sqlalchemy.orm import Session

from hotel_events.models.booking import Booking, BookingStatus
from hotel_events.models.notification import AlertType
from hotel_events.models.user import RoleName
from hotel_events.services.notifications import notify_role, send_notification

logger = logging.getLogger(__name__)

Handler = Callable[[Session, Booking], None]

_HANDLERS: Dict[str, Handler] = {}


def handler_key(status: BookingStatus) -> str:
    return f"{status.value.lower()}_booking"


def register(status: BookingStatus):
    def decorator(func: Handler) -> Handler:
        _HANDLERS[handler_key(status)] = func
        return func
    return decorator


def get_handler(status: BookingStatus):
    return _HANDLERS.get(handler_key(status))


@register(BookingStatus.PENDING)
def _pending_booking(db: Session, booking: Booking) -> None:
    ref = booking.reference_code
    send_notification(
        db, booking.guest,
        f"Your booking {ref} has been created and is pending confirmation. "
        "We will review your request and get back to you soon.",
        AlertType.BOOKING_CONFIRMATION,
    )
    notify_role(
        db, RoleName.GENERAL_MANAGER,
        f"New booking request: {ref} from {booking.guest.full_name}",
        AlertType.COORDINATION_ALERT,
    )
    notify_role(
        db, RoleName.EVENT_COORDINATOR,
        f"New booking request: {ref} for {booking.event_type} on {booking.event_date}",
        AlertType.COORDINATION_ALERT,
    )


@register(BookingStatus.CONFIRMED)
def _confirmed_booking(db: Session, booking: Booking) -> None:
    ref = booking.reference_code
    send_notification(db, booking.guest, f"Your booking {ref} is confirmed.", AlertType.BOOKING_CONFIRMATION)
    notify_role(
        db, RoleName.EVENT_COORDINATOR,
        f"A booking has been confirmed: {ref}",
        AlertType.COORDINATION_ALERT,
    )
    notify_role(
        db, RoleName.CATERING_TEAM_LEADER,
        f"Catering required for booking: {ref}",
        AlertType.CATERING_CONFIRMED,
    )


@register(BookingStatus.CANCELLED)
def _cancelled_booking(db: Session, booking: Booking) -> None:
    ref = booking.reference_code
    send_notification(db, booking.guest, f"Your booking {ref} has been cancelled.", AlertType.BOOKING_CANCELLATION)
    for role in (RoleName.GENERAL_MANAGER, RoleName.EVENT_COORDINATOR):
        notify_role(db, role, f"Booking {ref} was cancelled.", AlertType.BOOKING_CANCELLATION)


@register(BookingStatus.COMPLETED)
def _completed_booking(db: Session, booking: Booking) -> None:
    logger.info("Booking %s completed", booking.reference_code)


def dispatch_booking_status(db: Session, booking: Booking) -> bool:
    """Run the handler for ``booking.status``; True when it ran and committed."""
    key = handler_key(booking.status)
    handler = _HANDLERS.get(key)
    if handler is None:
        logger.warning("No status handler registered for %s", key)
        return False

    ref = booking.reference_code
    try:
        handler(db, booking)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error processing %s for booking %s", key, ref)
        return False
    logger.info("Processed %s for booking %s", key, ref)
    return True
