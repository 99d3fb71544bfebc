import calendar
import logging
from collections import defaultdict
from datetime import date, time, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hotel_events.core.exceptions import (
    ConflictError, InvalidStateError, NotFoundError, ReservationError, ValidationError,
)
from hotel_events.models.availability import VenueAvailability, AvailabilityStatus
from hotel_events.models.booking import Booking
from hotel_events.models.venue import Venue
from hotel_events.services.conflicts import find_conflicting_slots

logger = logging.getLogger(__name__)


def _get_venue(db: Session, venue_id: int) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    return venue


def _validate_window(start_time: time, end_time: time) -> None:
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")


def _save_slot(db: Session, slot: VenueAvailability) -> VenueAvailability:
    db.add(slot)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            f"A slot from {slot.start_time} to {slot.end_time} on {slot.date} already exists"
        )
    db.refresh(slot)
    return slot


def create_slot(
    db: Session,
    venue_id: int,
    slot_date: date,
    start_time: time,
    end_time: time,
    notes: Optional[str] = None,
) -> VenueAvailability:
    """
    Create a manual slot for a venue.

    Manually created slots block the time: they are stored as BLOCKED. Only an
    overlapping AVAILABLE slot is treated as a conflict.
    """
    _get_venue(db, venue_id)
    _validate_window(start_time, end_time)

    conflicts = find_conflicting_slots(db, venue_id, slot_date, start_time, end_time)
    if conflicts:
        raise ConflictError("Time slot conflicts with existing availability")

    slot = _save_slot(db, VenueAvailability(
        venue_id=venue_id,
        date=slot_date,
        start_time=start_time,
        end_time=end_time,
        status=AvailabilityStatus.BLOCKED,
        notes=notes,
    ))
    logger.info("Availability slot created (BLOCKED) for venue %s on %s", venue_id, slot_date)
    return slot


def create_slots_for_range(
    db: Session,
    venue_id: int,
    start_date: date,
    end_date: date,
    start_time: time,
    end_time: time,
    notes: Optional[str] = None,
) -> List[VenueAvailability]:
    """Create one blocking slot per day in ``[start_date, end_date]``; failing days are skipped."""
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")

    slots = []
    day = start_date
    while day <= end_date:
        try:
            slots.append(create_slot(db, venue_id, day, start_time, end_time, notes))
        except ReservationError as e:
            logger.warning("Failed to create slot for venue %s on %s: %s", venue_id, day, e.message)
        day += timedelta(days=1)
    return slots


def populate_open_slots(
    db: Session,
    venue_id: int,
    start_date: date,
    end_date: date,
    start_time: time,
    end_time: time,
) -> List[VenueAvailability]:
    """
    Bulk-populate AVAILABLE slots, one per day, as the calendar import does.

    Days that already hold a slot with identical bounds are left untouched.
    """
    _get_venue(db, venue_id)
    _validate_window(start_time, end_time)
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")

    created = []
    day = start_date
    while day <= end_date:
        exists = db.query(VenueAvailability.id).filter(
            VenueAvailability.venue_id == venue_id,
            VenueAvailability.date == day,
            VenueAvailability.start_time == start_time,
            VenueAvailability.end_time == end_time,
        ).first()
        if not exists:
            slot = VenueAvailability(
                venue_id=venue_id,
                date=day,
                start_time=start_time,
                end_time=end_time,
                status=AvailabilityStatus.AVAILABLE,
            )
            db.add(slot)
            created.append(slot)
        day += timedelta(days=1)

    db.commit()
    for slot in created:
        db.refresh(slot)
    logger.info("Populated %d open slot(s) for venue %s", len(created), venue_id)
    return created


def get_slot(db: Session, slot_id: int) -> VenueAvailability:
    slot = db.query(VenueAvailability).filter(VenueAvailability.id == slot_id).first()
    if not slot:
        raise NotFoundError("Availability not found")
    return slot


def update_status(
    db: Session,
    slot_id: int,
    status: AvailabilityStatus,
    booking_id: Optional[int] = None,
    notes: Optional[str] = None,
    maintenance_reason: Optional[str] = None,
) -> VenueAvailability:
    """Overwrite a slot's status and annotations; there is no transition guard."""
    slot = get_slot(db, slot_id)
    slot.status = status
    slot.booking_id = booking_id
    slot.notes = notes
    slot.maintenance_reason = maintenance_reason
    db.commit()
    db.refresh(slot)
    logger.info("Availability status updated for slot %s", slot_id)
    return slot


def block_for_maintenance(
    db: Session,
    venue_id: int,
    slot_date: date,
    start_time: time,
    end_time: time,
    maintenance_reason: str,
    notes: Optional[str] = None,
) -> VenueAvailability:
    _get_venue(db, venue_id)
    _validate_window(start_time, end_time)

    slot = _save_slot(db, VenueAvailability(
        venue_id=venue_id,
        date=slot_date,
        start_time=start_time,
        end_time=end_time,
        status=AvailabilityStatus.MAINTENANCE,
        maintenance_reason=maintenance_reason,
        notes=notes,
    ))
    logger.info("Venue %s blocked for maintenance on %s", venue_id, slot_date)
    return slot


def delete_slot(db: Session, slot_id: int) -> None:
    slot = get_slot(db, slot_id)
    if slot.status == AvailabilityStatus.BOOKED:
        raise InvalidStateError("Cannot delete booked availability slots")
    db.delete(slot)
    db.commit()
    logger.info("Availability slot deleted: %s", slot_id)


def bulk_delete(db: Session, slot_ids: Iterable[int]) -> int:
    """Delete each slot independently; failures are logged and not counted."""
    deleted = 0
    for slot_id in slot_ids:
        try:
            delete_slot(db, slot_id)
            deleted += 1
        except ReservationError as e:
            logger.warning("Failed to delete availability %s: %s", slot_id, e.message)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to delete availability %s", slot_id)
    return deleted


def list_for_venue(
    db: Session,
    venue_id: int,
    slot_date: date,
    status: Optional[AvailabilityStatus] = None,
) -> List[VenueAvailability]:
    query = db.query(VenueAvailability).filter(
        VenueAvailability.venue_id == venue_id,
        VenueAvailability.date == slot_date,
    )
    if status:
        query = query.filter(VenueAvailability.status == status)
    return query.order_by(VenueAvailability.start_time).all()


def search_slots(
    db: Session,
    venue_id: Optional[int],
    start_date: Optional[date],
    end_date: Optional[date],
    status: Optional[AvailabilityStatus] = None,
) -> List[VenueAvailability]:
    if venue_id is None or start_date is None or end_date is None:
        return []

    query = db.query(VenueAvailability).filter(
        VenueAvailability.venue_id == venue_id,
        VenueAvailability.date.between(start_date, end_date),
    )
    if status:
        query = query.filter(VenueAvailability.status == status)
    return query.order_by(VenueAvailability.date, VenueAvailability.start_time).all()


def calendar_data(db: Session, month: date, venue_id: Optional[int] = None) -> dict:
    """
    Management calendar for the month containing ``month``.

    Only unavailable time is shown (BOOKED, MAINTENANCE, BLOCKED); BOOKED
    slots carry the reference code of the booking that holds them.
    """
    start_of_month = month.replace(day=1)
    end_of_month = month.replace(day=calendar.monthrange(month.year, month.month)[1])

    query = db.query(VenueAvailability).filter(
        VenueAvailability.date.between(start_of_month, end_of_month),
        VenueAvailability.status != AvailabilityStatus.AVAILABLE,
    )
    if venue_id is not None:
        query = query.filter(VenueAvailability.venue_id == venue_id)
    slots = query.order_by(VenueAvailability.date, VenueAvailability.start_time).all()

    booking_ids = {
        s.booking_id for s in slots
        if s.status == AvailabilityStatus.BOOKED and s.booking_id is not None
    }
    references = {}
    if booking_ids:
        rows = db.query(Booking.id, Booking.reference_code).filter(Booking.id.in_(booking_ids)).all()
        references = {booking_id: code for booking_id, code in rows}

    grouped = defaultdict(list)
    for slot in slots:
        grouped[slot.date.isoformat()].append(slot)

    logger.info("Retrieved %d unavailable slots for month %s", len(slots), start_of_month)
    return {
        "month": start_of_month,
        "start_of_month": start_of_month,
        "end_of_month": end_of_month,
        "slots": slots,
        "booking_references": {
            s.id: references.get(s.booking_id) for s in slots if s.booking_id in references
        },
        "grouped_by_date": dict(grouped),
    }


def availability_summary(db: Session, today: Optional[date] = None) -> dict:
    today = today or date.today()
    next_week = today + timedelta(weeks=1)

    def _count(*filters) -> int:
        return db.query(VenueAvailability).filter(*filters).count()

    available_today = _count(
        VenueAvailability.date == today,
        VenueAvailability.status == AvailabilityStatus.AVAILABLE,
    )
    maintenance_today = _count(
        VenueAvailability.date == today,
        VenueAvailability.status == AvailabilityStatus.MAINTENANCE,
    )
    total_today = _count(
        VenueAvailability.date == today,
        VenueAvailability.status.in_([
            AvailabilityStatus.AVAILABLE,
            AvailabilityStatus.BOOKED,
            AvailabilityStatus.MAINTENANCE,
        ]),
    )
    upcoming_booked = _count(
        VenueAvailability.date.between(today, next_week),
        VenueAvailability.status == AvailabilityStatus.BOOKED,
    )
    return {
        "available_today": available_today,
        "total_slots_today": total_today,
        "maintenance_slots": maintenance_today,
        "upcoming_bookings": upcoming_booked,
    }
