"""
Overlap detection over venue availability slots.

Slots are half-open intervals ``[start, end)``: a slot ending at 12:00 does
not conflict with one starting at 12:00.
"""

from datetime import date, time
from typing import Iterable, List

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from hotel_events.models.availability import VenueAvailability, AvailabilityStatus


def intervals_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """Three-way overlap test of request ``b`` against existing interval ``a``."""
    return (
        (a_start <= b_start < a_end)
        or (a_start < b_end <= a_end)
        or (b_start <= a_start and a_end <= b_end)
    )


def find_conflicting_slots(
    db: Session,
    venue_id: int,
    slot_date: date,
    start_time: time,
    end_time: time,
    statuses: Iterable[AvailabilityStatus] = (AvailabilityStatus.AVAILABLE,),
    lock: bool = False,
) -> List[VenueAvailability]:
    """
    Return the venue's slots on ``slot_date`` whose interval intersects
    ``[start_time, end_time)`` and whose status is one of ``statuses``.

    With ``lock=True`` the matching rows are selected ``FOR UPDATE`` so a
    check-then-write sequence in the same transaction cannot race another one.
    """
    S = VenueAvailability
    query = db.query(S).filter(
        S.venue_id == venue_id,
        S.date == slot_date,
        S.status.in_(list(statuses)),
        or_(
            and_(S.start_time <= start_time, S.end_time > start_time),
            and_(S.start_time < end_time, S.end_time >= end_time),
            and_(S.start_time >= start_time, S.end_time <= end_time),
        ),
    )
    if lock:
        query = query.with_for_update()
    return query.order_by(S.start_time).all()


def is_venue_available(
    db: Session,
    venue_id: int,
    slot_date: date,
    start_time: time,
    end_time: time,
) -> bool:
    """
    True iff no AVAILABLE slot intersects the requested window.

    This keeps the calendar-import convention where an AVAILABLE row stands
    for time that must not be booked directly; taken time (BOOKED,
    MAINTENANCE, BLOCKED) is checked separately by the booking workflow.
    """
    return not find_conflicting_slots(
        db, venue_id, slot_date, start_time, end_time,
        statuses=(AvailabilityStatus.AVAILABLE,),
    )
