import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from hotel_events.core.exceptions import NotFoundError, ValidationError
from hotel_events.models.venue import Venue, VenueType

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "type", "capacity", "description", "hourly_rate")


def _validate(name: Optional[str], capacity: Optional[int], hourly_rate) -> None:
    if name is not None and not name.strip():
        raise ValidationError("Venue name cannot be empty")
    if capacity is not None and capacity <= 0:
        raise ValidationError("Venue capacity must be positive")
    if hourly_rate is not None and Decimal(hourly_rate) <= 0:
        raise ValidationError("Hourly rate must be positive")


def get_venue(db: Session, venue_id: int) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    return venue


def create_venue(
    db: Session,
    name: str,
    type: VenueType,
    capacity: int,
    hourly_rate,
    description: Optional[str] = None,
) -> Venue:
    if name is None:
        raise ValidationError("Venue name cannot be empty")
    _validate(name, capacity, hourly_rate)
    venue = Venue(
        name=name.strip(),
        type=type,
        capacity=capacity,
        hourly_rate=Decimal(hourly_rate),
        description=description,
        is_active=True,
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    logger.info("Venue created: %s", venue.name)
    return venue


def update_venue(db: Session, venue_id: int, **changes) -> Venue:
    """Apply the given field changes; ``None`` values are ignored."""
    venue = get_venue(db, venue_id)
    changes = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
    _validate(changes.get("name"), changes.get("capacity"), changes.get("hourly_rate"))
    for field, value in changes.items():
        setattr(venue, field, value)
    db.commit()
    db.refresh(venue)
    logger.info("Venue updated: %s", venue.name)
    return venue


def set_venue_active(db: Session, venue_id: int, active: bool) -> Venue:
    venue = get_venue(db, venue_id)
    venue.is_active = active
    db.commit()
    db.refresh(venue)
    logger.info("Venue %s: %s", "activated" if active else "deactivated", venue.name)
    return venue


def activate_venue(db: Session, venue_id: int) -> Venue:
    return set_venue_active(db, venue_id, True)


def deactivate_venue(db: Session, venue_id: int) -> Venue:
    return set_venue_active(db, venue_id, False)


def list_venues(
    db: Session,
    venue_type: Optional[VenueType] = None,
    min_capacity: Optional[int] = None,
    search: Optional[str] = None,
    max_rate=None,
    active_only: bool = True,
) -> List[Venue]:
    query = db.query(Venue)
    if active_only:
        query = query.filter(Venue.is_active == True)  # noqa: E712
    if venue_type:
        query = query.filter(Venue.type == venue_type)
    if min_capacity is not None:
        query = query.filter(Venue.capacity >= min_capacity)
    if search:
        query = query.filter(Venue.name.ilike(f"%{search}%"))
    if max_rate is not None:
        query = query.filter(Venue.hourly_rate <= max_rate)
    return query.order_by(Venue.name).all()
