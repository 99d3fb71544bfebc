from datetime import date, time
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.models.venue import VenueType
from hotel_events.schemas.availability import VenueAvailabilityCheck
from hotel_events.schemas.venue import Venue as VenueSchema
from hotel_events.services import availability as availability_service
from hotel_events.services import venues as venue_service
from hotel_events.services.conflicts import is_venue_available

router = APIRouter(prefix="/venues", tags=["Venues"])


@router.get("/", response_model=list[VenueSchema])
def list_venues(
    type: Optional[VenueType] = None,
    min_capacity: Optional[int] = Query(None, ge=1),
    search: Optional[str] = None,
    max_rate: Optional[Decimal] = Query(None, gt=0),
    db: Session = Depends(get_db),
):
    """Active venues, filtered by type, capacity, name and price."""
    return venue_service.list_venues(
        db, venue_type=type, min_capacity=min_capacity, search=search, max_rate=max_rate,
    )


@router.get("/{id}", response_model=VenueSchema)
def get_venue(id: int, db: Session = Depends(get_db)):
    return venue_service.get_venue(db, id)


@router.get("/{id}/availability", response_model=VenueAvailabilityCheck)
def venue_availability(
    id: int,
    date: date,
    start_time: Optional[time] = None,
    end_time: Optional[time] = None,
    db: Session = Depends(get_db),
):
    """
    Slots recorded for the venue on ``date``. When a window is given the
    response also says whether the venue can be requested for it.
    """
    venue_service.get_venue(db, id)
    available = None
    if start_time is not None and end_time is not None:
        available = is_venue_available(db, id, date, start_time, end_time)
    return VenueAvailabilityCheck(
        venue_id=id,
        date=date,
        start_time=start_time,
        end_time=end_time,
        available=available,
        slots=availability_service.list_for_venue(db, id, date),
    )
