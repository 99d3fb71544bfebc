from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import get_current_staff
from hotel_events.models.availability import AvailabilityStatus
from hotel_events.models.user import User
from hotel_events.schemas.availability import (
    AvailabilitySummary,
    BulkDeleteRequest,
    CalendarResponse,
    MaintenanceCreate,
    Slot,
    SlotCreate,
    SlotRangeCreate,
    SlotStatusUpdate,
)
from hotel_events.schemas.common import CountResponse
from hotel_events.services import availability as availability_service

router = APIRouter(prefix="/availability", tags=["Staff - Availability"])


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@router.get("/calendar", response_model=CalendarResponse)
def calendar(
    month: Optional[date] = Query(None, description="Any day in the month to show"),
    venue_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.calendar_data(db, month or date.today(), venue_id)


@router.get("/summary", response_model=AvailabilitySummary)
def summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.availability_summary(db)


@router.get("/search", response_model=list[Slot])
def search(
    venue_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status_filter: Optional[AvailabilityStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    """Slots of one venue between two dates; empty unless all three are given."""
    return availability_service.search_slots(db, venue_id, start_date, end_date, status_filter)


# ---------------------------------------------------------------------------
# Slot management
# ---------------------------------------------------------------------------


@router.post("/", response_model=Slot, status_code=status.HTTP_201_CREATED)
def create_slot(
    body: SlotCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.create_slot(
        db, body.venue_id, body.date, body.start_time, body.end_time, body.notes,
    )


@router.post("/range", response_model=list[Slot], status_code=status.HTTP_201_CREATED)
def create_slots_for_range(
    body: SlotRangeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.create_slots_for_range(
        db, body.venue_id, body.start_date, body.end_date, body.start_time, body.end_time, body.notes,
    )


@router.post("/populate", response_model=list[Slot], status_code=status.HTTP_201_CREATED)
def populate_open_slots(
    body: SlotRangeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.populate_open_slots(
        db, body.venue_id, body.start_date, body.end_date, body.start_time, body.end_time,
    )


@router.post("/maintenance", response_model=Slot, status_code=status.HTTP_201_CREATED)
def block_for_maintenance(
    body: MaintenanceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.block_for_maintenance(
        db, body.venue_id, body.date, body.start_time, body.end_time,
        body.maintenance_reason, body.notes,
    )


@router.patch("/{id}/status", response_model=Slot)
def update_status(
    id: int,
    body: SlotStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return availability_service.update_status(
        db, id, body.status, body.booking_id, body.notes, body.maintenance_reason,
    )


@router.post("/bulk-delete", response_model=CountResponse)
def bulk_delete(
    body: BulkDeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    return {"count": availability_service.bulk_delete(db, body.ids)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_slot(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
):
    availability_service.delete_slot(db, id)
