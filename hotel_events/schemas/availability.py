from typing import Optional, List, Dict
from pydantic import BaseModel, model_validator
from datetime import date, time, datetime

from hotel_events.models.availability import AvailabilityStatus


class SlotWindow(BaseModel):
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_window(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


# POST /availability
class SlotCreate(SlotWindow):
    venue_id: int
    date: date
    notes: Optional[str] = None


# POST /availability/range and /availability/populate
class SlotRangeCreate(SlotWindow):
    venue_id: int
    start_date: date
    end_date: date
    notes: Optional[str] = None


# POST /availability/maintenance
class MaintenanceCreate(SlotWindow):
    venue_id: int
    date: date
    maintenance_reason: str
    notes: Optional[str] = None


# PATCH /availability/{id}/status
class SlotStatusUpdate(BaseModel):
    status: AvailabilityStatus
    booking_id: Optional[int] = None
    notes: Optional[str] = None
    maintenance_reason: Optional[str] = None


class BulkDeleteRequest(BaseModel):
    ids: List[int]


class Slot(BaseModel):
    id: int
    venue_id: int
    date: date
    start_time: time
    end_time: time
    status: AvailabilityStatus
    booking_id: Optional[int] = None
    notes: Optional[str] = None
    maintenance_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CalendarResponse(BaseModel):
    month: date
    start_of_month: date
    end_of_month: date
    slots: List[Slot]
    booking_references: Dict[int, str]
    grouped_by_date: Dict[str, List[Slot]]


class AvailabilitySummary(BaseModel):
    available_today: int
    total_slots_today: int
    maintenance_slots: int
    upcoming_bookings: int


class VenueAvailabilityCheck(BaseModel):
    venue_id: int
    date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    available: Optional[bool] = None
    slots: List[Slot] = []
