from typing import Optional
from pydantic import BaseModel, Field, model_validator
from decimal import Decimal
from datetime import date, time, datetime

from hotel_events.models.booking import BookingStatus, MealType, ServingStyle
from hotel_events.schemas.user import UserSummary
from hotel_events.schemas.venue import VenueSummary


class DecorPreferencesBase(BaseModel):
    theme: Optional[str] = None
    color_scheme: Optional[str] = None
    flower_arrangements: Optional[str] = None
    lighting_preferences: Optional[str] = None
    additional_decor_requests: Optional[str] = None


class DecorPreferences(DecorPreferencesBase):
    id: int

    class Config:
        from_attributes = True


class CateringPreferencesBase(BaseModel):
    meal_type: MealType
    cuisine_type: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    special_dishes: Optional[str] = None
    beverage_preferences: Optional[str] = None
    serving_style: ServingStyle = ServingStyle.BUFFET


class CateringPreferences(CateringPreferencesBase):
    id: int

    class Config:
        from_attributes = True


# Booking: Create (POST /bookings)
class BookingCreate(BaseModel):
    venue_id: int
    event_type: str
    event_date: date
    start_time: time
    end_time: time
    guest_count: int = Field(ge=1)
    special_requests: Optional[str] = None
    decor_preferences: Optional[DecorPreferencesBase] = None
    catering_preferences: Optional[CateringPreferencesBase] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


# Booking: Guest edit while pending (PATCH /bookings/{id})
class BookingUpdate(BaseModel):
    event_type: Optional[str] = None
    guest_count: Optional[int] = Field(default=None, ge=1)
    special_requests: Optional[str] = None
    decor_preferences: Optional[DecorPreferencesBase] = None
    catering_preferences: Optional[CateringPreferencesBase] = None


# Booking: Full response
class Booking(BaseModel):
    id: int
    reference_code: str
    guest_id: int
    venue_id: int
    event_type: str
    event_date: date
    start_time: time
    end_time: time
    guest_count: int
    total_cost: Decimal
    status: BookingStatus
    special_requests: Optional[str] = None
    verification_url: Optional[str] = None
    qr_code: Optional[str] = None
    assigned_coordinator_id: Optional[int] = None
    coordinator_notes: Optional[str] = None
    setup_status: Optional[str] = None
    catering_notes: Optional[str] = None
    catering_status: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    guest: Optional[UserSummary] = None
    venue: Optional[VenueSummary] = None
    decor_preferences: Optional[DecorPreferences] = None
    catering_preferences: Optional[CateringPreferences] = None

    class Config:
        from_attributes = True


# Public verification lookup (GET /verify-booking?ref=)
class BookingVerification(BaseModel):
    reference_code: str
    status: BookingStatus
    event_type: str
    event_date: date
    start_time: time
    end_time: time
    guest_count: int
    guest: Optional[UserSummary] = None
    venue: Optional[VenueSummary] = None
    checked_in_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CoordinatorAssignment(BaseModel):
    coordinator_id: int


class SetupUpdate(BaseModel):
    coordinator_notes: Optional[str] = None
    setup_status: Optional[str] = None


class CateringUpdate(BaseModel):
    catering_notes: Optional[str] = None
    catering_status: Optional[str] = None
