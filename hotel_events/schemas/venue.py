from typing import Optional
from pydantic import BaseModel, Field
from decimal import Decimal
from datetime import datetime

from hotel_events.models.venue import VenueType


class VenueBase(BaseModel):
    name: str
    type: VenueType
    capacity: int = Field(gt=0)
    hourly_rate: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None


class VenueCreate(VenueBase):
    pass


class VenueUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[VenueType] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    hourly_rate: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None


class Venue(VenueBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Compact venue for nested responses
class VenueSummary(BaseModel):
    id: int
    name: str
    type: VenueType
    capacity: int

    class Config:
        from_attributes = True
