import enum
from sqlalchemy import (
    Column, String, DateTime, func, Text, Integer, ForeignKey, Date, Time,
    Enum as SAEnum, UniqueConstraint, Index,
)
from sqlalchemy.orm import relationship
from hotel_events.db.session import Base

class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    MAINTENANCE = "MAINTENANCE"
    BLOCKED = "BLOCKED"

class VenueAvailability(Base):
    __tablename__ = "venue_availability"
    __table_args__ = (
        UniqueConstraint("venue_id", "date", "start_time", "end_time", name="uq_venue_slot_bounds"),
        Index("ix_venue_availability_venue_date", "venue_id", "date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(
        SAEnum(AvailabilityStatus, native_enum=False),
        nullable=False,
        default=AvailabilityStatus.AVAILABLE,
        index=True,
    )
    # Plain id, not a relationship: bookings own slots only by reference
    booking_id = Column(Integer, nullable=True, index=True)
    notes = Column(Text, nullable=True)
    maintenance_reason = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    venue = relationship("Venue")
