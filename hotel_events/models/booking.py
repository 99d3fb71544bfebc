import enum
from sqlalchemy import (
    Column, String, DateTime, func, DECIMAL, Integer, ForeignKey, Text, Date, Time,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship
from hotel_events.db.session import Base

class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

class MealType(str, enum.Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACKS = "SNACKS"
    COCKTAILS = "COCKTAILS"

class ServingStyle(str, enum.Enum):
    BUFFET = "BUFFET"
    PLATED = "PLATED"
    FAMILY_STYLE = "FAMILY_STYLE"
    COCKTAIL = "COCKTAIL"

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guest_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)
    event_type = Column(String(100), nullable=False)
    event_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    guest_count = Column(Integer, nullable=False)
    total_cost = Column(DECIMAL(10, 2), nullable=False)
    status = Column(
        SAEnum(BookingStatus, native_enum=False),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    reference_code = Column(String(50), unique=True, nullable=False, index=True)
    verification_url = Column(Text, nullable=True)
    qr_code = Column(Text, nullable=True)  # data:image/png;base64,...
    special_requests = Column(Text, nullable=True)

    # Staff-side fields
    assigned_coordinator_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    coordinator_notes = Column(Text, nullable=True)
    setup_status = Column(String(50), nullable=True)
    catering_notes = Column(Text, nullable=True)
    catering_status = Column(String(50), nullable=True)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    guest = relationship("User", foreign_keys=[guest_id])
    venue = relationship("Venue")
    decor_preferences = relationship(
        "DecorPreferences", uselist=False, cascade="all, delete-orphan"
    )
    catering_preferences = relationship(
        "CateringPreferences", uselist=False, cascade="all, delete-orphan"
    )

class DecorPreferences(Base):
    __tablename__ = "decor_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), unique=True, nullable=False)
    theme = Column(String(100), nullable=True)
    color_scheme = Column(String(100), nullable=True)
    flower_arrangements = Column(Text, nullable=True)
    lighting_preferences = Column(Text, nullable=True)
    additional_decor_requests = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

class CateringPreferences(Base):
    __tablename__ = "catering_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), unique=True, nullable=False)
    meal_type = Column(SAEnum(MealType, native_enum=False), nullable=False)
    cuisine_type = Column(String(100), nullable=True)
    dietary_restrictions = Column(Text, nullable=True)
    special_dishes = Column(Text, nullable=True)
    beverage_preferences = Column(Text, nullable=True)
    serving_style = Column(SAEnum(ServingStyle, native_enum=False), default=ServingStyle.BUFFET)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
