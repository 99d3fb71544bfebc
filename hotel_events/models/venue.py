import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, DECIMAL, Integer, Enum as SAEnum
from hotel_events.db.session import Base

class VenueType(str, enum.Enum):
    ROOM = "ROOM"
    HALL = "HALL"

class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    type = Column(SAEnum(VenueType, native_enum=False), nullable=False, index=True)
    capacity = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    hourly_rate = Column(DECIMAL(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
