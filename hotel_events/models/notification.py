import enum
from sqlalchemy import Column, Boolean, DateTime, func, Integer, ForeignKey, Text, Enum as SAEnum
from sqlalchemy.orm import relationship
from hotel_events.db.session import Base

class SenderType(str, enum.Enum):
    SYSTEM = "SYSTEM"
    STAFF = "STAFF"

class AlertType(str, enum.Enum):
    GUEST_ARRIVAL = "GUEST_ARRIVAL"
    BOOKING_CHANGE = "BOOKING_CHANGE"
    COORDINATION_ALERT = "COORDINATION_ALERT"
    PAYMENT_REMINDER = "PAYMENT_REMINDER"
    EVENT_REMINDER = "EVENT_REMINDER"
    BOOKING_CONFIRMATION = "BOOKING_CONFIRMATION"
    BOOKING_CANCELLATION = "BOOKING_CANCELLATION"
    SETUP_COMPLETE = "SETUP_COMPLETE"
    CATERING_CONFIRMED = "CATERING_CONFIRMED"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    sender_type = Column(SAEnum(SenderType, native_enum=False), default=SenderType.SYSTEM)
    message = Column(Text, nullable=False)
    alert_type = Column(SAEnum(AlertType, native_enum=False), nullable=False, index=True)
    is_read = Column(Boolean, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    recipient = relationship("User", foreign_keys=[recipient_id])
    sender = relationship("User", foreign_keys=[sender_id])
