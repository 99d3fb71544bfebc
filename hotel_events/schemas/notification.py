from typing import Optional, List
from pydantic import BaseModel
from datetime import datetime

from hotel_events.models.notification import AlertType, SenderType


class Notification(BaseModel):
    id: int
    recipient_id: int
    sender_id: Optional[int] = None
    sender_type: SenderType
    message: str
    alert_type: AlertType
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Staff-composed notification (POST /manager/notifications)
class NotificationSend(BaseModel):
    target_type: str
    message: str
    alert_type: AlertType = AlertType.COORDINATION_ALERT
    user_id: Optional[int] = None
    role_name: Optional[str] = None


class NotificationBulkDelete(BaseModel):
    ids: List[int]


class CleanupStats(BaseModel):
    old_notifications_count: int
    cleanup_days: int
    cleanup_enabled: bool
