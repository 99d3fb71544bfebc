import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from hotel_events.core.config import settings
from hotel_events.core.exceptions import NotFoundError, ValidationError
from hotel_events.models.notification import Notification, AlertType, SenderType
from hotel_events.models.user import User, RoleName
from hotel_events.services.users import users_by_role

logger = logging.getLogger(__name__)

BROADCAST_TARGETS = ("USER", "ROLE", "ALL_GUESTS", "ALL_USERS")


def send_notification(
    db: Session,
    recipient: User,
    message: str,
    alert_type: AlertType,
    sender: Optional[User] = None,
) -> Notification:
    """
    Store an in-app notification for ``recipient``.

    The record is flushed, not committed: callers own the transaction so a
    fan-out to many recipients lands atomically.
    """
    notification = Notification(
        recipient_id=recipient.id,
        sender_id=sender.id if sender else None,
        sender_type=SenderType.STAFF if sender else SenderType.SYSTEM,
        message=message,
        alert_type=alert_type,
        is_read=False,
    )
    db.add(notification)
    db.flush()
    logger.info("Notification %s queued for user %s", alert_type.value, recipient.username)
    return notification


def notify_role(
    db: Session,
    role_name: RoleName,
    message: str,
    alert_type: AlertType,
    sender: Optional[User] = None,
) -> int:
    recipients = users_by_role(db, role_name)
    for user in recipients:
        send_notification(db, user, message, alert_type, sender=sender)
    return len(recipients)


def broadcast(
    db: Session,
    sender: User,
    target_type: str,
    message: str,
    alert_type: AlertType,
    user_id: Optional[int] = None,
    role_name: Optional[str] = None,
) -> int:
    """Staff-composed notification to one user, a role, all guests or every active user."""
    if not message or not message.strip():
        raise ValidationError("Message cannot be empty")

    target = (target_type or "").upper()
    if target == "USER":
        if user_id is None:
            raise ValidationError("User is required")
        recipient = db.query(User).filter(User.id == user_id).first()
        if not recipient:
            raise NotFoundError("User not found")
        recipients = [recipient]
    elif target == "ROLE":
        if not role_name or not role_name.strip():
            raise ValidationError("Role is required")
        recipients = users_by_role(db, role_name)
    elif target == "ALL_GUESTS":
        recipients = users_by_role(db, RoleName.GUEST)
    elif target == "ALL_USERS":
        recipients = db.query(User).filter(User.is_active == True).all()  # noqa: E712
    else:
        raise ValidationError(f"Unknown target type: {target_type}")

    for user in recipients:
        send_notification(db, user, message, alert_type, sender=sender)
    db.commit()
    logger.info("Notification sent to %d recipient(s) by %s", len(recipients), sender.username)
    return len(recipients)


def list_for_user(
    db: Session,
    user_id: int,
    status: str = "ALL",
    search: Optional[str] = None,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.recipient_id == user_id)
    status = (status or "ALL").upper()
    if status == "UNREAD":
        query = query.filter(Notification.is_read == False)  # noqa: E712
    elif status == "READ":
        query = query.filter(Notification.is_read == True)  # noqa: E712
    if search:
        query = query.filter(Notification.message.ilike(f"%{search}%"))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def unread_count(db: Session, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).count()


def mark_as_read(db: Session, notification_id: int, user_id: int) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.recipient_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.recipient_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).update(
        {"is_read": True, "read_at": datetime.now(timezone.utc)},
        synchronize_session="fetch",
    )
    db.commit()
    logger.info("%d notification(s) marked as read for user %s", updated, user_id)
    return updated


def delete_for_user(db: Session, notification_id: int, user_id: int) -> bool:
    deleted = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.recipient_id == user_id,
    ).delete(synchronize_session="fetch")
    db.commit()
    return bool(deleted)


def bulk_delete_for_user(db: Session, notification_ids: Iterable[int], user_id: int) -> int:
    deleted = sum(1 for nid in notification_ids if delete_for_user(db, nid, user_id))
    logger.info("Deleted %d notifications for user %s", deleted, user_id)
    return deleted


def delete_all_for_user(db: Session, user_id: int) -> int:
    deleted = db.query(Notification).filter(
        Notification.recipient_id == user_id,
    ).delete(synchronize_session="fetch")
    db.commit()
    logger.info("Deleted all %d notifications for user %s", deleted, user_id)
    return deleted


def _cutoff(days: int, now: Optional[datetime]) -> datetime:
    return (now or datetime.now(timezone.utc)) - timedelta(days=days)


def cleanup_old_notifications(
    db: Session,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Delete notifications older than the retention window.

    Only deletes, so it is safe to run next to live traffic and idempotent.
    """
    if not settings.NOTIFICATION_CLEANUP_ENABLED:
        logger.debug("Notification cleanup is disabled")
        return 0

    days = settings.NOTIFICATION_RETENTION_DAYS if days is None else days
    deleted = db.query(Notification).filter(
        Notification.created_at < _cutoff(days, now),
    ).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info("Cleaned up %d old notifications (older than %d days)", deleted, days)
    return deleted


def cleanup_stats(db: Session, now: Optional[datetime] = None) -> dict:
    days = settings.NOTIFICATION_RETENTION_DAYS
    old = db.query(Notification).filter(Notification.created_at < _cutoff(days, now)).count()
    return {
        "old_notifications_count": old,
        "cleanup_days": days,
        "cleanup_enabled": settings.NOTIFICATION_CLEANUP_ENABLED,
    }
