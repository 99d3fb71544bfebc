"""
Tests for in-app notifications and the retention job
"""

from datetime import datetime, timezone

import pytest

from hotel_events.core.config import settings
from hotel_events.core.exceptions import NotFoundError, ValidationError
from hotel_events.models.notification import AlertType, Notification, SenderType
from hotel_events.models.user import RoleName
from hotel_events.services import notifications as notification_service
from hotel_events.services import users as user_service

NOW = datetime(2030, 3, 1, 12, 0, tzinfo=timezone.utc)


def _note(db, user, message="hello", created_at=None, is_read=False):
    note = Notification(
        recipient_id=user.id,
        message=message,
        alert_type=AlertType.EVENT_REMINDER,
        sender_type=SenderType.SYSTEM,
        is_read=is_read,
    )
    if created_at is not None:
        note.created_at = created_at
    db.add(note)
    db.commit()
    return note


def test_send_notification_records_sender(db_session, guest, manager):
    system = notification_service.send_notification(
        db_session, guest, "Your event is tomorrow", AlertType.EVENT_REMINDER,
    )
    staff = notification_service.send_notification(
        db_session, guest, "Please call us", AlertType.BOOKING_CHANGE, sender=manager,
    )
    db_session.commit()

    assert system.sender_type == SenderType.SYSTEM and system.sender_id is None
    assert staff.sender_type == SenderType.STAFF and staff.sender_id == manager.id
    assert notification_service.unread_count(db_session, guest.id) == 2


def test_broadcast_targets(db_session, manager, coordinator, make_user):
    guests = [make_user(), make_user()]
    inactive = make_user()
    user_service.deactivate_user(db_session, inactive.id)

    assert notification_service.broadcast(
        db_session, manager, "user", "Hi", AlertType.BOOKING_CHANGE, user_id=guests[0].id,
    ) == 1
    assert notification_service.broadcast(
        db_session, manager, "ROLE", "Staff meeting", AlertType.COORDINATION_ALERT,
        role_name=RoleName.EVENT_COORDINATOR.value,
    ) == 1
    assert notification_service.broadcast(
        db_session, manager, "ALL_GUESTS", "Spring offer", AlertType.EVENT_REMINDER,
    ) == 2
    assert notification_service.broadcast(
        db_session, manager, "ALL_USERS", "Fire drill at noon", AlertType.EVENT_REMINDER,
    ) == 4


@pytest.mark.parametrize("target, kwargs", [
    ("EVERYONE", {}),
    ("USER", {}),
    ("ROLE", {"role_name": " "}),
])
def test_broadcast_rejects_bad_targets(db_session, manager, target, kwargs):
    with pytest.raises(ValidationError):
        notification_service.broadcast(db_session, manager, target, "msg", AlertType.BOOKING_CHANGE, **kwargs)


def test_broadcast_rejects_empty_message_and_unknown_user(db_session, manager):
    with pytest.raises(ValidationError):
        notification_service.broadcast(db_session, manager, "ALL_USERS", "  ", AlertType.BOOKING_CHANGE)
    with pytest.raises(NotFoundError):
        notification_service.broadcast(
            db_session, manager, "USER", "msg", AlertType.BOOKING_CHANGE, user_id=999,
        )


def test_list_and_read_notifications(db_session, guest, make_user):
    other = make_user()
    first = _note(db_session, guest, "Menu tasting booked")
    _note(db_session, guest, "Invoice ready", is_read=True)
    theirs = _note(db_session, other, "Not yours")

    assert len(notification_service.list_for_user(db_session, guest.id)) == 2
    assert [n.id for n in notification_service.list_for_user(db_session, guest.id, "UNREAD")] == [first.id]
    assert len(notification_service.list_for_user(db_session, guest.id, "READ")) == 1
    assert len(notification_service.list_for_user(db_session, guest.id, search="menu")) == 1

    read = notification_service.mark_as_read(db_session, first.id, guest.id)
    assert read.is_read and read.read_at is not None
    with pytest.raises(NotFoundError):
        notification_service.mark_as_read(db_session, theirs.id, guest.id)


def test_mark_all_read_and_delete(db_session, guest):
    notes = [_note(db_session, guest, f"note {i}") for i in range(4)]
    assert notification_service.mark_all_read(db_session, guest.id) == 4
    assert notification_service.unread_count(db_session, guest.id) == 0

    assert notification_service.delete_for_user(db_session, notes[0].id, guest.id) is True
    assert notification_service.delete_for_user(db_session, notes[0].id, guest.id) is False
    assert notification_service.bulk_delete_for_user(db_session, [notes[1].id, 12345], guest.id) == 1
    assert notification_service.delete_all_for_user(db_session, guest.id) == 2


def test_cleanup_removes_only_expired(db_session, guest):
    _note(db_session, guest, "old", created_at=datetime(2030, 1, 1, tzinfo=timezone.utc))
    _note(db_session, guest, "older", created_at=datetime(2029, 12, 1, tzinfo=timezone.utc))
    recent = _note(db_session, guest, "recent", created_at=datetime(2030, 2, 20, tzinfo=timezone.utc))

    assert notification_service.cleanup_stats(db_session, now=NOW)["old_notifications_count"] == 2
    assert notification_service.cleanup_old_notifications(db_session, now=NOW) == 2
    assert [n.id for n in notification_service.list_for_user(db_session, guest.id)] == [recent.id]
    assert notification_service.cleanup_old_notifications(db_session, now=NOW) == 0


def test_cleanup_honours_custom_window_and_switch(db_session, guest, monkeypatch):
    _note(db_session, guest, "recent", created_at=datetime(2030, 2, 20, tzinfo=timezone.utc))

    monkeypatch.setattr(settings, "NOTIFICATION_CLEANUP_ENABLED", False)
    assert notification_service.cleanup_old_notifications(db_session, days=1, now=NOW) == 0

    monkeypatch.setattr(settings, "NOTIFICATION_CLEANUP_ENABLED", True)
    assert notification_service.cleanup_old_notifications(db_session, days=1, now=NOW) == 1
