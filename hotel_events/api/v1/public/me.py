from typing import Optional

from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import get_current_user
from hotel_events.models.user import User
from hotel_events.schemas.common import PaginatedResponse, CountResponse, paginate
from hotel_events.schemas.notification import Notification as NotificationSchema, NotificationBulkDelete
from hotel_events.schemas.user import User as UserSchema, UserUpdate
from hotel_events.services import notifications as notification_service
from hotel_events.services import users as user_service

router = APIRouter(prefix="/me", tags=["Me"])


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.get("/", response_model=UserSchema)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user


@router.patch("/", response_model=UserSchema)
def update_me(
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user, **data.model_dump(exclude_unset=True))


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@router.get("/notifications", response_model=PaginatedResponse[NotificationSchema])
def list_notifications(
    status_filter: str = Query("ALL", alias="status", pattern="^(ALL|UNREAD|READ)$"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the current user's notifications, newest first."""
    items = notification_service.list_for_user(db, current_user.id, status_filter, search)
    return paginate(items, page, limit)


@router.get("/notifications/unread-count", response_model=CountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": notification_service.unread_count(db, current_user.id)}


@router.patch("/notifications/read-all", response_model=CountResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": notification_service.mark_all_read(db, current_user.id)}


@router.patch("/notifications/{id}/read", response_model=NotificationSchema)
def mark_read(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.mark_as_read(db, id, current_user.id)


@router.post("/notifications/bulk-delete", response_model=CountResponse)
def bulk_delete_notifications(
    body: NotificationBulkDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": notification_service.bulk_delete_for_user(db, body.ids, current_user.id)}


@router.delete("/notifications", response_model=CountResponse)
def delete_all_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": notification_service.delete_all_for_user(db, current_user.id)}


@router.delete("/notifications/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not notification_service.delete_for_user(db, id, current_user.id):
        raise HTTPException(status_code=404, detail="Notification not found")
