"""Notifications 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from teamspace.config import settings
from teamspace.database import get_db
from teamspace.schemas.notification import NotificationOut, NotificationTestRequest
from teamspace.services import notification_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.exceptions import AuthorizationError
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    type: Optional[str] = None,
    is_read: Optional[str] = None,
    priority: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.NOTIFICATION_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notifications, pagination = notification_service.get_notifications(
        db,
        current_user.user_id,
        noti_type=type,
        is_read=is_read,
        priority=priority,
        page=page,
        limit=limit,
    )
    return api_response({
        "notifications": [NotificationOut.model_validate(n) for n in notifications],
        "unread_count": notification_service.unread_count(db, current_user.user_id),
        "pagination": pagination,
    })


@router.get("/unread-count")
def unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return api_response({"unread_count": notification_service.unread_count(db, current_user.user_id)})


@router.put("/mark-all-read")
def mark_all_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    updated = notification_service.mark_all_read(db, current_user.user_id)
    return api_response({"updated": updated}, "All notifications marked as read")


@router.delete("/clear-all")
def clear_all(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    deleted = notification_service.clear_all(db, current_user.user_id)
    return api_response({"deleted": deleted}, "All notifications cleared")


@router.post("/test", status_code=status.HTTP_201_CREATED)
def create_test_notification(
    data: NotificationTestRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if settings.is_production:
        raise AuthorizationError("Test notifications are disabled in production")
    noti = notification_service.create_notification(
        db,
        user_id=current_user.user_id,
        noti_type=data.type,
        title=data.title,
        message=data.message,
        priority=data.priority,
        action_url=data.action_url,
        related_entity_type="user",
        related_entity_id=current_user.user_id,
    )
    return api_response({"notification": NotificationOut.model_validate(noti)}, "Test notification created")


@router.put("/{noti_id}/read")
def mark_read(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    noti = notification_service.mark_read(db, noti_id, current_user.user_id)
    return api_response({"notification": NotificationOut.model_validate(noti)}, "Notification marked as read")


@router.put("/{noti_id}/unread")
def mark_unread(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    noti = notification_service.mark_unread(db, noti_id, current_user.user_id)
    return api_response({"notification": NotificationOut.model_validate(noti)}, "Notification marked as unread")


@router.delete("/{noti_id}")
def delete_notification(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    notification_service.delete_notification(db, noti_id, current_user.user_id)
    return api_response(message="Notification deleted successfully")
