"""Notification Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from teamspace.models.notification import Notification, NOTIFICATION_TYPES, RELATED_ENTITY_TYPES, expiry_for
from teamspace.utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from teamspace.utils.helpers import is_all, utcnow
from teamspace.utils.pagination import paginate

logger = logging.getLogger(__name__)

READ_FILTERS = {"read", "unread", "all"}


def create_notification(
    db: Session,
    *,
    user_id: int,
    noti_type: str,
    title: str,
    message: str,
    priority: str = "medium",
    action_url: Optional[str] = None,
    related_entity_type: Optional[str] = None,
    related_entity_id: Optional[int] = None,
) -> Notification:
    if noti_type not in NOTIFICATION_TYPES:
        raise ValidationError(f"Unsupported notification type: {noti_type}")
    if related_entity_type is not None and related_entity_type not in RELATED_ENTITY_TYPES:
        raise ValidationError(f"Unsupported related entity type: {related_entity_type}")
    created_at = utcnow()
    noti = Notification(
        user_id=user_id,
        noti_type=noti_type,
        title=title[:200],
        message=message[:500],
        priority=priority,
        action_url=action_url,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
        is_read=False,
        created_at=created_at,
        expires_at=expiry_for(created_at),
    )
    db.add(noti)
    db.commit()
    db.refresh(noti)
    return noti


def _live(db: Session, user_id: int):
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.expires_at > utcnow(),
    )


def unread_count(db: Session, user_id: int) -> int:
    return _live(db, user_id).filter(Notification.is_read == False).count()


def get_notifications(
    db: Session,
    user_id: int,
    *,
    noti_type: Optional[str] = None,
    is_read: Optional[str] = None,
    priority: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Notification], Dict[str, int]]:
    q = _live(db, user_id)
    if not is_all(noti_type):
        q = q.filter(Notification.noti_type == noti_type)
    read_filter = (is_read or "all").strip().lower()
    if read_filter not in READ_FILTERS:
        raise ValidationError("is_read must be one of: read, unread, all")
    if read_filter == "read":
        q = q.filter(Notification.is_read == True)
    elif read_filter == "unread":
        q = q.filter(Notification.is_read == False)
    if not is_all(priority):
        q = q.filter(Notification.priority == priority)
    q = q.order_by(Notification.created_at.desc(), Notification.noti_id.desc())
    return paginate(q, page, limit)


def _get_owned(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = db.query(Notification).filter(Notification.noti_id == noti_id).first()
    if not noti:
        raise NotFoundError("Notification not found")
    if noti.user_id != user_id:
        raise AuthorizationError("Access denied")
    return noti


def mark_read(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = _get_owned(db, noti_id, user_id)
    if not noti.is_read:
        noti.is_read = True
        noti.read_at = utcnow()
        db.commit()
        db.refresh(noti)
    return noti


def mark_unread(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = _get_owned(db, noti_id, user_id)
    noti.is_read = False
    noti.read_at = None
    db.commit()
    db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)
        .update({"is_read": True, "read_at": utcnow()}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, noti_id: int, user_id: int):
    noti = _get_owned(db, noti_id, user_id)
    db.delete(noti)
    db.commit()


def clear_all(db: Session, user_id: int) -> int:
    deleted = (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def purge_expired(db: Session) -> int:
    deleted = (
        db.query(Notification)
        .filter(Notification.expires_at <= utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Purged %s expired notifications", deleted)
    return deleted
