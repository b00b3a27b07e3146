"""User Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from teamspace.models.discussion import Discussion, DiscussionParticipant, Message
from teamspace.models.notification import Notification
from teamspace.models.project import Project, ProjectMember
from teamspace.models.task import Task, Comment
from teamspace.models.user import User
from teamspace.schemas.user import UserUpdate
from teamspace.utils import permissions
from teamspace.utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from teamspace.utils.helpers import is_all, like_pattern, utcnow
from teamspace.utils.pagination import paginate

logger = logging.getLogger(__name__)

ADMIN_ONLY_FIELDS = ("role", "status", "is_active")


def search_users(query, search: Optional[str]):
    pattern = like_pattern(search)
    if not pattern:
        return query
    return query.filter(
        or_(
            User.name.ilike(pattern, escape="\\"),
            User.email.ilike(pattern, escape="\\"),
            User.department.ilike(pattern, escape="\\"),
        )
    )


def get_users(
    db: Session,
    *,
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[User], Dict[str, int]]:
    q = search_users(db.query(User), search)
    if not is_all(role):
        q = q.filter(User.role == role)
    if not is_all(status):
        q = q.filter(User.status == status)
    q = q.order_by(User.created_at.desc(), User.user_id.desc())
    return paginate(q, page, limit)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_detail(db: Session, user_id: int, current_user: User) -> User:
    permissions.require_self_or_site_admin(user_id, current_user)
    user = get_user(db, user_id)
    rows = (
        db.query(Project, ProjectMember.role)
        .outerjoin(
            ProjectMember,
            (ProjectMember.project_id == Project.project_id) & (ProjectMember.user_id == user_id),
        )
        .filter(or_(Project.created_by == user_id, ProjectMember.user_id == user_id))
        .order_by(Project.created_at.desc(), Project.project_id.desc())
        .all()
    )
    user.projects = [
        {
            "project_id": project.project_id,
            "name": project.name,
            "codename": project.codename,
            "status": project.status,
            "color": project.color,
            "role": role,
        }
        for project, role in rows
    ]
    return user


def update_user(db: Session, user_id: int, data: UserUpdate, current_user: User) -> User:
    permissions.require_self_or_site_admin(user_id, current_user)
    user = get_user(db, user_id)
    updates = data.model_dump(exclude_unset=True)

    if any(key in updates for key in ADMIN_ONLY_FIELDS) and not permissions.is_site_admin(current_user):
        raise AuthorizationError("Only admins can change role or status")
    for key in ("name", "role", "status", "is_active"):
        if key in updates and updates[key] is None:
            raise ValidationError(f"{key} cannot be null")

    for k, v in updates.items():
        setattr(user, k, v)
    db.commit()
    db.refresh(user)
    return user


def update_status(db: Session, user_id: int, status: str, current_user: User) -> User:
    permissions.require_self(user_id, current_user)
    user = get_user(db, user_id)
    user.status = status
    user.last_active = utcnow()
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, current_user: User):
    if user_id == current_user.user_id:
        raise ValidationError("Cannot delete your own account")
    user = get_user(db, user_id)

    db.query(ProjectMember).filter(ProjectMember.user_id == user_id).delete(synchronize_session=False)
    db.query(DiscussionParticipant).filter(DiscussionParticipant.user_id == user_id).delete(synchronize_session=False)
    # 소유권은 삭제를 수행한 관리자에게 이전한다.
    projects = (
        db.query(Project)
        .filter(Project.created_by == user_id)
        .update({"created_by": current_user.user_id}, synchronize_session=False)
    )
    db.query(Task).filter(Task.created_by == user_id).update(
        {"created_by": current_user.user_id}, synchronize_session=False
    )
    db.query(Discussion).filter(Discussion.created_by == user_id).update(
        {"created_by": current_user.user_id}, synchronize_session=False
    )
    db.query(Task).filter(Task.assigned_to == user_id).update({"assigned_to": None}, synchronize_session=False)
    db.query(Comment).filter(Comment.author_id == user_id).update({"author_id": None}, synchronize_session=False)
    db.query(Message).filter(Message.author_id == user_id).update({"author_id": None}, synchronize_session=False)
    db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s (projects transferred to %s: %s)", user_id, current_user.user_id, projects)
