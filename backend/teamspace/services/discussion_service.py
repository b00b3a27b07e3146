"""Discussion Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from teamspace.models.discussion import Discussion, DiscussionParticipant, Message
from teamspace.models.project import Project
from teamspace.models.user import User
from teamspace.schemas.discussion import DiscussionCreate, MessageCreate
from teamspace.services import notification_dispatcher
from teamspace.utils import permissions
from teamspace.utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from teamspace.utils.helpers import like_pattern, unique_ids, utcnow, with_reaction, without_reaction
from teamspace.utils.pagination import paginate


def _ensure_participant(discussion: Discussion, user_id: int) -> bool:
    if user_id in discussion.participant_ids:
        return False
    discussion.participants.append(DiscussionParticipant(user_id=user_id))
    return True


def _get_discussion(db: Session, discussion_id: int, current_user: User) -> Tuple[Discussion, Project]:
    discussion = db.query(Discussion).filter(Discussion.discussion_id == discussion_id).first()
    if not discussion:
        raise NotFoundError("Discussion not found")
    project = permissions.require_membership(db, discussion.project_id, current_user)
    return discussion, project


def get_discussions(
    db: Session,
    current_user: User,
    *,
    project_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Discussion], Dict[str, int]]:
    q = db.query(Discussion)
    if project_id is not None:
        permissions.require_membership(db, project_id, current_user)
        q = q.filter(Discussion.project_id == project_id)
    else:
        q = q.filter(Discussion.project_id.in_(permissions.accessible_project_ids(db, current_user)))
    pattern = like_pattern(search)
    if pattern:
        q = q.filter(Discussion.title.ilike(pattern, escape="\\"))
    q = q.order_by(
        Discussion.is_pinned.desc(),
        Discussion.last_message_at.desc(),
        Discussion.discussion_id.desc(),
    )
    return paginate(q, page, limit)


def get_discussion(db: Session, discussion_id: int, current_user: User) -> Discussion:
    discussion, _ = _get_discussion(db, discussion_id, current_user)
    if _ensure_participant(discussion, current_user.user_id):
        db.commit()
        db.refresh(discussion)
    discussion.messages = (
        db.query(Message)
        .filter(Message.discussion_id == discussion_id)
        .order_by(Message.created_at.asc(), Message.message_id.asc())
        .all()
    )
    return discussion


def create_discussion(db: Session, data: DiscussionCreate, current_user: User) -> Discussion:
    permissions.require_membership(db, data.project_id, current_user)
    discussion = Discussion(
        project_id=data.project_id,
        title=data.title,
        created_by=current_user.user_id,
        tags=list(data.tags),
        last_message_at=utcnow(),
    )
    discussion.participants.append(DiscussionParticipant(user_id=current_user.user_id))
    db.add(discussion)
    db.commit()
    db.refresh(discussion)
    return discussion


def post_message(db: Session, discussion_id: int, data: MessageCreate, current_user: User) -> Message:
    discussion, _ = _get_discussion(db, discussion_id, current_user)
    if discussion.is_locked:
        raise AuthorizationError("Discussion is locked")
    if data.parent_id is not None:
        parent = db.query(Message).filter(Message.message_id == data.parent_id).first()
        if not parent or parent.discussion_id != discussion.discussion_id:
            raise ValidationError("Parent message must belong to the same discussion")

    message = Message(
        discussion_id=discussion.discussion_id,
        author_id=current_user.user_id,
        parent_id=data.parent_id,
        content=data.content,
        mentions=unique_ids(data.mentions),
    )
    db.add(message)
    discussion.last_message_at = utcnow()
    discussion.message_count = (discussion.message_count or 0) + 1
    _ensure_participant(discussion, current_user.user_id)
    db.commit()
    db.refresh(message)

    notification_dispatcher.discussion_mentions(db, discussion, message, current_user)
    return message


def toggle_pin(db: Session, discussion_id: int, current_user: User) -> Discussion:
    discussion, project = _get_discussion(db, discussion_id, current_user)
    permissions.require_admin(project, current_user, "Only project admins can pin discussions")
    discussion.is_pinned = not discussion.is_pinned
    db.commit()
    db.refresh(discussion)
    return discussion


def toggle_lock(db: Session, discussion_id: int, current_user: User) -> Discussion:
    discussion, project = _get_discussion(db, discussion_id, current_user)
    permissions.require_admin(project, current_user, "Only project admins can lock discussions")
    discussion.is_locked = not discussion.is_locked
    db.commit()
    db.refresh(discussion)
    return discussion


def _get_message(db: Session, message_id: int, current_user: User) -> Message:
    message = db.query(Message).filter(Message.message_id == message_id).first()
    if not message:
        raise NotFoundError("Message not found")
    _get_discussion(db, message.discussion_id, current_user)
    return message


def add_message_reaction(db: Session, message_id: int, emoji: str, current_user: User) -> Message:
    message = _get_message(db, message_id, current_user)
    message.reactions = with_reaction(message.reactions, emoji, current_user.user_id)
    db.commit()
    db.refresh(message)
    return message


def remove_message_reaction(db: Session, message_id: int, emoji: str, current_user: User) -> Message:
    message = _get_message(db, message_id, current_user)
    message.reactions = without_reaction(message.reactions, emoji, current_user.user_id)
    db.commit()
    db.refresh(message)
    return message
