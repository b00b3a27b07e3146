"""Comment Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from typing import Tuple

from sqlalchemy.orm import Session

from teamspace.models.project import Project
from teamspace.models.task import Task, Comment
from teamspace.models.user import User
from teamspace.utils import permissions
from teamspace.utils.exceptions import AuthorizationError, NotFoundError
from teamspace.utils.helpers import utcnow, with_reaction, without_reaction


def _get_comment(db: Session, comment_id: int, current_user: User) -> Tuple[Comment, Project]:
    comment = db.query(Comment).filter(Comment.comment_id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment not found")
    task = db.query(Task).filter(Task.task_id == comment.task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    project = permissions.require_membership(db, task.project_id, current_user)
    return comment, project


def update_comment(db: Session, comment_id: int, content: str, current_user: User) -> Comment:
    comment, _ = _get_comment(db, comment_id, current_user)
    if comment.author_id != current_user.user_id:
        raise AuthorizationError("Only the author can edit this comment")
    comment.content = content
    comment.is_edited = True
    comment.edited_at = utcnow()
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int, current_user: User):
    comment, project = _get_comment(db, comment_id, current_user)
    if comment.author_id != current_user.user_id and not permissions.is_admin(project, current_user.user_id):
        raise AuthorizationError("Only the author or a project admin can delete this comment")
    # 답글은 부모 참조만 끊고 남겨둔다.
    db.query(Comment).filter(Comment.parent_id == comment_id).update({"parent_id": None}, synchronize_session=False)
    db.delete(comment)
    db.commit()


def add_reaction(db: Session, comment_id: int, emoji: str, current_user: User) -> Comment:
    comment, _ = _get_comment(db, comment_id, current_user)
    comment.reactions = with_reaction(comment.reactions, emoji, current_user.user_id)
    db.commit()
    db.refresh(comment)
    return comment


def remove_reaction(db: Session, comment_id: int, emoji: str, current_user: User) -> Comment:
    comment, _ = _get_comment(db, comment_id, current_user)
    comment.reactions = without_reaction(comment.reactions, emoji, current_user.user_id)
    db.commit()
    db.refresh(comment)
    return comment
