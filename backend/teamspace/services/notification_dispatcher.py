"""도메인 이벤트를 수신자별 알림으로 변환해 발송하는 디스패처입니다.

모든 발송은 원본 변경이 커밋된 뒤 동기적으로 실행됩니다. 발송 실패는 경고 로그를 남기고
롤백할 뿐 호출자에게 전파되지 않으므로, 원본 요청의 성공 응답에는 영향을 주지 않습니다.
"""

import logging
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from teamspace.config import settings
from teamspace.models.discussion import Discussion, Message
from teamspace.models.project import Project
from teamspace.models.task import Task
from teamspace.models.user import User
from teamspace.services import notification_service

logger = logging.getLogger(__name__)

URGENT_TASK_PRIORITIES = {"high", "urgent"}


def _safe_dispatch(db: Session, event: str, send: Callable[[], None]) -> bool:
    try:
        send()
        return True
    except Exception as exc:
        db.rollback()
        logger.warning("[dispatch] %s notification failed: %s", event, exc, exc_info=True)
        return False


def assignment_priority(task_priority: str) -> str:
    return "high" if task_priority in URGENT_TASK_PRIORITIES else "medium"


def task_assigned(db: Session, task: Task, actor: User) -> bool:
    if task.assigned_to is None or task.assigned_to == actor.user_id:
        return False

    def send():
        notification_service.create_notification(
            db,
            user_id=task.assigned_to,
            noti_type="task_assigned",
            title="New Task Assigned",
            message=f'{actor.name} assigned you a task: "{task.title}"',
            priority=assignment_priority(task.priority),
            action_url=f"/tasks/{task.task_id}",
            related_entity_type="task",
            related_entity_id=task.task_id,
        )

    return _safe_dispatch(db, "task_assigned", send)


def should_notify_completion(previous_status: str, new_status: str) -> bool:
    if new_status != "completed":
        return False
    if settings.DEDUPLICATE_TASK_COMPLETED:
        return previous_status != "completed"
    return True


def task_completed(db: Session, task: Task, actor: User, recipient_id: Optional[int]) -> bool:
    """완료 알림은 갱신 전 담당자에게 보낸다. 같은 요청에서 재배정되어도 수신자는 바뀌지 않는다."""
    if recipient_id is None:
        return False

    def send():
        notification_service.create_notification(
            db,
            user_id=recipient_id,
            noti_type="task_completed",
            title="Task Completed",
            message=f'Task "{task.title}" has been marked as completed by {actor.name}',
            priority="medium",
            action_url=f"/tasks/{task.task_id}",
            related_entity_type="task",
            related_entity_id=task.task_id,
        )

    return _safe_dispatch(db, "task_completed", send)


def team_invite(db: Session, project: Project, user_id: int, actor: User) -> bool:
    def send():
        notification_service.create_notification(
            db,
            user_id=user_id,
            noti_type="team_invite",
            title="Added to Project",
            message=f'{actor.name} added you to the project "{project.name}"',
            priority="medium",
            action_url=f"/projects/{project.project_id}",
            related_entity_type="project",
            related_entity_id=project.project_id,
        )

    return _safe_dispatch(db, "team_invite", send)


def team_role_change(db: Session, project: Project, user_id: int, role: str, actor: User) -> bool:
    def send():
        notification_service.create_notification(
            db,
            user_id=user_id,
            noti_type="team_role_change",
            title="Project Role Changed",
            message=f'{actor.name} changed your role in "{project.name}" to {role}',
            priority="medium",
            action_url=f"/projects/{project.project_id}",
            related_entity_type="project",
            related_entity_id=project.project_id,
        )

    return _safe_dispatch(db, "team_role_change", send)


def mention_recipients(db: Session, mentions: Iterable[int], author_id: int) -> List[int]:
    candidates = []
    for user_id in mentions or []:
        user_id = int(user_id)
        if user_id != author_id and user_id not in candidates:
            candidates.append(user_id)
    if not candidates:
        return []
    existing = {row[0] for row in db.query(User.user_id).filter(User.user_id.in_(candidates)).all()}
    return [user_id for user_id in candidates if user_id in existing]


def discussion_mentions(db: Session, discussion: Discussion, message: Message, actor: User) -> int:
    sent = 0
    for user_id in mention_recipients(db, message.mentions, actor.user_id):
        def send(user_id=user_id):
            notification_service.create_notification(
                db,
                user_id=user_id,
                noti_type="discussion_mention",
                title="You were mentioned",
                message=f'{actor.name} mentioned you in "{discussion.title}"',
                priority="medium",
                action_url=f"/discussions/{discussion.discussion_id}",
                related_entity_type="discussion",
                related_entity_id=discussion.discussion_id,
            )

        if _safe_dispatch(db, "discussion_mention", send):
            sent += 1
    return sent
