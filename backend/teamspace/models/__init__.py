"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from teamspace.models.user import User
from teamspace.models.project import Project, ProjectMember
from teamspace.models.task import Task, Comment
from teamspace.models.discussion import Discussion, DiscussionParticipant, Message
from teamspace.models.notification import Notification

__all__ = [
    "User",
    "Project", "ProjectMember",
    "Task", "Comment",
    "Discussion", "DiscussionParticipant", "Message",
    "Notification",
]
