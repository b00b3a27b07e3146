"""Notification 도메인의 SQLAlchemy 모델 정의입니다."""

from datetime import timedelta

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from teamspace.config import settings
from teamspace.database import Base
from teamspace.utils.helpers import utcnow

NOTIFICATION_TYPES = (
    "task_assigned",
    "task_completed",
    "task_due_soon",
    "task_overdue",
    "project_update",
    "project_milestone",
    "discussion_reply",
    "discussion_mention",
    "team_invite",
    "team_role_change",
    "comment_reply",
    "file_uploaded",
    "deadline_reminder",
)
RELATED_ENTITY_TYPES = ("project", "task", "discussion", "message", "comment", "user")


def expiry_for(created_at):
    return created_at + timedelta(days=settings.NOTIFICATION_TTL_DAYS)


def default_expiry():
    return expiry_for(utcnow())


class Notification(Base):
    __tablename__ = "notification"

    noti_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    noti_type = Column(String(30), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")  # low/medium/high/urgent
    action_url = Column(String(500))
    related_entity_type = Column(String(20))
    related_entity_id = Column(Integer)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False, default=default_expiry)

    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("idx_notification_user", "user_id", "is_read", "created_at"),
        Index("idx_notification_expires", "expires_at"),
    )

    @property
    def related_entity(self):
        if not self.related_entity_type:
            return None
        return {"type": self.related_entity_type, "id": self.related_entity_id}
