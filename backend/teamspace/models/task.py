"""Task / Comment 도메인의 SQLAlchemy 모델 정의입니다."""

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, Boolean, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from teamspace.database import Base
from teamspace.utils.helpers import utcnow


def completion_percentage(status: str, subtasks: Optional[Iterable[Mapping[str, Any]]]) -> int:
    items = list(subtasks or [])
    if not items:
        return 100 if status == "completed" else 0
    done = sum(1 for item in items if item.get("completed"))
    # 0.5는 올림 처리 (banker's rounding 회피)
    return int(done * 100 / len(items) + 0.5)


def is_overdue(due_date: Optional[datetime], status: str, now: Optional[datetime] = None) -> bool:
    if due_date is None or status == "completed":
        return False
    return (now or utcnow()) > due_date


class Task(Base):
    __tablename__ = "tasks"

    task_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="todo")  # todo/in-progress/review/completed
    priority = Column(String(10), nullable=False, default="medium")  # low/medium/high/urgent
    assigned_to = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    due_date = Column(DateTime)
    tags = Column(JSON, nullable=False, default=list)
    estimated_hours = Column(Float)
    actual_hours = Column(Float, nullable=False, default=0)
    subtasks = Column(JSON, nullable=False, default=list)  # [{title, completed, created_at}]
    dependencies = Column(JSON, nullable=False, default=list)  # task_id 목록
    watchers = Column(JSON, nullable=False, default=list)  # user_id 목록
    completed_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    project = relationship("Project")
    assignee = relationship("User", foreign_keys=[assigned_to])
    creator = relationship("User", foreign_keys=[created_by])

    __table_args__ = (
        Index("idx_task_project", "project_id"),
        Index("idx_task_assigned", "assigned_to"),
        Index("idx_task_status", "status"),
        Index("idx_task_priority", "priority"),
        Index("idx_task_due_date", "due_date"),
        Index("idx_task_created_at", "created_at"),
    )

    @property
    def project_name(self):
        return self.project.name if self.project else None

    @property
    def project_color(self):
        return self.project.color if self.project else None

    @property
    def assignee_name(self):
        return self.assignee.name if self.assignee else None

    @property
    def creator_name(self):
        return self.creator.name if self.creator else None

    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self.status, self.subtasks)

    @property
    def is_overdue(self) -> bool:
        return is_overdue(self.due_date, self.status)


class Comment(Base):
    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.task_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    parent_id = Column(Integer, ForeignKey("comments.comment_id"), nullable=True)
    content = Column(Text, nullable=False)
    reactions = Column(JSON, nullable=False, default=list)  # [{emoji, users}]
    is_edited = Column(Boolean, default=False)
    edited_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    author = relationship("User")

    __table_args__ = (
        Index("idx_comment_task", "task_id"),
        Index("idx_comment_author", "author_id"),
    )

    @property
    def author_name(self):
        return self.author.name if self.author else None
