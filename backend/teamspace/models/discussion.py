"""Discussion / Message 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from teamspace.database import Base
from teamspace.utils.helpers import utcnow


class Discussion(Base):
    __tablename__ = "discussions"

    discussion_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    is_pinned = Column(Boolean, nullable=False, default=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)
    last_message_at = Column(DateTime, nullable=False, default=utcnow)
    message_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    project = relationship("Project")
    creator = relationship("User", foreign_keys=[created_by])
    participants = relationship(
        "DiscussionParticipant",
        cascade="all, delete-orphan",
        order_by="DiscussionParticipant.participant_id",
    )

    __table_args__ = (
        Index("idx_discussion_project", "project_id"),
        Index("idx_discussion_activity", "is_pinned", "last_message_at"),
    )

    @property
    def project_name(self):
        return self.project.name if self.project else None

    @property
    def creator_name(self):
        return self.creator.name if self.creator else None

    @property
    def participant_ids(self):
        return [p.user_id for p in self.participants]


class DiscussionParticipant(Base):
    __tablename__ = "discussion_participant"

    participant_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("discussions.discussion_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    joined_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("discussion_id", "user_id", name="uq_discussion_participant"),
    )


class Message(Base):
    __tablename__ = "messages"

    message_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("discussions.discussion_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    parent_id = Column(Integer, ForeignKey("messages.message_id"), nullable=True)
    content = Column(Text, nullable=False)
    reactions = Column(JSON, nullable=False, default=list)  # [{emoji, users}]
    mentions = Column(JSON, nullable=False, default=list)  # user_id 목록
    is_edited = Column(Boolean, default=False)
    edited_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    author = relationship("User")

    __table_args__ = (
        Index("idx_message_discussion", "discussion_id", "created_at"),
        Index("idx_message_author", "author_id"),
    )

    @property
    def author_name(self):
        return self.author.name if self.author else None
