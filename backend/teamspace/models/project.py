"""Project 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from teamspace.database import Base


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    codename = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active/completed/on-hold/cancelled
    progress = Column(Integer, nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    color = Column(String(7), nullable=False, default="#6366f1")
    tags = Column(JSON, nullable=False, default=list)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    creator = relationship("User", foreign_keys=[created_by])
    members = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.joined_at, ProjectMember.member_id",
    )

    __table_args__ = (
        Index("idx_project_created_by", "created_by"),
        Index("idx_project_status", "status"),
        Index("idx_project_created_at", "created_at"),
    )

    @property
    def creator_name(self):
        return self.creator.name if self.creator else None

    @property
    def member_count(self):
        return len(self.members)


class ProjectMember(Base):
    __tablename__ = "project_member"

    member_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    role = Column(String(20), nullable=False, default="member")  # admin/member/viewer
    joined_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="project_memberships")

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member_project_user"),
        Index("idx_project_member_user", "user_id"),
    )

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def user_email(self):
        return self.user.email if self.user else None

    @property
    def user_role(self):
        return self.user.role if self.user else None

    @property
    def department(self):
        return self.user.department if self.user else None
