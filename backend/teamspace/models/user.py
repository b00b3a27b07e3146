"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from teamspace.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="member")  # admin/member/viewer
    status = Column(String(20), nullable=False, default="active")  # active/away/offline
    department = Column(String(50))
    location = Column(String(100))
    phone = Column(String(20))
    is_active = Column(Boolean, default=True)
    last_active = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    # Relationships
    project_memberships = relationship("ProjectMember", back_populates="user")
    notifications = relationship("Notification", back_populates="user")

    __table_args__ = (
        Index("idx_user_role_status", "role", "status"),
    )
