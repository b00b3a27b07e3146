"""Project 요청/응답 계약을 위한 Pydantic 스키마입니다."""

import re
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional
from datetime import date, datetime

from teamspace.schemas.task import TaskOut

ProjectStatus = Literal["active", "completed", "on-hold", "cancelled"]
MemberRole = Literal["admin", "member", "viewer"]

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and not HEX_COLOR.match(value):
        raise ValueError("Color must be a valid hex color")
    return value


def check_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = str(tag).strip()
        if not tag:
            continue
        if len(tag) > 20:
            raise ValueError("Tags cannot exceed 20 characters")
        cleaned.append(tag)
    return cleaned


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    start_date: date
    end_date: Optional[date] = None
    color: str = "#6366f1"
    tags: List[str] = []

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return check_color(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return check_tags(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    color: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return check_color(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return check_tags(v)


class ProjectMemberOut(BaseModel):
    member_id: int
    project_id: int
    user_id: int
    role: str
    joined_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_role: Optional[str] = None
    department: Optional[str] = None

    model_config = {"from_attributes": True}


class ProjectMemberAdd(BaseModel):
    user_id: int
    role: MemberRole = "member"


class ProjectMemberRoleUpdate(BaseModel):
    role: MemberRole


class ProjectOut(BaseModel):
    project_id: int
    name: str
    codename: str
    description: str
    status: str
    progress: int
    start_date: date
    end_date: Optional[date] = None
    color: str
    tags: List[str] = []
    created_by: int
    creator_name: Optional[str] = None
    member_count: int = 0
    task_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProjectDetailOut(ProjectOut):
    members: List[ProjectMemberOut] = []
    tasks: List[TaskOut] = []
    discussion_count: int = 0
