"""Task / Comment 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from teamspace.utils.helpers import to_naive_utc, utcnow

TaskStatus = Literal["todo", "in-progress", "review", "completed"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


def _check_tags(tags):
    if tags is None:
        return None
    cleaned = [str(t).strip() for t in tags if str(t).strip()]
    if any(len(t) > 20 for t in cleaned):
        raise ValueError("Tags cannot exceed 20 characters")
    return cleaned


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    project_id: int
    assigned_to: Optional[int] = None
    priority: TaskPriority = "medium"
    due_date: Optional[datetime] = None
    tags: List[str] = []
    estimated_hours: Optional[float] = Field(None, ge=0)
    dependencies: List[int] = []

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _check_tags(v)

    @field_validator("due_date")
    @classmethod
    def due_date_in_future(cls, v):
        v = to_naive_utc(v)
        if v is not None and v <= utcnow():
            raise ValueError("Due date must be in the future")
        return v


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[int] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    actual_hours: Optional[float] = Field(None, ge=0)
    dependencies: Optional[List[int]] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _check_tags(v)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class SubtaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class ReactionRequest(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=32)


class TaskOut(BaseModel):
    task_id: int
    project_id: int
    project_name: Optional[str] = None
    project_color: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    assigned_to: Optional[int] = None
    assignee_name: Optional[str] = None
    created_by: int
    creator_name: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: List[str] = []
    estimated_hours: Optional[float] = None
    actual_hours: float = 0
    subtasks: List[Dict[str, Any]] = []
    dependencies: List[int] = []
    watchers: List[int] = []
    completion_percentage: int = 0
    is_overdue: bool = False
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    parent_id: Optional[int] = None

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class CommentOut(BaseModel):
    comment_id: int
    task_id: int
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    parent_id: Optional[int] = None
    content: str
    reactions: List[Dict[str, Any]] = []
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TaskDetailOut(TaskOut):
    comments: List[CommentOut] = []
