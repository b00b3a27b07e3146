"""Discussion / Message 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


class DiscussionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    project_id: int
    tags: List[str] = []

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        cleaned = [str(t).strip() for t in v if str(t).strip()]
        if any(len(t) > 20 for t in cleaned):
            raise ValueError("Tags cannot exceed 20 characters")
        return cleaned


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    parent_id: Optional[int] = None
    mentions: List[int] = []

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class MessageOut(BaseModel):
    message_id: int
    discussion_id: int
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    parent_id: Optional[int] = None
    content: str
    reactions: List[Dict[str, Any]] = []
    mentions: List[int] = []
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DiscussionOut(BaseModel):
    discussion_id: int
    project_id: int
    project_name: Optional[str] = None
    title: str
    created_by: int
    creator_name: Optional[str] = None
    is_pinned: bool = False
    is_locked: bool = False
    tags: List[str] = []
    participant_ids: List[int] = []
    last_message_at: Optional[datetime] = None
    message_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DiscussionDetailOut(DiscussionOut):
    messages: List[MessageOut] = []
