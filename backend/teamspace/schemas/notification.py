"""Notification 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional, Union
from datetime import datetime

NotificationType = Literal[
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
]
NotificationPriority = Literal["low", "medium", "high", "urgent"]


class NotificationOut(BaseModel):
    noti_id: int
    user_id: int
    noti_type: str
    title: str
    message: str
    priority: str
    action_url: Optional[str] = None
    related_entity: Optional[Dict[str, Union[str, int, None]]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    expires_at: datetime

    model_config = {"from_attributes": True}


class NotificationTestRequest(BaseModel):
    type: NotificationType = "project_update"
    title: str = Field("Test notification", min_length=1, max_length=200)
    message: str = Field("This is a test notification", min_length=1, max_length=500)
    priority: NotificationPriority = "medium"
    action_url: Optional[str] = Field(None, max_length=500)
