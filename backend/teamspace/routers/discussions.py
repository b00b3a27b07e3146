"""Discussions 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from teamspace.config import settings
from teamspace.database import get_db
from teamspace.schemas.discussion import (
    DiscussionCreate,
    DiscussionDetailOut,
    DiscussionOut,
    MessageCreate,
    MessageOut,
)
from teamspace.services import discussion_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/discussions", tags=["discussions"])


@router.get("")
def list_discussions(
    project_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    discussions, pagination = discussion_service.get_discussions(
        db, current_user, project_id=project_id, search=search, page=page, limit=limit
    )
    return api_response({
        "discussions": [DiscussionOut.model_validate(d) for d in discussions],
        "pagination": pagination,
    })


@router.get("/{discussion_id}")
def get_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_discussion(db, discussion_id, current_user)
    return api_response({"discussion": DiscussionDetailOut.model_validate(discussion)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_discussion(
    data: DiscussionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    discussion = discussion_service.create_discussion(db, data, current_user)
    return api_response({"discussion": DiscussionOut.model_validate(discussion)}, "Discussion created successfully")


@router.post("/{discussion_id}/messages", status_code=status.HTTP_201_CREATED)
def post_message(
    discussion_id: int,
    data: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    message = discussion_service.post_message(db, discussion_id, data, current_user)
    return api_response({"message": MessageOut.model_validate(message)}, "Message posted successfully")


@router.put("/{discussion_id}/pin")
def toggle_pin(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.toggle_pin(db, discussion_id, current_user)
    message = "Discussion pinned" if discussion.is_pinned else "Discussion unpinned"
    return api_response({"discussion": DiscussionOut.model_validate(discussion)}, message)


@router.put("/{discussion_id}/lock")
def toggle_lock(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.toggle_lock(db, discussion_id, current_user)
    message = "Discussion locked" if discussion.is_locked else "Discussion unlocked"
    return api_response({"discussion": DiscussionOut.model_validate(discussion)}, message)
