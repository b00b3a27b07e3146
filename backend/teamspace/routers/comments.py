"""Comments 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from teamspace.database import get_db
from teamspace.schemas.task import CommentOut, CommentUpdate, ReactionRequest
from teamspace.services import comment_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.put("/{comment_id}")
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = comment_service.update_comment(db, comment_id, data.content, current_user)
    return api_response({"comment": CommentOut.model_validate(comment)}, "Comment updated successfully")


@router.delete("/{comment_id}")
def delete_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    comment_service.delete_comment(db, comment_id, current_user)
    return api_response(message="Comment deleted successfully")


@router.post("/{comment_id}/reactions")
def add_reaction(
    comment_id: int,
    data: ReactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = comment_service.add_reaction(db, comment_id, data.emoji, current_user)
    return api_response({"comment": CommentOut.model_validate(comment)})


@router.delete("/{comment_id}/reactions")
def remove_reaction(
    comment_id: int,
    emoji: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = comment_service.remove_reaction(db, comment_id, emoji, current_user)
    return api_response({"comment": CommentOut.model_validate(comment)})
