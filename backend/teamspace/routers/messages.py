"""Messages 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from teamspace.database import get_db
from teamspace.schemas.discussion import MessageOut
from teamspace.schemas.task import ReactionRequest
from teamspace.services import discussion_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("/{message_id}/reactions")
def add_reaction(
    message_id: int,
    data: ReactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    message = discussion_service.add_message_reaction(db, message_id, data.emoji, current_user)
    return api_response({"message": MessageOut.model_validate(message)})


@router.delete("/{message_id}/reactions")
def remove_reaction(
    message_id: int,
    emoji: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    message = discussion_service.remove_message_reaction(db, message_id, emoji, current_user)
    return api_response({"message": MessageOut.model_validate(message)})
