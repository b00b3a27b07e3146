"""Teams 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from teamspace.database import get_db
from teamspace.schemas.user import UserOut
from teamspace.services import team_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("")
def get_team(
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    members = team_service.get_team_members(db, search=search, role=role, status=status)
    return api_response({
        "members": [UserOut.model_validate(m) for m in members],
        "stats": team_service.get_team_stats(db),
    })
