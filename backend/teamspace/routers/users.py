"""Users 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from teamspace.config import settings
from teamspace.database import get_db
from teamspace.schemas.user import UserDetailOut, UserOut, UserStatusUpdate, UserUpdate
from teamspace.services import user_service
from teamspace.middleware.auth_middleware import get_current_user, require_roles
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    users, pagination = user_service.get_users(
        db, search=search, role=role, status=status, page=page, limit=limit
    )
    return api_response({"users": [UserOut.model_validate(u) for u in users], "pagination": pagination})


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = user_service.get_user_detail(db, user_id, current_user)
    return api_response({"user": UserDetailOut.model_validate(user)})


@router.put("/{user_id}")
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_service.update_user(db, user_id, data, current_user)
    return api_response({"user": UserOut.model_validate(user)}, "User updated successfully")


@router.put("/{user_id}/status")
def update_status(
    user_id: int,
    data: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_service.update_status(db, user_id, data.status, current_user)
    return api_response({"user": UserOut.model_validate(user)}, "Status updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    user_service.delete_user(db, user_id, current_user)
    return api_response(message="User deleted successfully")
