"""Auth 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from teamspace.database import get_db
from teamspace.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserOut
from teamspace.services import auth_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_payload(user: User) -> dict:
    token = auth_service.create_access_token(user.user_id)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user)).model_dump(mode="json")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    user = auth_service.register(db, request)
    return api_response(_token_payload(user), "User registered successfully")


@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, request.email, request.password)
    return api_response(_token_payload(user), "Login successful")


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    return api_response(message="Logged out successfully")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return api_response({"user": UserOut.model_validate(current_user)})
