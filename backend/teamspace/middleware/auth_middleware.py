"""Bearer 토큰으로 현재 사용자를 식별하는 인증 의존성입니다."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from teamspace.database import get_db
from teamspace.models.user import User
from teamspace.config import settings
from teamspace.services.auth_service import ALGORITHM

# 헤더 누락도 403이 아닌 401로 응답하기 위해 auto_error를 끈다.
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")


def _subject_id(payload: dict) -> int:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token payload")


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthorized("Not authenticated")
    user_id = _subject_id(decode_token(credentials.credentials))

    user = db.query(User).filter(User.user_id == user_id, User.is_active == True).first()
    if not user:
        raise _unauthorized("User not found or inactive")
    return user


def require_roles(*roles: str):
    """사이트 역할(admin/member/viewer) 기반 접근 제어 의존성을 만든다."""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker
