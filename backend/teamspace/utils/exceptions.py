"""도메인 예외 계층입니다. 서비스 레이어는 HTTPException 대신 아래 예외를 발생시킵니다."""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Request failed"

    def __init__(self, detail: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)
        self.errors = errors


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class ConflictError(AppError):
    # 중복 멤버십 등은 클라이언트 입력 오류로 취급한다.
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Conflicting state"


class UnexpectedError(AppError):
    # 저장소/연결 실패. 상세 원인은 로그에만 남기고 클라이언트에는 일반 메시지를 준다.
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Unexpected server error"
