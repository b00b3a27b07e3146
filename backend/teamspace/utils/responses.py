"""API 응답 envelope({success, message, data, errors})을 만드는 헬퍼입니다."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamspace.utils.exceptions import UnexpectedError

logger = logging.getLogger(__name__)


def api_response(data: Optional[Dict[str, Any]] = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error,"):
            msg = msg.replace("Value error,", "", 1).strip()
        errors.append({"field": ".".join(loc) or None, "message": msg})
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return error_response(
        exc.status_code,
        str(exc.detail),
        errors=getattr(exc, "errors", None),
        headers=getattr(exc, "headers", None),
    )


def _unexpected() -> JSONResponse:
    err = UnexpectedError()
    return error_response(err.status_code, err.detail)


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return _unexpected()


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _unexpected()
