"""FastAPI 애플리케이션 진입점. 미들웨어, 예외 핸들러, API 라우터, 백그라운드 작업을 등록합니다."""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamspace.config import settings
from teamspace.database import Base, engine
import teamspace.models  # noqa: F401 - 모델 import로 metadata 등록
from teamspace.routers import (
    auth, projects, tasks, comments, discussions, messages, notifications, users, teams,
)
from teamspace.services.scheduler import notification_reaper
from teamspace.utils.logging_config import setup_logging
from teamspace.utils.responses import (
    api_response,
    database_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)

setup_logging()

app = FastAPI(
    title="TeamSpace",
    description="팀 협업 / 프로젝트 관리 REST API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Register all routers
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(comments.router)
app.include_router(discussions.router)
app.include_router(messages.router)
app.include_router(notifications.router)
app.include_router(users.router)
app.include_router(teams.router)


@app.on_event("startup")
def ensure_schema():
    # 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.on_event("startup")
def start_background_jobs():
    if settings.NOTIFICATION_REAPER_ENABLED:
        notification_reaper.start()


@app.on_event("shutdown")
def stop_background_jobs():
    notification_reaper.stop()


@app.get("/api/health")
def health_check():
    return api_response({
        "status": "ok",
        "service": "TeamSpace",
        "env": settings.APP_ENV,
        "notification_reaper": notification_reaper.status(),
    })
