"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./teamspace.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    APP_ENV: str = "development"  # development/test/production
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    NOTIFICATION_PAGE_SIZE: int = 20

    # Notifications
    NOTIFICATION_TTL_DAYS: int = 30
    NOTIFICATION_REAPER_ENABLED: bool = True
    NOTIFICATION_REAPER_INTERVAL_MINUTES: int = 60
    # 완료 알림 중복 방지: 실제 상태 전이(→ completed)에서만 발송
    DEDUPLICATE_TASK_COMPLETED: bool = True

    @property
    def is_production(self) -> bool:
        return str(self.APP_ENV or "").strip().lower() == "production"

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
