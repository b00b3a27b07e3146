"""SQLAlchemy 엔진/세션 팩토리와 요청 단위 세션 의존성을 정의합니다."""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from teamspace.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
