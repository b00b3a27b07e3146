import os

os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["NOTIFICATION_REAPER_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///./test_teamspace.db"

import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from teamspace.database import Base, get_db
from teamspace.main import app
from teamspace.models.user import User
from teamspace.models.project import Project, ProjectMember
from teamspace.services.auth_service import hash_password

TEST_DB_URL = "sqlite:///./test_teamspace.db"
PASSWORD = "secret123"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    password_hash = hash_password(PASSWORD)
    users = {
        "admin": User(name="Site Admin", email="admin@example.com", role="admin", department="Ops",
                      password_hash=password_hash),
        "alice": User(name="Alice", email="alice@example.com", department="Engineering",
                      password_hash=password_hash),
        "bob": User(name="Bob", email="bob@example.com", department="Engineering",
                    password_hash=password_hash),
        "carol": User(name="Carol", email="carol@example.com", department="Design",
                      password_hash=password_hash),
        "dave": User(name="Dave", email="dave@example.com", password_hash=password_hash),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_project(db, seed_users):
    """alice(admin, 생성자) / bob(member) / carol(viewer) 로스터를 가진 프로젝트."""
    project = Project(
        name="Apollo",
        codename="Silent Orbit",
        description="Launch the new platform",
        start_date=date(2026, 1, 1),
        end_date=date(2026, 12, 31),
        created_by=seed_users["alice"].user_id,
    )
    db.add(project)
    db.flush()
    db.add_all([
        ProjectMember(project_id=project.project_id, user_id=seed_users["alice"].user_id, role="admin"),
        ProjectMember(project_id=project.project_id, user_id=seed_users["bob"].user_id, role="member"),
        ProjectMember(project_id=project.project_id, user_id=seed_users["carol"].user_id, role="viewer"),
    ])
    db.commit()
    db.refresh(project)
    return project


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
