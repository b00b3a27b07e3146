"""Projects 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from teamspace.config import settings
from teamspace.database import get_db
from teamspace.schemas.project import (
    ProjectCreate,
    ProjectDetailOut,
    ProjectMemberAdd,
    ProjectMemberOut,
    ProjectMemberRoleUpdate,
    ProjectOut,
    ProjectUpdate,
)
from teamspace.services import project_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
def list_projects(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    projects, pagination = project_service.get_projects(
        db, current_user, status=status, search=search, page=page, limit=limit
    )
    return api_response({
        "projects": [ProjectOut.model_validate(p) for p in projects],
        "pagination": pagination,
    })


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    project = project_service.get_project(db, project_id, current_user)
    return api_response({"project": ProjectDetailOut.model_validate(project)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(data: ProjectCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    project = project_service.create_project(db, data, current_user)
    return api_response({"project": ProjectOut.model_validate(project)}, "Project created successfully")


@router.put("/{project_id}")
def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = project_service.update_project(db, project_id, data, current_user)
    return api_response({"project": ProjectOut.model_validate(project)}, "Project updated successfully")


@router.delete("/{project_id}")
def delete_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    project_service.delete_project(db, project_id, current_user)
    return api_response(message="Project deleted successfully")


@router.get("/{project_id}/members")
def list_members(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    members = project_service.get_members(db, project_id, current_user)
    return api_response({"members": [ProjectMemberOut.model_validate(m) for m in members]})


@router.post("/{project_id}/members", status_code=status.HTTP_201_CREATED)
def add_member(
    project_id: int,
    data: ProjectMemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = project_service.add_member(db, project_id, data.user_id, data.role, current_user)
    return api_response({"member": ProjectMemberOut.model_validate(member)}, "Member added successfully")


@router.put("/{project_id}/members/{user_id}")
def update_member_role(
    project_id: int,
    user_id: int,
    data: ProjectMemberRoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = project_service.update_member_role(db, project_id, user_id, data.role, current_user)
    return api_response({"member": ProjectMemberOut.model_validate(member)}, "Member role updated successfully")


@router.delete("/{project_id}/members/{user_id}")
def remove_member(
    project_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project_service.remove_member(db, project_id, user_id, current_user)
    return api_response(message="Member removed successfully")
