"""Permissions 관련 공용 유틸리티 헬퍼입니다.

프로젝트 멤버십/관리자 판정의 단일 진입점입니다. 라우터와 서비스는 프로젝트와
그 하위 리소스(Task, Discussion, Comment, Message)에 접근하기 전에 반드시 이 모듈을
거칩니다.
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from teamspace.models.project import Project, ProjectMember
from teamspace.models.user import User
from teamspace.utils.exceptions import AuthorizationError, NotFoundError


SITE_ADMIN = "admin"

PROJECT_ADMIN = "admin"
PROJECT_MEMBER = "member"
PROJECT_VIEWER = "viewer"
PROJECT_ROLES = (PROJECT_ADMIN, PROJECT_MEMBER, PROJECT_VIEWER)


def is_site_admin(user: User) -> bool:
    return user.role == SITE_ADMIN


def _roster_entry(project: Project, user_id: int) -> Optional[ProjectMember]:
    return next((m for m in project.members if m.user_id == user_id), None)


def member_role(project: Project, user_id: int) -> Optional[str]:
    entry = _roster_entry(project, user_id)
    return entry.role if entry else None


def is_member(project: Project, user_id: int) -> bool:
    if project.created_by == user_id:
        return True
    return _roster_entry(project, user_id) is not None


def is_admin(project: Project, user_id: int) -> bool:
    # 생성자라도 로스터에 admin으로 등록되어 있어야 관리자로 본다.
    return member_role(project, user_id) == PROJECT_ADMIN


def is_creator(project: Project, user_id: int) -> bool:
    return project.created_by == user_id


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    return project


def require_membership(db: Session, project_id: int, user: User) -> Project:
    project = get_project_or_404(db, project_id)
    if not is_member(project, user.user_id):
        raise AuthorizationError("Access denied to project")
    return project


def require_admin(project: Project, user: User, detail: str = "Insufficient permissions"):
    if not is_admin(project, user.user_id):
        raise AuthorizationError(detail)


def require_admin_or_creator(project: Project, user: User):
    if is_creator(project, user.user_id) or is_admin(project, user.user_id):
        return
    raise AuthorizationError("Insufficient permissions")


def require_creator(project: Project, user: User, detail: str = "Only project creator can perform this action"):
    if not is_creator(project, user.user_id):
        raise AuthorizationError(detail)


def require_contributor(project: Project, user: User):
    # viewer 역할 멤버는 읽기 전용이다. 생성자는 역할과 무관하게 쓰기 가능.
    if is_creator(project, user.user_id):
        return
    if member_role(project, user.user_id) == PROJECT_VIEWER:
        raise AuthorizationError("Viewers cannot modify project content")


def can_delete_task(project: Project, task_created_by: int, user: User) -> bool:
    return task_created_by == user.user_id or is_admin(project, user.user_id)


def accessible_project_ids(db: Session, user: User) -> List[int]:
    member_project_ids = db.query(ProjectMember.project_id).filter(ProjectMember.user_id == user.user_id)
    rows = (
        db.query(Project.project_id)
        .filter(or_(Project.created_by == user.user_id, Project.project_id.in_(member_project_ids)))
        .all()
    )
    return [row[0] for row in rows]


def require_self_or_site_admin(target_user_id: int, user: User):
    if user.user_id != target_user_id and not is_site_admin(user):
        raise AuthorizationError("Access denied")


def require_self(target_user_id: int, user: User, detail: str = "Can only update your own status"):
    if user.user_id != target_user_id:
        raise AuthorizationError(detail)
