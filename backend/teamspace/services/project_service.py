"""Project Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from teamspace.models.discussion import Discussion, Message
from teamspace.models.project import Project, ProjectMember
from teamspace.models.task import Task, Comment
from teamspace.models.user import User
from teamspace.schemas.project import ProjectCreate, ProjectUpdate
from teamspace.services import notification_dispatcher
from teamspace.utils.codename import generate_codename
from teamspace.utils.exceptions import ConflictError, NotFoundError, ValidationError
from teamspace.utils.helpers import is_all, like_pattern
from teamspace.utils.pagination import paginate
from teamspace.utils import permissions

logger = logging.getLogger(__name__)


def _attach_counts(db: Session, projects: List[Project]) -> List[Project]:
    ids = [p.project_id for p in projects]
    counts: Dict[int, int] = {}
    if ids:
        counts = dict(
            db.query(Task.project_id, func.count(Task.task_id))
            .filter(Task.project_id.in_(ids))
            .group_by(Task.project_id)
            .all()
        )
    for p in projects:
        p.task_count = counts.get(p.project_id, 0)
    return projects


def get_projects(
    db: Session,
    current_user: User,
    *,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Project], Dict[str, int]]:
    member_project_ids = db.query(ProjectMember.project_id).filter(ProjectMember.user_id == current_user.user_id)
    q = db.query(Project).filter(
        or_(Project.created_by == current_user.user_id, Project.project_id.in_(member_project_ids))
    )
    if not is_all(status):
        q = q.filter(Project.status == status)
    pattern = like_pattern(search)
    if pattern:
        q = q.filter(
            or_(
                Project.name.ilike(pattern, escape="\\"),
                Project.description.ilike(pattern, escape="\\"),
                Project.codename.ilike(pattern, escape="\\"),
            )
        )
    q = q.order_by(Project.created_at.desc(), Project.project_id.desc())
    items, meta = paginate(q, page, limit)
    return _attach_counts(db, items), meta


def get_project(db: Session, project_id: int, current_user: User) -> Project:
    project = permissions.require_membership(db, project_id, current_user)
    project.tasks = (
        db.query(Task)
        .filter(Task.project_id == project_id)
        .order_by(Task.created_at.desc(), Task.task_id.desc())
        .all()
    )
    project.task_count = len(project.tasks)
    project.discussion_count = db.query(Discussion).filter(Discussion.project_id == project_id).count()
    return project


def create_project(db: Session, data: ProjectCreate, current_user: User) -> Project:
    project = Project(
        name=data.name,
        codename=generate_codename(),
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
        color=data.color,
        tags=list(data.tags),
        created_by=current_user.user_id,
    )
    db.add(project)
    db.flush()
    # 생성자는 유일한 admin 멤버로 시작한다.
    db.add(ProjectMember(project_id=project.project_id, user_id=current_user.user_id, role=permissions.PROJECT_ADMIN))
    db.commit()
    db.refresh(project)
    project.task_count = 0
    return project


def update_project(db: Session, project_id: int, data: ProjectUpdate, current_user: User) -> Project:
    project = permissions.get_project_or_404(db, project_id)
    permissions.require_admin_or_creator(project, current_user)

    changes = data.model_dump(exclude_unset=True)
    for key in ("name", "description", "status", "progress", "start_date", "color", "tags"):
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be null")

    start_date = changes.get("start_date", project.start_date)
    end_date = changes.get("end_date", project.end_date)
    if end_date is not None and end_date <= start_date:
        raise ValidationError("End date must be after start date")

    for key, value in changes.items():
        setattr(project, key, value)
    db.commit()
    db.refresh(project)
    return _attach_counts(db, [project])[0]


def delete_project(db: Session, project_id: int, current_user: User):
    project = permissions.get_project_or_404(db, project_id)
    permissions.require_creator(project, current_user, "Only project creator can delete project")

    task_ids = db.query(Task.task_id).filter(Task.project_id == project_id)
    discussion_ids = db.query(Discussion.discussion_id).filter(Discussion.project_id == project_id)

    # 자식 -> 부모 순서로 삭제한다. 단계별 커밋이므로 중간 실패 시 부분 삭제가 남을 수 있다.
    comments = db.query(Comment).filter(Comment.task_id.in_(task_ids)).delete(synchronize_session=False)
    tasks = db.query(Task).filter(Task.project_id == project_id).delete(synchronize_session=False)
    db.commit()
    messages = db.query(Message).filter(Message.discussion_id.in_(discussion_ids)).delete(synchronize_session=False)
    discussions = db.query(Discussion).filter(Discussion.project_id == project_id)
    discussion_count = 0
    for discussion in discussions.all():
        db.delete(discussion)
        discussion_count += 1
    db.commit()
    db.delete(project)
    db.commit()
    logger.info(
        "Deleted project %s (tasks=%s comments=%s discussions=%s messages=%s)",
        project_id, tasks, comments, discussion_count, messages,
    )


def get_members(db: Session, project_id: int, current_user: User) -> List[ProjectMember]:
    project = permissions.require_membership(db, project_id, current_user)
    return list(project.members)


def add_member(db: Session, project_id: int, user_id: int, role: str, current_user: User) -> ProjectMember:
    project = permissions.get_project_or_404(db, project_id)
    permissions.require_admin(project, current_user, "Only project admins can add members")

    target = db.query(User).filter(User.user_id == user_id).first()
    if not target:
        raise NotFoundError("User not found")
    if permissions.member_role(project, user_id) is not None:
        raise ConflictError("User is already a member")

    member = ProjectMember(project_id=project_id, user_id=user_id, role=role)
    db.add(member)
    db.commit()
    db.refresh(member)

    notification_dispatcher.team_invite(db, project, user_id, current_user)
    return member


def _get_member_row(db: Session, project_id: int, user_id: int) -> ProjectMember:
    member = (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )
    if not member:
        raise NotFoundError("User is not a member of this project")
    return member


def update_member_role(db: Session, project_id: int, user_id: int, role: str, current_user: User) -> ProjectMember:
    project = permissions.get_project_or_404(db, project_id)
    permissions.require_admin(project, current_user, "Only project admins can change member roles")
    member = _get_member_row(db, project_id, user_id)

    previous = member.role
    member.role = role
    db.commit()
    db.refresh(member)

    if previous != role and user_id != current_user.user_id:
        notification_dispatcher.team_role_change(db, project, user_id, role, current_user)
    return member


def remove_member(db: Session, project_id: int, user_id: int, current_user: User):
    project = permissions.get_project_or_404(db, project_id)
    permissions.require_admin(project, current_user, "Only project admins can remove members")
    member = _get_member_row(db, project_id, user_id)

    db.query(Task).filter(Task.project_id == project_id, Task.assigned_to == user_id).update(
        {"assigned_to": None}, synchronize_session=False
    )
    db.delete(member)
    db.commit()
