"""Task Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from teamspace.models.project import Project
from teamspace.models.task import Task, Comment
from teamspace.models.user import User
from teamspace.schemas.task import CommentCreate, TaskCreate, TaskUpdate
from teamspace.services import notification_dispatcher
from teamspace.utils import permissions
from teamspace.utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from teamspace.utils.helpers import is_all, like_pattern, unique_ids, utcnow
from teamspace.utils.pagination import paginate


def _validate_assignee_in_project(project: Project, assigned_to: Optional[int]):
    if assigned_to is None:
        return
    if not permissions.is_member(project, assigned_to):
        raise ValidationError("Assignee must be a member of the project")


def _validate_dependencies(db: Session, project_id: int, dependencies: List[int], task_id: Optional[int] = None) -> List[int]:
    deps = unique_ids(dependencies)
    if task_id is not None and task_id in deps:
        raise ValidationError("A task cannot depend on itself")
    if not deps:
        return []
    found = {
        row[0]
        for row in db.query(Task.task_id).filter(Task.task_id.in_(deps), Task.project_id == project_id).all()
    }
    if len(found) != len(deps):
        raise ValidationError("Dependencies must be tasks in the same project")
    return deps


def get_tasks(
    db: Session,
    current_user: User,
    *,
    project_id: Optional[int] = None,
    status: Optional[str] = None,
    assigned_to: Optional[int] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Task], Dict[str, int]]:
    q = db.query(Task)
    if project_id is not None:
        permissions.require_membership(db, project_id, current_user)
        q = q.filter(Task.project_id == project_id)
    else:
        q = q.filter(Task.project_id.in_(permissions.accessible_project_ids(db, current_user)))
    if not is_all(status):
        q = q.filter(Task.status == status)
    if assigned_to is not None:
        q = q.filter(Task.assigned_to == assigned_to)
    if not is_all(priority):
        q = q.filter(Task.priority == priority)
    pattern = like_pattern(search)
    if pattern:
        q = q.filter(or_(Task.title.ilike(pattern, escape="\\"), Task.description.ilike(pattern, escape="\\")))
    q = q.order_by(Task.created_at.desc(), Task.task_id.desc())
    return paginate(q, page, limit)


def _get_task_with_project(db: Session, task_id: int, current_user: User) -> Tuple[Task, Project]:
    task = db.query(Task).filter(Task.task_id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    project = permissions.require_membership(db, task.project_id, current_user)
    return task, project


def get_task(db: Session, task_id: int, current_user: User) -> Task:
    task, _ = _get_task_with_project(db, task_id, current_user)
    task.comments = (
        db.query(Comment)
        .filter(Comment.task_id == task_id)
        .order_by(Comment.created_at.asc(), Comment.comment_id.asc())
        .all()
    )
    return task


def create_task(db: Session, data: TaskCreate, current_user: User) -> Task:
    project = permissions.require_membership(db, data.project_id, current_user)
    permissions.require_contributor(project, current_user)
    _validate_assignee_in_project(project, data.assigned_to)
    dependencies = _validate_dependencies(db, project.project_id, data.dependencies)

    task = Task(
        project_id=project.project_id,
        title=data.title,
        description=data.description,
        assigned_to=data.assigned_to,
        priority=data.priority,
        due_date=data.due_date,
        tags=list(data.tags),
        estimated_hours=data.estimated_hours,
        dependencies=dependencies,
        created_by=current_user.user_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    notification_dispatcher.task_assigned(db, task, current_user)
    return task


def update_task(db: Session, task_id: int, data: TaskUpdate, current_user: User) -> Task:
    task, project = _get_task_with_project(db, task_id, current_user)
    permissions.require_contributor(project, current_user)

    updates = data.model_dump(exclude_unset=True)
    for key in ("title", "status", "priority", "tags", "actual_hours", "dependencies"):
        if key in updates and updates[key] is None:
            raise ValidationError(f"{key} cannot be null")

    if "assigned_to" in updates:
        _validate_assignee_in_project(project, updates["assigned_to"])
    if "dependencies" in updates:
        updates["dependencies"] = _validate_dependencies(db, task.project_id, updates["dependencies"], task.task_id)
    if updates.get("due_date") is not None and task.created_at and updates["due_date"] <= task.created_at:
        raise ValidationError("Due date must be after the task creation time")

    previous_status = task.status
    previous_assignee = task.assigned_to
    new_status = updates.get("status", previous_status)

    if new_status == "completed" and previous_status != "completed":
        updates["completed_at"] = utcnow()
        estimated = updates.get("estimated_hours", task.estimated_hours)
        actual = updates.get("actual_hours", task.actual_hours)
        if not actual and estimated:
            updates["actual_hours"] = estimated
    elif "status" in updates and new_status != "completed":
        updates["completed_at"] = None

    for k, v in updates.items():
        setattr(task, k, v)
    db.commit()
    db.refresh(task)

    if "assigned_to" in updates and task.assigned_to != previous_assignee:
        notification_dispatcher.task_assigned(db, task, current_user)
    if "status" in updates and notification_dispatcher.should_notify_completion(previous_status, new_status):
        notification_dispatcher.task_completed(db, task, current_user, previous_assignee)
    return task


def delete_task(db: Session, task_id: int, current_user: User):
    task, project = _get_task_with_project(db, task_id, current_user)
    if not permissions.can_delete_task(project, task.created_by, current_user):
        raise AuthorizationError("Only the task creator or a project admin can delete this task")
    db.query(Comment).filter(Comment.task_id == task_id).delete(synchronize_session=False)
    db.delete(task)
    db.commit()


def add_comment(db: Session, task_id: int, data: CommentCreate, current_user: User) -> Comment:
    task, _ = _get_task_with_project(db, task_id, current_user)
    if data.parent_id is not None:
        parent = db.query(Comment).filter(Comment.comment_id == data.parent_id).first()
        if not parent or parent.task_id != task.task_id:
            raise ValidationError("Parent comment must belong to the same task")
    comment = Comment(
        task_id=task.task_id,
        author_id=current_user.user_id,
        parent_id=data.parent_id,
        content=data.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def add_subtask(db: Session, task_id: int, title: str, current_user: User) -> Task:
    task, project = _get_task_with_project(db, task_id, current_user)
    permissions.require_contributor(project, current_user)
    subtasks = list(task.subtasks or [])
    subtasks.append({"title": title, "completed": False, "created_at": utcnow().isoformat()})
    task.subtasks = subtasks
    db.commit()
    db.refresh(task)
    return task


def _subtask_index(task: Task, index: int) -> int:
    if index < 0 or index >= len(task.subtasks or []):
        raise NotFoundError("Subtask not found")
    return index


def toggle_subtask(db: Session, task_id: int, index: int, current_user: User) -> Task:
    task, project = _get_task_with_project(db, task_id, current_user)
    permissions.require_contributor(project, current_user)
    index = _subtask_index(task, index)
    subtasks = [dict(item) for item in task.subtasks]
    subtasks[index]["completed"] = not bool(subtasks[index].get("completed"))
    task.subtasks = subtasks
    db.commit()
    db.refresh(task)
    return task


def delete_subtask(db: Session, task_id: int, index: int, current_user: User) -> Task:
    task, project = _get_task_with_project(db, task_id, current_user)
    permissions.require_contributor(project, current_user)
    index = _subtask_index(task, index)
    task.subtasks = [item for i, item in enumerate(task.subtasks) if i != index]
    db.commit()
    db.refresh(task)
    return task


def watch_task(db: Session, task_id: int, current_user: User) -> Task:
    task, _ = _get_task_with_project(db, task_id, current_user)
    if current_user.user_id not in (task.watchers or []):
        task.watchers = list(task.watchers or []) + [current_user.user_id]
        db.commit()
        db.refresh(task)
    return task


def unwatch_task(db: Session, task_id: int, current_user: User) -> Task:
    task, _ = _get_task_with_project(db, task_id, current_user)
    if current_user.user_id in (task.watchers or []):
        task.watchers = [uid for uid in task.watchers if uid != current_user.user_id]
        db.commit()
        db.refresh(task)
    return task
