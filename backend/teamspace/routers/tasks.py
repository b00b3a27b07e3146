"""Tasks 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from teamspace.config import settings
from teamspace.database import get_db
from teamspace.schemas.task import (
    CommentCreate,
    CommentOut,
    SubtaskCreate,
    TaskCreate,
    TaskDetailOut,
    TaskOut,
    TaskUpdate,
)
from teamspace.services import task_service
from teamspace.middleware.auth_middleware import get_current_user
from teamspace.models.user import User
from teamspace.utils.responses import api_response

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _task(task) -> dict:
    return {"task": TaskOut.model_validate(task)}


@router.get("")
def list_tasks(
    project_id: Optional[int] = None,
    status: Optional[str] = None,
    assigned_to: Optional[int] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tasks, pagination = task_service.get_tasks(
        db,
        current_user,
        project_id=project_id,
        status=status,
        assigned_to=assigned_to,
        priority=priority,
        search=search,
        page=page,
        limit=limit,
    )
    return api_response({"tasks": [TaskOut.model_validate(t) for t in tasks], "pagination": pagination})


@router.get("/{task_id}")
def get_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task = task_service.get_task(db, task_id, current_user)
    return api_response({"task": TaskDetailOut.model_validate(task)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(data: TaskCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task = task_service.create_task(db, data, current_user)
    return api_response(_task(task), "Task created successfully")


@router.put("/{task_id}")
def update_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.update_task(db, task_id, data, current_user)
    return api_response(_task(task), "Task updated successfully")


@router.delete("/{task_id}")
def delete_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task_service.delete_task(db, task_id, current_user)
    return api_response(message="Task deleted successfully")


@router.post("/{task_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    task_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = task_service.add_comment(db, task_id, data, current_user)
    return api_response({"comment": CommentOut.model_validate(comment)}, "Comment added successfully")


@router.post("/{task_id}/subtasks", status_code=status.HTTP_201_CREATED)
def add_subtask(
    task_id: int,
    data: SubtaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.add_subtask(db, task_id, data.title, current_user)
    return api_response(_task(task), "Subtask added successfully")


@router.put("/{task_id}/subtasks/{index}/toggle")
def toggle_subtask(
    task_id: int,
    index: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.toggle_subtask(db, task_id, index, current_user)
    return api_response(_task(task))


@router.delete("/{task_id}/subtasks/{index}")
def delete_subtask(
    task_id: int,
    index: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.delete_subtask(db, task_id, index, current_user)
    return api_response(_task(task), "Subtask deleted successfully")


@router.post("/{task_id}/watch")
def watch_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task = task_service.watch_task(db, task_id, current_user)
    return api_response(_task(task))


@router.delete("/{task_id}/watch")
def unwatch_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    task = task_service.unwatch_task(db, task_id, current_user)
    return api_response(_task(task))
