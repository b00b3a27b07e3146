"""Team Service 도메인 서비스 레이어입니다. 팀원 디렉터리와 팀 통계를 제공합니다."""

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from teamspace.models.project import Project
from teamspace.models.user import User
from teamspace.services.user_service import search_users
from teamspace.utils.helpers import is_all


def get_team_members(
    db: Session,
    *,
    search: Optional[str] = None,
    role: Optional[str] = None,
    status: Optional[str] = None,
) -> List[User]:
    q = search_users(db.query(User), search)
    if not is_all(role):
        q = q.filter(User.role == role)
    if not is_all(status):
        q = q.filter(User.status == status)
    return q.order_by(User.created_at.desc(), User.user_id.desc()).all()


def get_team_stats(db: Session) -> Dict[str, Any]:
    departments = (
        db.query(func.count(func.distinct(User.department)))
        .filter(User.department.isnot(None), User.department != "")
        .scalar()
    )
    return {
        "total_members": db.query(User).count(),
        "active_members": db.query(User).filter(User.status == "active").count(),
        "admin_count": db.query(User).filter(User.role == "admin").count(),
        "total_projects": db.query(Project).count(),
        "departments": departments or 0,
    }
