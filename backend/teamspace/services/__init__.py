"""서비스 레이어 패키지 초기화 모듈입니다."""

from teamspace.services import (
    auth_service,
    notification_service,
    notification_dispatcher,
    project_service,
    task_service,
    comment_service,
    discussion_service,
    user_service,
    team_service,
)
