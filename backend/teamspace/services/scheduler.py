"""만료 알림 정리(reaper) 작업을 주기적으로 실행하는 스케줄러입니다."""

import logging
from typing import Any, Dict

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from teamspace.config import settings
from teamspace.database import SessionLocal
from teamspace.services import notification_service

logger = logging.getLogger(__name__)

REAPER_JOB_ID = "purge_expired_notifications"


def purge_expired_notifications() -> int:
    db = SessionLocal()
    try:
        return notification_service.purge_expired(db)
    except Exception:
        db.rollback()
        logger.exception("Expired notification sweep failed")
        return 0
    finally:
        db.close()


class NotificationReaper:
    """만료된 알림을 주기적으로 삭제하는 백그라운드 작업입니다.

    재시도 없는 수동적 sweep이며, 누락된 실행은 다음 주기에 자연히 보정됩니다.
    """

    def __init__(self, interval_minutes: int | None = None):
        self.interval_minutes = interval_minutes or settings.NOTIFICATION_REAPER_INTERVAL_MINUTES
        self.scheduler = BackgroundScheduler(timezone="UTC")
        self.is_running = False

    def start(self):
        if self.is_running:
            return
        self.scheduler.add_job(
            purge_expired_notifications,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=REAPER_JOB_ID,
            name="Purge Expired Notifications",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self.scheduler.start()
        self.is_running = True
        logger.info("Notification reaper started (every %s min)", self.interval_minutes)

    def stop(self):
        if not self.is_running:
            return
        self.scheduler.shutdown(wait=False)
        self.is_running = False
        logger.info("Notification reaper stopped")

    def status(self) -> Dict[str, Any]:
        if not self.is_running:
            return {"status": "stopped", "jobs": []}
        jobs = [
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in self.scheduler.get_jobs()
        ]
        return {"status": "running", "jobs": jobs}


notification_reaper = NotificationReaper()
