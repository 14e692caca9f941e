# remindme/services/scheduler.py
"""
Job scheduler that fires reminder notifications at their trigger time
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from remindme.config.settings import Settings
from remindme.models import Reminder
from remindme.services.notification_service import notification_service
from remindme.services.reminder_repo import reminder_repo
from remindme.utils.recurrence import Recurrence, next_occurrence

logger = logging.getLogger(__name__)

REMINDER_JOB_PREFIX = "reminder-"
CLEANUP_JOB_ID = "cleanup_notifications"


class JobRequestScheduler:
    """Schedules one job per reminder, identified by the reminder's external id"""

    def __init__(self, repo, notifier, scheduler_factory=AsyncIOScheduler):
        self.repo = repo
        self.notifier = notifier
        self._scheduler_factory = scheduler_factory
        self.scheduler = None
        self.is_running = False

    @staticmethod
    def external_id_for(reminder: Reminder) -> str:
        return f"{REMINDER_JOB_PREFIX}{reminder.id}"

    def start(self):
        """Start the scheduler and restore jobs for every active reminder"""
        if self.is_running:
            logger.warning("Job scheduler already running")
            return

        # A fresh scheduler per start, the asyncio flavour binds to the loop it started on
        self.scheduler = self._scheduler_factory(
            timezone=Settings.SCHEDULER['timezone'],
            job_defaults={
                'misfire_grace_time': Settings.SCHEDULER['misfire_grace_seconds'],
                'coalesce': True
            }
        )

        # Purge dismissed notifications every day
        self.scheduler.add_job(
            self.cleanup_old_notifications,
            trigger=CronTrigger(hour=Settings.SCHEDULER['cleanup_hour'], minute=0),
            id=CLEANUP_JOB_ID,
            name='Cleanup Old Notifications',
            replace_existing=True
        )

        self.scheduler.start()
        self.is_running = True
        logger.info("Job scheduler started successfully")

        self.sync_jobs()

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Job scheduler stopped")

    @staticmethod
    def _now() -> datetime:
        # Reminder times are naive, in the scheduler timezone
        return datetime.now(Settings.get_timezone()).replace(tzinfo=None)

    @staticmethod
    def _next_time(reminder: Reminder, after: datetime) -> Optional[datetime]:
        # Counted from the first trigger time so month-end reminders don't drift after a short month
        return next_occurrence(reminder.start_time or reminder.time, reminder.recurrence, now=after)

    def schedule_reminder(self, reminder: Reminder) -> Reminder:
        """
        Schedule a stored reminder and record its external id.

        A reminder more than the misfire grace period in the past would never fire, so a
        repeating one moves to its next occurrence and a one-shot one is retired instead.
        Returns the reminder as stored afterwards.
        """
        now = self._now()
        grace = timedelta(seconds=Settings.SCHEDULER['misfire_grace_seconds'])

        if reminder.time < now - grace:
            if reminder.recurrence == Recurrence.NONE.value:
                logger.info(f"Reminder {reminder.id} was due at {reminder.time}, retiring it unfired")
                return self.repo.deactivate_reminder(reminder.id)
            reminder = self.repo.update_reminder(reminder.id, {"time": self._next_time(reminder, now)})

        external_id = self.schedule_job(reminder)
        if reminder.external_id != external_id:
            reminder = self.repo.set_external_id(reminder.id, external_id)
        return reminder

    def sync_jobs(self) -> int:
        """Schedule a job for every active reminder, jobs do not survive restarts"""
        count = 0
        for reminder in self.repo.list_active_reminders():
            if self.schedule_reminder(reminder).is_active:
                count += 1

        logger.info(f"Restored {count} reminder jobs")
        return count

    def schedule_job(self, reminder: Reminder) -> str:
        """Schedule (or reschedule) the job firing a reminder, returns its external id"""
        external_id = self.external_id_for(reminder)
        self.scheduler.add_job(
            self._run_reminder_job,
            trigger=DateTrigger(run_date=reminder.time, timezone=Settings.SCHEDULER['timezone']),
            args=[reminder.id],
            id=external_id,
            name=f"Reminder: {reminder.title}",
            replace_existing=True
        )
        logger.info(f"Scheduled job {external_id} for {reminder.time}")
        return external_id

    def cancel_job(self, external_id: Optional[str]) -> bool:
        """Cancel a reminder's job, returns False when there was nothing to cancel"""
        if not external_id:
            return False
        try:
            self.scheduler.remove_job(external_id)
        except JobLookupError:
            # Already fired, or never scheduled
            logger.info(f"No job {external_id} to cancel")
            return False

        logger.info(f"Cancelled job {external_id}")
        return True

    def cancel_all_jobs(self) -> int:
        """Cancel every reminder job, maintenance jobs are left alone"""
        count = 0
        for job in self.scheduler.get_jobs():
            if job.id.startswith(REMINDER_JOB_PREFIX):
                job.remove()
                count += 1

        logger.info(f"Cancelled {count} reminder jobs")
        return count

    async def _run_reminder_job(self, reminder_id: str):
        """Post a reminder's notification, then reschedule or retire the reminder"""
        try:
            reminder = self.repo.get_reminder(reminder_id)
            if reminder is None or not reminder.is_active:
                logger.warning(f"Reminder {reminder_id} fired but is gone or inactive, skipping")
                return

            logger.info(f"Firing reminder {reminder_id}: {reminder.title}")
            await self.notifier.notify(reminder)

            next_time = self._next_time(reminder, max(self._now(), reminder.time))
            if next_time is None:
                self.repo.deactivate_reminder(reminder_id)
                logger.info(f"Reminder {reminder_id} completed")
            else:
                reminder = self.repo.update_reminder(reminder_id, {"time": next_time})
                self.schedule_job(reminder)
                logger.info(f"Reminder {reminder_id} repeats {Recurrence(reminder.recurrence).value.lower()}, next at {next_time}")

        except Exception as e:
            logger.exception(f"Error running reminder job {reminder_id}: {e}")

    async def cleanup_old_notifications(self):
        """Clean up old notifications"""
        try:
            logger.info("Cleaning up old notifications...")
            self.notifier.purge_dismissed(Settings.SCHEDULER['notification_retention_days'])
        except Exception as e:
            logger.error(f"Error cleaning up notifications: {e}")

    async def get_scheduler_status(self) -> Dict[str, Any]:
        """Get scheduler status and job information"""
        if not self.is_running:
            return {"status": "stopped", "jobs": []}

        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger)
            })

        return {
            "status": "running",
            "jobs": jobs
        }


# Global scheduler instance
job_scheduler = JobRequestScheduler(reminder_repo, notification_service)
