# remindme/dependencies.py
# FastAPI providers for the shared service instances, overridable in tests

from remindme.services.notification_service import NotificationService, notification_service
from remindme.services.reminder_repo import ReminderRepo, reminder_repo
from remindme.services.scheduler import JobRequestScheduler, job_scheduler


def get_reminder_repo() -> ReminderRepo:
    return reminder_repo


def get_job_scheduler() -> JobRequestScheduler:
    return job_scheduler


def get_notification_service() -> NotificationService:
    return notification_service
