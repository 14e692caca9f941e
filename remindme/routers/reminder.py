# remindme/routers/reminder.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from remindme.dependencies import get_job_scheduler, get_notification_service, get_reminder_repo
from remindme.models import Reminder
from remindme.schemas import ReminderCreate, ReminderUpdate, ReminderOut
from remindme.services.notification_service import NotificationService
from remindme.services.reminder_repo import ReminderRepo
from remindme.services.scheduler import JobRequestScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["reminders"])


def _get_or_404(repo: ReminderRepo, reminder_id: str) -> Reminder:
    reminder = repo.get_reminder(reminder_id)
    if not reminder:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reminder not found"
        )
    return reminder


@router.get("/", response_model=List[ReminderOut])
def get_active_reminders(repo: ReminderRepo = Depends(get_reminder_repo)):
    """Get all active reminders, soonest first"""
    return repo.list_active_reminders()


@router.get("/{reminder_id}", response_model=ReminderOut)
def get_reminder(reminder_id: str, repo: ReminderRepo = Depends(get_reminder_repo)):
    """Get a specific reminder by ID"""
    return _get_or_404(repo, reminder_id)


@router.post("/", response_model=ReminderOut, status_code=status.HTTP_201_CREATED)
def create_reminder(
    reminder: ReminderCreate,
    repo: ReminderRepo = Depends(get_reminder_repo),
    scheduler: JobRequestScheduler = Depends(get_job_scheduler)
):
    """Create a reminder and schedule its notification"""
    db_reminder = repo.add_reminder(Reminder(
        title=reminder.title,
        body=reminder.body,
        time=reminder.time,
        recurrence=reminder.recurrence
    ))

    return scheduler.schedule_reminder(db_reminder)


@router.put("/{reminder_id}", response_model=ReminderOut)
def update_reminder(
    reminder_id: str,
    reminder_update: ReminderUpdate,
    repo: ReminderRepo = Depends(get_reminder_repo),
    scheduler: JobRequestScheduler = Depends(get_job_scheduler)
):
    """Update a reminder and move its job to the new time"""
    _get_or_404(repo, reminder_id)

    update_data = reminder_update.model_dump(exclude_unset=True)
    # Editing a reminder brings it back if it had already fired
    update_data["is_active"] = True
    if "time" in update_data:
        # A new time restarts the repeat cycle from that time
        update_data["start_time"] = update_data["time"]
    db_reminder = repo.update_reminder(reminder_id, update_data)

    return scheduler.schedule_reminder(db_reminder)


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: str,
    repo: ReminderRepo = Depends(get_reminder_repo),
    scheduler: JobRequestScheduler = Depends(get_job_scheduler),
    notifications: NotificationService = Depends(get_notification_service)
):
    """Delete a reminder along with its job and notification"""
    db_reminder = _get_or_404(repo, reminder_id)

    scheduler.cancel_job(db_reminder.external_id)
    repo.delete_reminder(db_reminder)
    await notifications.cancel(db_reminder.notification_id)

    return {"message": "Reminder deleted successfully"}


@router.delete("/")
async def delete_all_reminders(
    repo: ReminderRepo = Depends(get_reminder_repo),
    scheduler: JobRequestScheduler = Depends(get_job_scheduler),
    notifications: NotificationService = Depends(get_notification_service)
):
    """Delete every reminder, cancelling all jobs and notifications"""
    scheduler.cancel_all_jobs()
    count = repo.delete_all_reminders()
    await notifications.cancel_all()

    logger.info(f"Deleted {count} reminders through the API")
    return {"message": "All reminders deleted successfully", "deleted": count}
