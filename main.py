from fastapi import Depends, FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
import logging

from remindme.config.settings import Settings
from remindme.database import create_all_tables
from remindme.dependencies import get_job_scheduler, get_notification_service, get_reminder_repo
from remindme.routers import reminder, notification
from remindme.services.notification_service import NotificationService
from remindme.services.reminder_repo import ReminderRepo
from remindme.services.scheduler import JobRequestScheduler, job_scheduler
from remindme.services.websocket_manager import websocket_manager
from remindme.viewmodels.reminder_list import ReminderListViewModel
from remindme.views.reminder_list_session import ReminderListSession


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, Settings.LOGGING['level'], logging.INFO),
        format=Settings.LOGGING['format']
    )


configure_logging()
logger = logging.getLogger("remindme")

app = FastAPI(title="RemindMe API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route registration
app.include_router(reminder.router, tags=["Reminders"])
app.include_router(notification.router, tags=["Notifications"])


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Create tables and start the job scheduler when the application starts"""
    logger.info("Starting RemindMe API...")
    if Settings.DATABASE['auto_create_tables']:
        create_all_tables()
    job_scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the job scheduler when the application shuts down"""
    logger.info("Shutting down RemindMe API...")
    job_scheduler.stop()


# Root route
@app.get("/")
def read_root():
    return {"message": "RemindMe API"}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/scheduler/status")
async def get_scheduler_status():
    """Get scheduler status and job information"""
    return await job_scheduler.get_scheduler_status()


# WebSocket endpoint serving the reminder list screen
@app.websocket("/ws/reminders")
async def reminder_list_websocket(
    websocket: WebSocket,
    repo: ReminderRepo = Depends(get_reminder_repo),
    scheduler: JobRequestScheduler = Depends(get_job_scheduler),
    notifications: NotificationService = Depends(get_notification_service)
):
    await websocket.accept()

    # One view-model per connected screen
    view_model = ReminderListViewModel(repo, scheduler)
    session = ReminderListSession(websocket, view_model, notifications, websocket_manager)
    await session.run()
