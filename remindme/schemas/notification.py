# remindme/schemas/notification.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class NotificationOut(BaseModel):
    notification_id: int
    reminder_id: Optional[str] = None
    title: str
    message: str
    is_dismissed: bool
    posted_at: datetime
    dismissed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
