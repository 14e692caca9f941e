# remindme/models/reminder.py
import random
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text

from remindme.database import Base


def new_reminder_id() -> str:
    return str(uuid.uuid4())


def new_notification_id() -> int:
    # Positive 31-bit value so it survives clients that treat ids as signed ints
    return random.randint(1, 2 ** 31 - 1)


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(String(36), primary_key=True, index=True, default=new_reminder_id)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)
    time = Column(DateTime, nullable=False, index=True)  # Naive, in the scheduler timezone
    # First trigger time, repeating reminders count their occurrences from it
    start_time = Column(DateTime, nullable=True)
    recurrence = Column(String(16), nullable=False, default="NONE")  # NONE, DAILY, WEEKLY, MONTHLY, YEARLY

    # Scheduler job backing this reminder, set once the job is scheduled
    external_id = Column(String(64), nullable=True, unique=True)
    notification_id = Column(Integer, nullable=False, unique=True, default=new_notification_id)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # System dates
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Reminder(id={self.id}, title='{self.title}', time={self.time}, recurrence='{self.recurrence}')>"
