# remindme/schemas/reminder.py
from pydantic import BaseModel, Field, validator
from datetime import datetime
from typing import Optional

from remindme.config.settings import Settings
from remindme.utils.recurrence import Recurrence

RECURRENCE_VALUES = [recurrence.value for recurrence in Recurrence]


def _validate_recurrence(v):
    if v not in RECURRENCE_VALUES:
        raise ValueError(f'Recurrence must be one of: {", ".join(RECURRENCE_VALUES)}')
    return v


def _to_scheduler_time(v):
    # Reminder times are stored naive, in the scheduler timezone
    if v is not None and v.tzinfo is not None:
        v = v.astimezone(Settings.get_timezone()).replace(tzinfo=None)
    return v


class ReminderBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    body: Optional[str] = None
    time: datetime
    recurrence: str = "NONE"

    @validator('recurrence')
    def validate_recurrence(cls, v):
        return _validate_recurrence(v)

    @validator('time')
    def normalize_time(cls, v):
        return _to_scheduler_time(v)


class ReminderCreate(ReminderBase):
    pass


class ReminderUpdate(BaseModel):
    # Omitted fields are left alone. Only body may be cleared with null, the rest are required columns
    title: str = Field(None, min_length=1, max_length=255)
    body: Optional[str] = None
    time: datetime = None
    recurrence: str = None

    @validator('recurrence')
    def validate_recurrence(cls, v):
        return _validate_recurrence(v)

    @validator('time')
    def normalize_time(cls, v):
        return _to_scheduler_time(v)


class ReminderOut(BaseModel):
    id: str
    title: str
    body: Optional[str] = None
    time: datetime
    start_time: Optional[datetime] = None
    recurrence: str
    external_id: Optional[str] = None
    notification_id: int
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
