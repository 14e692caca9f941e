from .reminder import ReminderCreate, ReminderUpdate, ReminderOut, RECURRENCE_VALUES
from .notification import NotificationOut
