from .reminder import Reminder
from .notification import Notification
