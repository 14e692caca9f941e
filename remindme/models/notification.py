# remindme/models/notification.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from sqlalchemy.sql import func

from remindme.database import Base


class Notification(Base):
    """A notification posted for a reminder, keyed by the reminder's notification id.

    Posting again with the same id replaces the previous notification, and cancelling
    marks it dismissed rather than deleting it so the cleanup job can purge it later.
    """
    __tablename__ = "notifications"

    notification_id = Column(Integer, primary_key=True, autoincrement=False)
    reminder_id = Column(String(36), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False, default="")
    is_dismissed = Column(Boolean, default=False, nullable=False)

    # Metadata
    posted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    dismissed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Notification(notification_id={self.notification_id}, reminder_id={self.reminder_id}, title='{self.title}')>"
