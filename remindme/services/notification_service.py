import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from remindme.database import SessionLocal
from remindme.models import Notification, Reminder
from remindme.schemas import NotificationOut
from remindme.services.websocket_manager import WebSocketManager, websocket_manager

logger = logging.getLogger(__name__)


class NotificationService:
    """Posts and clears reminder notifications and pushes them to connected clients"""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        manager: WebSocketManager = websocket_manager
    ):
        self._session_factory = session_factory
        self._manager = manager

    async def notify(self, reminder: Reminder) -> Notification:
        """Post the notification for a reminder, replacing any previous one with the same id"""
        db = self._session_factory()
        try:
            notification = db.merge(Notification(
                notification_id=reminder.notification_id,
                reminder_id=reminder.id,
                title=reminder.title,
                message=reminder.body or "",
                is_dismissed=False,
                posted_at=datetime.utcnow(),
                dismissed_at=None
            ))
            db.commit()
            db.refresh(notification)
            payload = NotificationOut.model_validate(notification).model_dump(mode="json")
        except Exception as e:
            logger.error(f"Error posting notification for reminder {reminder.id}: {e}")
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Posted notification {reminder.notification_id} for reminder {reminder.id}")
        await self._manager.broadcast_to_all({"type": "notification", "data": payload})
        return notification

    async def cancel(self, notification_id: int) -> bool:
        """Dismiss one posted notification"""
        db = self._session_factory()
        try:
            count = (
                db.query(Notification)
                .filter(
                    Notification.notification_id == notification_id,
                    Notification.is_dismissed == False  # noqa: E712
                )
                .update({"is_dismissed": True, "dismissed_at": datetime.utcnow()}, synchronize_session=False)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Cancelled notification {notification_id} ({count} dismissed)")
        await self._manager.broadcast_to_all({"type": "notification_cleared", "notification_id": notification_id})
        return count > 0

    async def cancel_all(self) -> int:
        """Dismiss every posted notification"""
        db = self._session_factory()
        try:
            count = (
                db.query(Notification)
                .filter(Notification.is_dismissed == False)  # noqa: E712
                .update({"is_dismissed": True, "dismissed_at": datetime.utcnow()}, synchronize_session=False)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Cancelled all notifications ({count} dismissed)")
        await self._manager.broadcast_to_all({"type": "notification_cleared", "notification_id": None})
        return count

    def list_posted(self) -> List[Notification]:
        db = self._session_factory()
        try:
            return (
                db.query(Notification)
                .filter(Notification.is_dismissed == False)  # noqa: E712
                .order_by(Notification.posted_at.desc())
                .all()
            )
        finally:
            db.close()

    def get_notification(self, notification_id: int) -> Optional[Notification]:
        db = self._session_factory()
        try:
            return db.query(Notification).filter(Notification.notification_id == notification_id).first()
        finally:
            db.close()

    def purge_dismissed(self, older_than_days: int) -> int:
        """Delete notifications dismissed more than older_than_days ago"""
        cutoff_date = datetime.utcnow() - timedelta(days=older_than_days)
        db = self._session_factory()
        try:
            count = (
                db.query(Notification)
                .filter(
                    Notification.is_dismissed == True,  # noqa: E712
                    Notification.dismissed_at < cutoff_date
                )
                .delete(synchronize_session=False)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Purged {count} dismissed notifications")
        return count


# Global instance
notification_service = NotificationService()
