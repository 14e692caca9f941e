# remindme/services/reminder_repo.py
"""
Reminder storage and the observable stream of active reminders
"""

import asyncio
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from remindme.database import SessionLocal
from remindme.models import Reminder

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by ReminderStream.subscribe, dispose() stops delivery"""

    def __init__(self, stream: "ReminderStream", task: asyncio.Task):
        self._stream = stream
        self._task = task

    @property
    def disposed(self) -> bool:
        return self._task.done()

    def dispose(self):
        self._stream.close()
        if not self._task.done():
            self._task.cancel()


class ReminderStream:
    """
    Re-emits the full list of active reminders whenever the repository changes.

    Queries run on a worker thread and results are delivered on the event loop that
    subscribed. Delivery is single-flight: changes arriving while a query is in progress
    are coalesced into one follow-up query. A failing query terminates the stream.
    """

    def __init__(self, repo: "ReminderRepo"):
        self._repo = repo
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._dirty: Optional[asyncio.Event] = None

    def subscribe(
        self,
        on_next: Callable[[List[Reminder]], Any],
        on_error: Optional[Callable[[Exception], Any]] = None
    ) -> Subscription:
        """Start delivering lists to on_next, must be called from a running event loop"""
        if self._loop is not None:
            raise RuntimeError("ReminderStream supports a single subscriber")

        self._loop = asyncio.get_running_loop()
        self._dirty = asyncio.Event()
        self._dirty.set()  # first emission right away
        self._repo._register(self)

        task = self._loop.create_task(self._run(on_next, on_error))
        return Subscription(self, task)

    def invalidate(self):
        """Mark the list stale, safe to call from any thread"""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(self._dirty.set)
        except RuntimeError:
            # Loop shut down between the check and the call
            pass

    def close(self):
        self._repo._unregister(self)

    async def _run(self, on_next, on_error):
        try:
            while True:
                await self._dirty.wait()
                self._dirty.clear()
                try:
                    reminders = await asyncio.to_thread(self._repo.list_active_reminders)
                except Exception as e:
                    if on_error is None:
                        logger.exception(f"Reminder stream query failed: {e}")
                    else:
                        on_error(e)
                    return

                try:
                    on_next(reminders)
                except Exception as e:
                    # A failing subscriber keeps its stream, the next change is delivered as usual
                    logger.exception(f"Reminder stream subscriber failed: {e}")
        finally:
            self.close()


class ReminderRepo:
    """Sole owner of persisted reminders"""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory
        self._streams = set()
        self._streams_lock = threading.Lock()

    # region streams
    def get_active_reminders(self) -> ReminderStream:
        return ReminderStream(self)

    def _register(self, stream: ReminderStream):
        with self._streams_lock:
            self._streams.add(stream)

    def _unregister(self, stream: ReminderStream):
        with self._streams_lock:
            self._streams.discard(stream)

    def _notify_changed(self):
        with self._streams_lock:
            streams = list(self._streams)
        for stream in streams:
            stream.invalidate()
    # endregion

    def list_active_reminders(self) -> List[Reminder]:
        db = self._session_factory()
        try:
            return (
                db.query(Reminder)
                .filter(Reminder.is_active == True)  # noqa: E712
                .order_by(Reminder.time.asc())
                .all()
            )
        finally:
            db.close()

    def get_reminder(self, reminder_id: str) -> Optional[Reminder]:
        db = self._session_factory()
        try:
            return db.query(Reminder).filter(Reminder.id == reminder_id).first()
        finally:
            db.close()

    def add_reminder(self, reminder: Reminder) -> Reminder:
        if reminder.start_time is None:
            reminder.start_time = reminder.time

        db = self._session_factory()
        try:
            db.add(reminder)
            db.commit()
            db.refresh(reminder)
            logger.info(f"Added reminder {reminder.id}: {reminder.title}")
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        self._notify_changed()
        return reminder

    def update_reminder(self, reminder_id: str, fields: Dict[str, Any]) -> Optional[Reminder]:
        """Apply field updates to a reminder, returns None when it doesn't exist"""
        db = self._session_factory()
        try:
            reminder = db.query(Reminder).filter(Reminder.id == reminder_id).first()
            if reminder is None:
                return None

            for field, value in fields.items():
                setattr(reminder, field, value)
            reminder.updated_at = datetime.utcnow()

            db.commit()
            db.refresh(reminder)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        self._notify_changed()
        return reminder

    def set_external_id(self, reminder_id: str, external_id: str) -> Optional[Reminder]:
        return self.update_reminder(reminder_id, {"external_id": external_id})

    def deactivate_reminder(self, reminder_id: str) -> Optional[Reminder]:
        return self.update_reminder(reminder_id, {"is_active": False})

    def delete_reminder(self, reminder: Reminder) -> bool:
        db = self._session_factory()
        try:
            deleted = db.query(Reminder).filter(Reminder.id == reminder.id).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Deleted reminder {reminder.id}")
        self._notify_changed()
        return deleted > 0

    def delete_all_reminders(self) -> int:
        db = self._session_factory()
        try:
            count = db.query(Reminder).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Deleted all reminders ({count})")
        self._notify_changed()
        return count


# Global instance
reminder_repo = ReminderRepo()
