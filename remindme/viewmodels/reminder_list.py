# remindme/viewmodels/reminder_list.py
"""
View-model behind the reminder list: visibility of the loading spinner and empty state,
and the two-step (request, then confirm) deletion flows.
"""

import logging
from typing import List, Optional

from remindme.models import Reminder
from remindme.viewmodels.live_data import LiveValue, SingleEvent

logger = logging.getLogger(__name__)


class ReminderListViewModel:

    def __init__(self, repo, scheduler):
        self.repo = repo
        self.scheduler = scheduler

        self.reminder_list = repo.get_active_reminders()

        self.show_delete_all_confirmation_event: SingleEvent[None] = SingleEvent("show_delete_all_confirmation")
        self.show_delete_confirmation_event: SingleEvent[None] = SingleEvent("show_delete_confirmation")
        # Carries the notification id to clear, None clears every notification
        self.clear_notification_event: SingleEvent[Optional[int]] = SingleEvent("clear_notification")

        self._spinner_visibility: LiveValue[bool] = LiveValue(True)
        self._empty_visibility: LiveValue[bool] = LiveValue(False)

        # Reminder selected in the list, waiting for the user to confirm its deletion
        self._pending_delete: Optional[Reminder] = None

    @property
    def spinner_visibility(self) -> LiveValue[bool]:
        return self._spinner_visibility

    @property
    def empty_visibility(self) -> LiveValue[bool]:
        return self._empty_visibility

    @property
    def pending_delete(self) -> Optional[Reminder]:
        return self._pending_delete

    def reminder_list_updated(self, reminders: List[Reminder]):
        self._spinner_visibility.set_value(False)
        self._empty_visibility.set_value(len(reminders) == 0)

    def confirm_delete_all_reminders(self):
        self.show_delete_all_confirmation_event.emit()

    def delete_all_reminders(self):
        self.scheduler.cancel_all_jobs()
        self.repo.delete_all_reminders()
        self.clear_notification_event.emit(None)

    def confirm_delete_reminder(self, reminder: Reminder):
        self._pending_delete = reminder
        self.show_delete_confirmation_event.emit()

    def delete_reminder(self):
        reminder = self._pending_delete
        if reminder is None:
            logger.warning("Delete confirmed without a reminder selected, ignoring")
            return

        self.scheduler.cancel_job(reminder.external_id)
        self.repo.delete_reminder(reminder)
        self.clear_notification_event.emit(reminder.notification_id)
        self._pending_delete = None

    def cancel_delete_reminder(self):
        self._pending_delete = None
