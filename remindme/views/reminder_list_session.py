# remindme/views/reminder_list_session.py
"""
Reminder list screen served over a WebSocket.

Each connection gets its own ReminderListViewModel. The session renders view-model state
and events as JSON messages, forwards the client's intents back to the view-model, and
carries out the notification clearing the view-model asks for.
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import WebSocket, WebSocketDisconnect

from remindme.config.settings import Settings
from remindme.models import Reminder
from remindme.schemas import ReminderOut
from remindme.services.notification_service import NotificationService
from remindme.services.websocket_manager import WebSocketManager
from remindme.viewmodels.reminder_list import ReminderListViewModel

logger = logging.getLogger(__name__)


class ReminderListSession:

    def __init__(
        self,
        websocket: WebSocket,
        view_model: ReminderListViewModel,
        notifications: NotificationService,
        manager: WebSocketManager
    ):
        self.websocket = websocket
        self.view_model = view_model
        self.notifications = notifications
        self.manager = manager
        self.session_id = str(uuid.uuid4())
        self.header_text = Settings.get_random_header()

        # Latest list shown to the client, used to resolve reminder ids sent back by it
        self._reminders: Dict[str, Reminder] = {}
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._subscription = None
        self._sender_task: Optional[asyncio.Task] = None
        self._side_tasks = set()

    async def run(self):
        """Serve the session until the client disconnects"""
        await self.manager.connect(self.websocket, self.session_id)
        self._sender_task = asyncio.create_task(self._send_loop())
        self._bind_view_model()

        try:
            while True:
                data = await self.websocket.receive_text()
                try:
                    intent = json.loads(data)
                except json.JSONDecodeError:
                    self._send_toast("warning", "Unknown request", "Messages must be JSON objects")
                    continue
                self.handle_intent(intent)
        except WebSocketDisconnect:
            logger.info(f"Reminder list session {self.session_id} closed by client")
        finally:
            await self.close()

    async def close(self):
        self._unbind_view_model()
        self.manager.disconnect(self.session_id)
        if self._sender_task is not None:
            self._sender_task.cancel()
            try:
                await self._sender_task
            except asyncio.CancelledError:
                pass

    # region binding
    def _bind_view_model(self):
        vm = self.view_model
        vm.clear_notification_event.observe(self._on_clear_notification)
        vm.show_delete_all_confirmation_event.observe(self._on_show_delete_all_confirmation)
        vm.show_delete_confirmation_event.observe(self._on_show_delete_confirmation)
        vm.spinner_visibility.observe(self._on_spinner_visibility)
        vm.empty_visibility.observe(self._on_empty_visibility)
        self._subscription = vm.reminder_list.subscribe(self._on_reminder_list, self._on_reminder_list_error)

    def _unbind_view_model(self):
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

        vm = self.view_model
        vm.clear_notification_event.remove_observer(self._on_clear_notification)
        vm.show_delete_all_confirmation_event.remove_observer(self._on_show_delete_all_confirmation)
        vm.show_delete_confirmation_event.remove_observer(self._on_show_delete_confirmation)
        vm.spinner_visibility.remove_observer(self._on_spinner_visibility)
        vm.empty_visibility.remove_observer(self._on_empty_visibility)
    # endregion

    # region stream
    def _on_reminder_list(self, reminders: List[Reminder]):
        self._reminders = {reminder.id: reminder for reminder in reminders}
        self._send({
            "type": "reminder_list",
            "header": self.header_text,
            "reminders": [ReminderOut.model_validate(r).model_dump(mode="json") for r in reminders]
        })
        self.view_model.reminder_list_updated(reminders)

    def _on_reminder_list_error(self, error: Exception):
        logger.error(f"Reminder list stream failed for session {self.session_id}: {error}", exc_info=error)
        self._send_toast("error", "Reminders unavailable", "Could not load your reminders")
    # endregion

    # region view-model observers
    def _on_spinner_visibility(self, visible: bool):
        self._send({"type": "spinner_visibility", "visible": visible})

    def _on_empty_visibility(self, visible: bool):
        self._send({"type": "empty_visibility", "visible": visible})

    def _on_show_delete_all_confirmation(self, _):
        self._send({"type": "confirm_delete_all"})

    def _on_show_delete_confirmation(self, _):
        pending = self.view_model.pending_delete
        self._send({
            "type": "confirm_delete",
            "reminder_id": pending.id if pending is not None else None
        })

    def _on_clear_notification(self, notification_id: Optional[int]):
        if notification_id is not None:
            self._spawn(self.notifications.cancel(notification_id))
        else:
            self._spawn(self.notifications.cancel_all())
    # endregion

    # region intents
    def handle_intent(self, intent: Any):
        """Forward a client message to the view-model"""
        if not isinstance(intent, dict):
            self._send_toast("warning", "Unknown request", "Messages must be JSON objects")
            return

        intent_type = intent.get("type")
        vm = self.view_model
        try:
            if intent_type == "request_delete_all":
                vm.confirm_delete_all_reminders()
            elif intent_type == "delete_all_confirmed":
                vm.delete_all_reminders()
            elif intent_type == "request_delete":
                reminder = self._reminders.get(intent.get("reminder_id"))
                if reminder is None:
                    self._send_toast("warning", "Reminder not found", "That reminder is no longer in your list")
                    return
                vm.confirm_delete_reminder(reminder)
            elif intent_type == "delete_confirmed":
                vm.delete_reminder()
            elif intent_type == "delete_cancelled":
                vm.cancel_delete_reminder()
            else:
                self._send_toast("warning", "Unknown request", f"Unsupported message type: {intent_type}")
        except Exception as e:
            logger.exception(f"Error handling {intent_type} for session {self.session_id}: {e}")
            self._send_toast("error", "Something went wrong", "Your reminders could not be updated")
    # endregion

    # region outbound
    def _send(self, message: Dict[str, Any]):
        self._outbox.put_nowait(message)

    def _send_toast(self, toast_type: str, title: str, message: str):
        self._send({
            "type": "toast",
            "toast_type": toast_type,  # "success", "error", "warning", "info"
            "title": title,
            "message": message,
            "timestamp": datetime.now().isoformat()
        })

    async def _send_loop(self):
        while True:
            message = await self._outbox.get()
            try:
                await self.manager.send_personal_message(message, self.websocket)
            except Exception as e:
                logger.error(f"Error sending {message.get('type')} to session {self.session_id}: {e}")
                return

    def _spawn(self, coro):
        task = asyncio.create_task(coro)
        self._side_tasks.add(task)
        task.add_done_callback(self._side_task_done)

    def _side_task_done(self, task: asyncio.Task):
        self._side_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Clearing notifications failed for session {self.session_id}: {task.exception()}")
            self._send_toast("error", "Notifications", "Could not clear notifications")
    # endregion
