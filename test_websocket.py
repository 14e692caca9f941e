"""
Tests for the reminder list screen served at /ws/reminders
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from main import app
from remindme.config.settings import Settings
from remindme.dependencies import get_reminder_repo
from remindme.services.reminder_repo import ReminderRepo


@pytest.fixture
def client():
    with TestClient(app) as c:
        c.delete("/reminders/")
        yield c


def create(client, title, time="2030-05-01T09:30:00"):
    response = client.post("/reminders/", json={"title": title, "time": time})
    assert response.status_code == 201, response.text
    return response.json()


def receive_until(ws, message_type):
    """Read messages until one of the given type arrives, returns it"""
    while True:
        message = ws.receive_json()
        if message["type"] == message_type:
            return message


def collect(ws, *message_types):
    """Read messages until each given type has been seen, returns the last of each"""
    seen = {}
    while not set(message_types) <= seen.keys():
        message = ws.receive_json()
        seen[message["type"]] = message
    return seen


def open_screen(ws):
    """Consume the opening sequence, returns the first reminder list"""
    assert ws.receive_json()["type"] == "connection"
    assert ws.receive_json() == {"type": "spinner_visibility", "visible": True}
    assert ws.receive_json() == {"type": "empty_visibility", "visible": False}
    reminder_list = ws.receive_json()
    assert reminder_list["type"] == "reminder_list"
    assert ws.receive_json() == {"type": "spinner_visibility", "visible": False}
    assert ws.receive_json() == {"type": "empty_visibility", "visible": not reminder_list["reminders"]}
    return reminder_list


def test_opening_with_no_reminders_shows_empty_state(client):
    with client.websocket_connect("/ws/reminders") as ws:
        reminder_list = open_screen(ws)

    assert reminder_list["reminders"] == []
    assert reminder_list["header"] in Settings.REMINDER_LIST["headers"]


def test_opening_lists_reminders_soonest_first(client):
    later = create(client, "Later", "2030-09-01T08:00:00")
    sooner = create(client, "Sooner", "2030-03-01T08:00:00")

    with client.websocket_connect("/ws/reminders") as ws:
        reminder_list = open_screen(ws)

    assert [r["id"] for r in reminder_list["reminders"]] == [sooner["id"], later["id"]]


def test_list_follows_changes_made_elsewhere(client):
    with client.websocket_connect("/ws/reminders") as ws:
        open_screen(ws)

        reminder = create(client, "Added through the API")

        reminder_list = receive_until(ws, "reminder_list")
        assert [r["id"] for r in reminder_list["reminders"]] == [reminder["id"]]
        assert receive_until(ws, "empty_visibility") == {"type": "empty_visibility", "visible": False}


def test_delete_one_reminder_after_confirmation(client):
    keep = create(client, "Keep")
    drop = create(client, "Drop", "2030-01-01T08:00:00")

    with client.websocket_connect("/ws/reminders") as ws:
        open_screen(ws)

        ws.send_json({"type": "request_delete", "reminder_id": drop["id"]})
        assert receive_until(ws, "confirm_delete")["reminder_id"] == drop["id"]

        ws.send_json({"type": "delete_confirmed"})
        seen = collect(ws, "reminder_list", "notification_cleared")

    assert [r["id"] for r in seen["reminder_list"]["reminders"]] == [keep["id"]]
    assert seen["notification_cleared"]["notification_id"] == drop["notification_id"]
    assert [r["id"] for r in client.get("/reminders/").json()] == [keep["id"]]


def test_delete_all_reminders_after_confirmation(client):
    create(client, "One")
    create(client, "Two")

    with client.websocket_connect("/ws/reminders") as ws:
        open_screen(ws)

        ws.send_json({"type": "request_delete_all"})
        assert receive_until(ws, "confirm_delete_all") == {"type": "confirm_delete_all"}

        ws.send_json({"type": "delete_all_confirmed"})
        seen = collect(ws, "reminder_list", "notification_cleared", "empty_visibility")

    assert seen["reminder_list"]["reminders"] == []
    assert seen["notification_cleared"]["notification_id"] is None
    assert seen["empty_visibility"]["visible"] is True
    assert client.get("/reminders/").json() == []


def test_cancelled_delete_is_not_carried_out(client):
    reminder = create(client, "Stays")

    with client.websocket_connect("/ws/reminders") as ws:
        open_screen(ws)

        ws.send_json({"type": "request_delete", "reminder_id": reminder["id"]})
        receive_until(ws, "confirm_delete")
        ws.send_json({"type": "delete_cancelled"})
        ws.send_json({"type": "delete_confirmed"})

        # Intents are handled in order, so this reply comes after the confirmation was ignored
        ws.send_json({"type": "ping"})
        toast = receive_until(ws, "toast")
        assert toast["message"] == "Unsupported message type: ping"

    assert [r["id"] for r in client.get("/reminders/").json()] == [reminder["id"]]


def test_request_delete_for_unknown_reminder(client):
    with client.websocket_connect("/ws/reminders") as ws:
        open_screen(ws)

        ws.send_json({"type": "request_delete", "reminder_id": "missing"})
        toast = receive_until(ws, "toast")

    assert toast["toast_type"] == "warning"
    assert toast["title"] == "Reminder not found"


def test_invalid_messages_get_a_warning(client):
    with client.websocket_connect("/ws/reminders") as ws:
        open_screen(ws)

        ws.send_text("not json")
        first = receive_until(ws, "toast")
        ws.send_json(["request_delete_all"])
        second = receive_until(ws, "toast")

    assert first["title"] == second["title"] == "Unknown request"


def test_unavailable_reminders_show_an_error(client):
    broken_repo = ReminderRepo(MagicMock(side_effect=RuntimeError("database unavailable")))
    app.dependency_overrides[get_reminder_repo] = lambda: broken_repo
    try:
        with client.websocket_connect("/ws/reminders") as ws:
            assert ws.receive_json()["type"] == "connection"
            assert ws.receive_json() == {"type": "spinner_visibility", "visible": True}
            assert ws.receive_json() == {"type": "empty_visibility", "visible": False}
            toast = ws.receive_json()
    finally:
        app.dependency_overrides.pop(get_reminder_repo, None)

    assert toast["type"] == "toast"
    assert toast["toast_type"] == "error"
    assert toast["title"] == "Reminders unavailable"
