"""
API tests for the reminder and notification endpoints
"""

import asyncio
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import app
from remindme.services.notification_service import notification_service
from remindme.services.reminder_repo import reminder_repo


@pytest.fixture
def client():
    with TestClient(app) as c:
        c.delete("/reminders/")
        c.delete("/notifications/")
        yield c


def create(client, title="Dentist", time="2030-05-01T09:30:00", **extra):
    response = client.post("/reminders/", json={"title": title, "time": time, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def scheduled_job_ids(client):
    return [job["id"] for job in client.get("/scheduler/status").json()["jobs"]]


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "RemindMe API"}
    assert client.get("/health").json() == {"status": "ok"}


def test_create_reminder_schedules_a_job(client):
    reminder = create(client, body="Bring the forms", recurrence="MONTHLY")

    assert reminder["title"] == "Dentist"
    assert reminder["body"] == "Bring the forms"
    assert reminder["recurrence"] == "MONTHLY"
    assert reminder["is_active"] is True
    assert reminder["external_id"] == f"reminder-{reminder['id']}"
    assert reminder["external_id"] in scheduled_job_ids(client)


def test_create_rejects_unknown_recurrence(client):
    response = client.post("/reminders/", json={"title": "x", "time": "2030-01-01T00:00:00", "recurrence": "HOURLY"})

    assert response.status_code == 422


def test_timezone_aware_time_is_stored_in_scheduler_timezone(client):
    reminder = create(client, time="2030-01-01T10:00:00+02:00")

    assert reminder["time"] == "2030-01-01T08:00:00"


def test_get_unknown_reminder_returns_404(client):
    assert client.get("/reminders/missing").status_code == 404
    assert client.put("/reminders/missing", json={"title": "x"}).status_code == 404
    assert client.delete("/reminders/missing").status_code == 404


def test_reminders_are_listed_soonest_first(client):
    later = create(client, "Later", "2030-06-01T08:00:00")
    sooner = create(client, "Sooner", "2030-02-01T08:00:00")

    listed = client.get("/reminders/").json()

    assert [r["id"] for r in listed] == [sooner["id"], later["id"]]
    assert client.get(f"/reminders/{later['id']}").json()["title"] == "Later"


def test_update_moves_the_job(client):
    reminder = create(client)

    response = client.put(f"/reminders/{reminder['id']}", json={"time": "2031-01-01T07:00:00"})

    assert response.status_code == 200
    updated = response.json()
    assert updated["time"] == "2031-01-01T07:00:00"
    assert updated["title"] == "Dentist"
    assert updated["updated_at"] is not None

    job = next(j for j in client.get("/scheduler/status").json()["jobs"] if j["id"] == reminder["external_id"])
    assert job["next_run_time"].startswith("2031-01-01T07:00:00")


def test_delete_reminder_cancels_its_job(client):
    keep = create(client, "Keep")
    drop = create(client, "Drop")

    response = client.delete(f"/reminders/{drop['id']}")

    assert response.status_code == 200
    assert [r["id"] for r in client.get("/reminders/").json()] == [keep["id"]]
    assert drop["external_id"] not in scheduled_job_ids(client)
    assert keep["external_id"] in scheduled_job_ids(client)


def test_delete_all_reminders(client):
    create(client, "One")
    create(client, "Two")

    response = client.delete("/reminders/")

    assert response.json()["deleted"] == 2
    assert client.get("/reminders/").json() == []
    assert not [job_id for job_id in scheduled_job_ids(client) if job_id.startswith("reminder-")]


def test_notifications_are_listed_and_cancelled(client):
    first = create(client, "First")
    second = create(client, "Second")
    for reminder in (first, second):
        asyncio.run(notification_service.notify(reminder_repo.get_reminder(reminder["id"])))

    posted = client.get("/notifications/").json()
    assert sorted(n["notification_id"] for n in posted) == sorted([first["notification_id"], second["notification_id"]])

    assert client.delete(f"/notifications/{first['notification_id']}").status_code == 200
    assert [n["notification_id"] for n in client.get("/notifications/").json()] == [second["notification_id"]]

    assert client.delete("/notifications/").json()["dismissed"] == 1
    assert client.get("/notifications/").json() == []


def test_cancel_unknown_notification_returns_404(client):
    assert client.delete("/notifications/424242").status_code == 404


def test_deleting_a_reminder_clears_its_notification(client):
    reminder = create(client)
    asyncio.run(notification_service.notify(reminder_repo.get_reminder(reminder["id"])))

    client.delete(f"/reminders/{reminder['id']}")

    assert client.get("/notifications/").json() == []


@pytest.mark.parametrize("field", ["title", "time", "recurrence"])
def test_update_rejects_null_for_required_fields(client, field):
    reminder = create(client)

    response = client.put(f"/reminders/{reminder['id']}", json={field: None})

    assert response.status_code == 422
    assert client.get(f"/reminders/{reminder['id']}").json()[field] == reminder[field]


def test_update_can_clear_the_body(client):
    reminder = create(client, body="Bring the forms")

    response = client.put(f"/reminders/{reminder['id']}", json={"body": None})

    assert response.status_code == 200
    assert response.json()["body"] is None


def test_update_time_restarts_the_repeat_cycle(client):
    reminder = create(client, time="2030-01-31T09:00:00", recurrence="MONTHLY")
    assert reminder["start_time"] == "2030-01-31T09:00:00"

    updated = client.put(f"/reminders/{reminder['id']}", json={"time": "2030-03-15T09:00:00"}).json()

    assert updated["start_time"] == "2030-03-15T09:00:00"


def test_creating_a_long_past_one_shot_reminder_retires_it(client):
    response = client.post("/reminders/", json={"title": "Too late", "time": "2020-01-01T09:00:00"})

    assert response.status_code == 201
    reminder = response.json()
    assert reminder["is_active"] is False
    assert reminder["external_id"] is None
    assert client.get("/reminders/").json() == []
    assert not [job_id for job_id in scheduled_job_ids(client) if job_id.startswith("reminder-")]


def test_creating_a_long_past_repeating_reminder_moves_it_forward(client):
    reminder = create(client, "Standup", "2020-01-06T09:30:00", recurrence="WEEKLY")

    assert reminder["is_active"] is True
    assert reminder["time"] > datetime.utcnow().isoformat()
    assert reminder["time"].endswith("09:30:00")
    assert reminder["start_time"] == "2020-01-06T09:30:00"
    assert reminder["external_id"] in scheduled_job_ids(client)
