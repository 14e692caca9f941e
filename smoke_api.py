#!/usr/bin/env python3
"""
Simple smoke script to verify the backend API endpoints
Run this after starting the backend server
"""

from datetime import datetime, timedelta

import requests

BASE_URL = "http://localhost:8000"


def smoke_endpoints():
    """Exercise the main API endpoints"""

    print("Testing RemindMe API endpoints...")
    print("=" * 50)

    # Test root endpoint
    try:
        response = requests.get(f"{BASE_URL}/")
        print(f"✓ Root endpoint: {response.status_code} - {response.json()}")
    except Exception as e:
        print(f"✗ Root endpoint failed: {e}")

    # Test health endpoint
    try:
        response = requests.get(f"{BASE_URL}/health")
        print(f"✓ Health endpoint: {response.status_code} - {response.json()}")
    except Exception as e:
        print(f"✗ Health endpoint failed: {e}")

    # Create, list and delete a reminder
    reminder_id = None
    try:
        payload = {
            "title": "Smoke test reminder",
            "body": "Created by smoke_api.py",
            "time": (datetime.now() + timedelta(hours=1)).isoformat(),
            "recurrence": "NONE"
        }
        response = requests.post(f"{BASE_URL}/reminders/", json=payload)
        print(f"✓ Create reminder endpoint: {response.status_code}")
        if response.status_code == 201:
            reminder_id = response.json()["id"]
            print(f"  Reminder {reminder_id} scheduled as {response.json()['external_id']}")
        else:
            print(f"  Response: {response.json()}")
    except Exception as e:
        print(f"✗ Create reminder endpoint failed: {e}")

    try:
        response = requests.get(f"{BASE_URL}/reminders/")
        print(f"✓ Reminders endpoint: {response.status_code} - {len(response.json())} active reminders")
    except Exception as e:
        print(f"✗ Reminders endpoint failed: {e}")

    try:
        response = requests.get(f"{BASE_URL}/scheduler/status")
        print(f"✓ Scheduler status endpoint: {response.status_code} - {len(response.json()['jobs'])} jobs")
    except Exception as e:
        print(f"✗ Scheduler status endpoint failed: {e}")

    if reminder_id:
        try:
            response = requests.delete(f"{BASE_URL}/reminders/{reminder_id}")
            print(f"✓ Delete reminder endpoint: {response.status_code} - {response.json()}")
        except Exception as e:
            print(f"✗ Delete reminder endpoint failed: {e}")

    print("\n" + "=" * 50)
    print("API smoke run completed!")


if __name__ == "__main__":
    smoke_endpoints()
