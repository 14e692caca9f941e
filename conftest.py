import os

# Point the app at a throwaway database before any remindme module reads the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_TIMEZONE"] = "UTC"

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from remindme.database import Base, build_engine
from remindme.models import Reminder
from remindme.services.reminder_repo import ReminderRepo


@pytest.fixture
def session_factory():
    """Sessions bound to a fresh in-memory database"""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def reminder_repo(session_factory):
    return ReminderRepo(session_factory)


@pytest.fixture
def make_reminder():
    def _make(title="Call mom", hours_from_now=1, recurrence="NONE", **fields):
        return Reminder(
            title=title,
            body=fields.pop("body", f"{title} body"),
            time=fields.pop("time", datetime.utcnow().replace(microsecond=0) + timedelta(hours=hours_from_now)),
            recurrence=recurrence,
            **fields
        )
    return _make
