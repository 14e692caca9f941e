# remindme/utils/recurrence.py
"""
Recurrence rules for repeating reminders
"""

import calendar
import enum
from datetime import datetime, timedelta
from typing import Optional


class Recurrence(str, enum.Enum):
    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


def add_months(value: datetime, months: int) -> datetime:
    """Shift a datetime by whole months, clamping the day to the target month's length"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _occurrence(start: datetime, recurrence: Recurrence, step: int) -> datetime:
    if recurrence == Recurrence.DAILY:
        return start + timedelta(days=step)
    if recurrence == Recurrence.WEEKLY:
        return start + timedelta(weeks=step)
    if recurrence == Recurrence.MONTHLY:
        return add_months(start, step)
    return add_months(start, 12 * step)


def next_occurrence(time: datetime, recurrence, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Compute the next trigger time of a repeating reminder.

    Returns the first occurrence ``time + k * period`` (k >= 1) strictly after ``now``,
    or None for reminders that do not repeat. Pass the first trigger time as ``time`` so
    a reminder on the 31st keeps landing on month ends.
    """
    recurrence = Recurrence(recurrence)
    if recurrence == Recurrence.NONE:
        return None

    now = now or datetime.now()
    step = 1
    candidate = _occurrence(time, recurrence, step)

    # Jump close to now before stepping, reminders may have been offline for a long time
    if candidate <= now and recurrence in (Recurrence.DAILY, Recurrence.WEEKLY):
        period = timedelta(days=1) if recurrence == Recurrence.DAILY else timedelta(weeks=1)
        step = max(1, (now - time) // period)
        candidate = _occurrence(time, recurrence, step)

    while candidate <= now:
        step += 1
        candidate = _occurrence(time, recurrence, step)
    return candidate
