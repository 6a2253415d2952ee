from __future__ import annotations

from datetime import date, datetime


def to_local_naive(value: datetime) -> datetime:
    """Normalize a timestamp to the process-local, offset-free form.

    Appointment timestamps are stored without an offset and read as local
    wall-clock time. Values that do carry an offset are converted to the
    local zone first so that calendar-day comparisons stay consistent.
    """

    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def local_now() -> datetime:
    return datetime.now()


def local_today() -> date:
    return local_now().date()


def same_day(value: datetime, day: date) -> bool:
    return to_local_naive(value).date() == day
