"""Time helpers — every datetime is stored and compared in UTC."""
from datetime import datetime

import pytz

from vitrii_agenda.config import settings


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a client-supplied datetime to aware UTC.

    Naive values are read as wall-clock time in ``AGENDA_TIMEZONE``.
    """
    if value.tzinfo is None:
        value = pytz.timezone(settings.AGENDA_TIMEZONE).localize(value)
    return value.astimezone(pytz.utc)


def stored_utc(value: datetime) -> datetime:
    """Attach UTC to a datetime read back from the database.

    SQLite drops tzinfo on the way out; what it hands back is already UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.utc)
    return value.astimezone(pytz.utc)
