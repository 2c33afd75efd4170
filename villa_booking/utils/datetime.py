"""Date and time helpers shared by the booking core."""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo

from villa_booking.config import PROPERTY_TIMEZONE


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This function should be used instead of datetime.now() or datetime.utcnow()
    to ensure all timestamps are timezone-aware and stored in UTC.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def property_today(now: datetime | None = None) -> date:
    """
    Return the calendar date at the villa's location.

    "Today at local midnight" is the cut-off for past-date checks, so a guest
    booking late at night UTC still sees the villa's own calendar day.

    Args:
        now: Reference instant (defaults to utc_now()). Naive values are read as UTC.

    Returns:
        Calendar date in PROPERTY_TIMEZONE
    """
    instant = now or utc_now()
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(PROPERTY_TIMEZONE)).date()


def nights_between(check_in: date, check_out: date) -> int:
    """Whole days between check-in and check-out."""
    return (check_out - check_in).days


def each_night(check_in: date, check_out: date) -> Iterator[date]:
    """
    Yield every night of a stay, check-out day excluded.

    Example:
        >>> list(each_night(date(2025, 1, 8), date(2025, 1, 10)))
        [datetime.date(2025, 1, 8), datetime.date(2025, 1, 9)]
    """
    current = check_in
    while current < check_out:
        yield current
        current += timedelta(days=1)
