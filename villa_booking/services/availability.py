"""
Read-only availability queries over the villa calendar.

"No availability" is a normal answer here, never an exception; only invalid
input (check-out not after check-in, check-in in the past) raises.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.engine import Engine

from villa_booking.core.availability import (
    Conflict,
    day_status,
    find_conflicts,
    validate_stay_dates,
)
from villa_booking.core.pricing import resolve_nightly_rate
from villa_booking.db.readers.property import get_property
from villa_booking.services._stay_context import load_occupancy, load_stay_context
from villa_booking.utils.datetime import property_today, utc_now


class CalendarDay(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    available: bool
    reason: Optional[str] = None
    price: int
    min_stay: int = Field(alias="minStay")
    has_custom_pricing: bool = Field(alias="hasCustomPricing")


def list_conflicts(
    engine: Engine,
    check_in: date,
    check_out: date,
    exclude_reservation_id: Any = None,
    now: Optional[datetime] = None,
) -> list[Conflict]:
    """
    Everything that prevents booking ``[check_in, check_out)``.

    Args:
        engine: SQLAlchemy engine
        check_in: First night
        check_out: Departure day
        exclude_reservation_id: Reservation left out of the check (reschedule)
        now: Reference instant for hold expiry

    Returns:
        list[Conflict]: Empty when the range is free

    Raises:
        ValidationError: invalid or past dates
    """
    now = now or utc_now()
    validate_stay_dates(check_in, check_out, property_today(now))
    with engine.connect() as conn:
        property_ = get_property(conn)
        reservations, blocked = load_occupancy(conn, property_.id, check_in, check_out)
    return find_conflicts(
        check_in,
        check_out,
        reservations,
        blocked,
        now,
        exclude_reservation_id=exclude_reservation_id,
    )


def is_range_available(
    engine: Engine,
    check_in: date,
    check_out: date,
    exclude_reservation_id: Any = None,
    now: Optional[datetime] = None,
) -> bool:
    return not list_conflicts(engine, check_in, check_out, exclude_reservation_id, now)


def month_calendar(
    engine: Engine, year: int, month: int, now: Optional[datetime] = None
) -> list[CalendarDay]:
    """
    Per-day availability and nightly price for one month.

    A day is unavailable when it is in the past, inside a blocked period or
    a night of an active reservation. Prices follow the quote precedence.
    """
    now = now or utc_now()
    today = property_today(now)
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    after_last = first + timedelta(days=days_in_month)

    with engine.connect() as conn:
        property_ = get_property(conn)
        context = load_stay_context(conn, property_.id, first, after_last)

    custom_by_date = {entry.date: entry for entry in context.custom_pricing}
    days = []
    for offset in range(days_in_month):
        day = first + timedelta(days=offset)
        reason = day_status(day, today, context.reservations, context.blocked_periods, now)
        rate = resolve_nightly_rate(day, property_, context.seasons, custom_by_date)
        days.append(
            CalendarDay(
                day=day,
                available=reason is None,
                reason=reason,
                price=rate.rate,
                min_stay=property_.min_nights,
                has_custom_pricing=day in custom_by_date,
            )
        )
    return days
