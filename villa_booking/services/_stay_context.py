"""Reads shared by quoting, availability and hold creation."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, NamedTuple, Sequence

from sqlalchemy.engine import Connection

from villa_booking.db.readers.blocked_periods import list_blocked_periods
from villa_booking.db.readers.pricing import list_custom_pricing, list_seasons
from villa_booking.db.readers.reservations import list_overlapping_reservations


class StayContext(NamedTuple):
    seasons: Sequence[Any]
    custom_pricing: Sequence[Any]
    reservations: Sequence[Any]
    blocked_periods: Sequence[Any]


def load_occupancy(
    conn: Connection, property_id: int, check_in: date, check_out: date
) -> tuple[Sequence[Any], Sequence[Any]]:
    """Reservations and blocked periods that may conflict with ``[check_in, check_out)``."""
    reservations = list_overlapping_reservations(conn, property_id, check_in, check_out)
    # Blocks are inclusive, so one starting on the checkout day still conflicts
    blocked = list_blocked_periods(conn, property_id, start=check_in, end=check_out)
    return reservations, blocked


def load_stay_context(
    conn: Connection, property_id: int, check_in: date, check_out: date
) -> StayContext:
    last_night = check_out - timedelta(days=1)
    reservations, blocked = load_occupancy(conn, property_id, check_in, check_out)
    return StayContext(
        seasons=list_seasons(conn, property_id, start=check_in, end=last_night),
        custom_pricing=list_custom_pricing(conn, property_id, start=check_in, end=last_night),
        reservations=reservations,
        blocked_periods=blocked,
    )
