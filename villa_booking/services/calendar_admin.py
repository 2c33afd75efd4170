"""
Calendar administration: blocked periods, seasons and custom pricing.

Blocking dates changes what the calendar accepts, so it runs behind the
property lock like hold creation and refuses to cover an active reservation.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional, Sequence

import structlog
from sqlalchemy.engine import Engine, Row

from villa_booking.core.availability import find_conflicts
from villa_booking.core.errors import DateConflict, NotFound, ValidationError
from villa_booking.db.locks import lock_property
from villa_booking.db.readers import blocked_periods as blocked_reader
from villa_booking.db.readers import pricing as pricing_reader
from villa_booking.db.readers.property import get_property
from villa_booking.db.readers.reservations import list_overlapping_reservations
from villa_booking.db.writers import blocked_periods as blocked_writer
from villa_booking.db.writers import pricing as pricing_writer
from villa_booking.metrics import blocked_periods_total
from villa_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError(
            "End date must not be before start date",
            {"start_date": start.isoformat(), "end_date": end.isoformat()},
        )


# =============================================================================
# Blocked periods
# =============================================================================


def block_dates(
    engine: Engine,
    start: date,
    end: date,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Row[Any]:
    """
    Block ``[start, end]`` (both days inclusive).

    Raises:
        ValidationError: ``end`` before ``start``
        DateConflict: an active reservation has a night inside the range;
            nothing is written
    """
    _check_range(start, end)
    now = now or utc_now()
    day_after = end + timedelta(days=1)

    with engine.begin() as conn:
        property_ = get_property(conn)
        lock_property(conn, property_.id)
        reservations = list_overlapping_reservations(conn, property_.id, start, day_after)
        # Nights [start, end + 1) are exactly the blocked days
        conflicts = find_conflicts(start, day_after, reservations, [], now)
        if conflicts:
            blocked_periods_total.labels(status="date_conflict").inc()
            raise DateConflict(
                "Cannot block dates that overlap an active reservation",
                conflicts,
                {"start_date": start.isoformat(), "end_date": end.isoformat()},
            )
        row = blocked_writer.insert_blocked_period(conn, property_.id, start, end, reason)

    blocked_periods_total.labels(status="created").inc()
    logger.info(
        "dates_blocked",
        blocked_period_id=row.id,
        start_date=start.isoformat(),
        end_date=end.isoformat(),
    )
    return row


def unblock_dates(engine: Engine, blocked_period_id: int) -> None:
    with engine.begin() as conn:
        if not blocked_writer.delete_blocked_period(conn, blocked_period_id):
            raise NotFound("Blocked period not found", {"blocked_period_id": blocked_period_id})
    logger.info("dates_unblocked", blocked_period_id=blocked_period_id)


def list_blocked_periods(
    engine: Engine, start: Optional[date] = None, end: Optional[date] = None
) -> Sequence[Row[Any]]:
    with engine.connect() as conn:
        property_ = get_property(conn)
        return blocked_reader.list_blocked_periods(conn, property_.id, start, end)


# =============================================================================
# Seasons
# =============================================================================


def create_season(
    engine: Engine, name: str, start: date, end: date, nightly_rate: int
) -> Row[Any]:
    """
    Create a season; seasons of the villa never overlap.

    Raises:
        ValidationError: bad range, non-positive rate, or overlap with an
            existing season
    """
    _check_range(start, end)
    if nightly_rate <= 0:
        raise ValidationError("Nightly rate must be positive", {"nightly_rate": nightly_rate})

    with engine.begin() as conn:
        property_ = get_property(conn)
        lock_property(conn, property_.id)
        overlapping = pricing_reader.list_seasons(conn, property_.id, start=start, end=end)
        if overlapping:
            raise ValidationError(
                "Season overlaps an existing season",
                {
                    "reason": "season_overlap",
                    "seasons": [
                        {
                            "id": s.id,
                            "name": s.name,
                            "start_date": s.start_date.isoformat(),
                            "end_date": s.end_date.isoformat(),
                        }
                        for s in overlapping
                    ],
                },
            )
        row = pricing_writer.insert_season(conn, property_.id, name, start, end, nightly_rate)

    logger.info(
        "season_created",
        season_id=row.id,
        start_date=start.isoformat(),
        end_date=end.isoformat(),
    )
    return row


def delete_season(engine: Engine, season_id: int) -> None:
    with engine.begin() as conn:
        if not pricing_writer.delete_season(conn, season_id):
            raise NotFound("Season not found", {"season_id": season_id})
    logger.info("season_deleted", season_id=season_id)


def list_seasons(engine: Engine) -> Sequence[Row[Any]]:
    with engine.connect() as conn:
        property_ = get_property(conn)
        return pricing_reader.list_seasons(conn, property_.id)


# =============================================================================
# Custom pricing
# =============================================================================


def upsert_custom_pricing(engine: Engine, entries: list[dict[str, Any]]) -> int:
    """
    Set per-date prices; an existing entry for a date is replaced.

    Raises:
        ValidationError: duplicate dates in one request or a negative price
    """
    seen: set[date] = set()
    for entry in entries:
        day = entry["date"]
        if day in seen:
            raise ValidationError("Duplicate date in custom pricing", {"date": day.isoformat()})
        seen.add(day)
        for field in ("price_per_night", "price_per_adult", "price_per_child"):
            value = entry.get(field)
            if value is not None and value < 0:
                raise ValidationError(
                    f"{field} must not be negative", {"date": day.isoformat(), field: value}
                )

    with engine.begin() as conn:
        property_ = get_property(conn)
        return pricing_writer.upsert_custom_pricing(conn, property_.id, entries)


def delete_custom_pricing(engine: Engine, day: date) -> None:
    with engine.begin() as conn:
        property_ = get_property(conn)
        if not pricing_writer.delete_custom_pricing(conn, property_.id, day):
            raise NotFound("No custom pricing for this date", {"date": day.isoformat()})
    logger.info("custom_pricing_deleted", date=day.isoformat())


def list_custom_pricing(
    engine: Engine, start: Optional[date] = None, end: Optional[date] = None
) -> Sequence[Row[Any]]:
    with engine.connect() as conn:
        property_ = get_property(conn)
        return pricing_reader.list_custom_pricing(conn, property_.id, start, end)
