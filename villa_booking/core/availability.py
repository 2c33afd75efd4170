"""
Availability rules for the single villa.

Reservations occupy the half-open interval ``[check_in, check_out)``: the
check-out day is free for the next guest. Blocked periods are whole days,
inclusive at both ends. The two overlap tests below differ on purpose and
must stay that way.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel

from villa_booking.core.errors import ValidationError
from villa_booking.core.lifecycle import blocks_calendar
from villa_booking.utils.datetime import nights_between


class Conflict(BaseModel):
    """One reason a candidate range cannot be booked."""

    kind: Literal["reservation", "blocked_period"]
    id: str
    start: date
    end: date
    status: Optional[str] = None
    reason: Optional[str] = None


def overlaps_reservation(
    check_in: date, check_out: date, res_check_in: date, res_check_out: date
) -> bool:
    """Half-open overlap: ``[check_in, check_out)`` vs ``[res_check_in, res_check_out)``."""
    return check_in < res_check_out and check_out > res_check_in


def overlaps_block(check_in: date, check_out: date, start: date, end: date) -> bool:
    """Candidate stay vs an inclusive ``[start, end]`` block."""
    return check_in <= end and check_out >= start


def find_conflicts(
    check_in: date,
    check_out: date,
    reservations: Iterable[Any],
    blocked_periods: Iterable[Any],
    now: datetime,
    exclude_reservation_id: Any = None,
) -> list[Conflict]:
    """
    List everything that prevents booking ``[check_in, check_out)``.

    Reservations count only while they occupy the calendar (live holds and
    submitted, approved or paid stays). The reservation named by
    ``exclude_reservation_id`` is ignored so a reschedule never conflicts
    with its own current row.

    Args:
        check_in: First night
        check_out: Departure day (not a night)
        reservations: Candidate reservation rows (attribute access)
        blocked_periods: Candidate blocked period rows (attribute access)
        now: Reference instant for hold expiry
        exclude_reservation_id: Reservation to leave out of the check

    Returns:
        Conflicts ordered by start date, blocks before reservations on ties
    """
    excluded = str(exclude_reservation_id) if exclude_reservation_id is not None else None
    conflicts: list[Conflict] = []

    for block in blocked_periods:
        if overlaps_block(check_in, check_out, block.start_date, block.end_date):
            conflicts.append(
                Conflict(
                    kind="blocked_period",
                    id=str(block.id),
                    start=block.start_date,
                    end=block.end_date,
                    reason=block.reason,
                )
            )

    for res in reservations:
        if excluded is not None and str(res.id) == excluded:
            continue
        if not blocks_calendar(res, now):
            continue
        if overlaps_reservation(check_in, check_out, res.check_in, res.check_out):
            conflicts.append(
                Conflict(
                    kind="reservation",
                    id=str(res.id),
                    start=res.check_in,
                    end=res.check_out,
                    status=str(getattr(res.status, "value", res.status)),
                )
            )

    conflicts.sort(key=lambda c: (c.start, c.kind != "blocked_period"))
    return conflicts


def validate_stay_dates(check_in: date, check_out: date, today: date) -> int:
    """
    Validate a requested stay and return its night count.

    Same-day check-in is allowed; anything before ``today`` is not. Past
    dates are a validation error, never an "unavailable" answer.

    Raises:
        ValidationError: check-in in the past, or check-out not after check-in
    """
    if check_out <= check_in:
        raise ValidationError(
            "Check-out date must be after check-in date",
            {"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
        )
    if check_in < today:
        raise ValidationError(
            "Check-in date cannot be in the past",
            {"check_in": check_in.isoformat(), "today": today.isoformat()},
        )
    return nights_between(check_in, check_out)


def day_status(
    day: date,
    today: date,
    reservations: Iterable[Any],
    blocked_periods: Iterable[Any],
    now: datetime,
) -> Optional[str]:
    """
    Reason a single calendar day cannot start a night, or None if it is free.

    Returns one of ``past_date``, ``blocked`` or ``booked``.
    """
    if day < today:
        return "past_date"
    for block in blocked_periods:
        if block.start_date <= day <= block.end_date:
            return "blocked"
    for res in reservations:
        if blocks_calendar(res, now) and res.check_in <= day < res.check_out:
            return "booked"
    return None
