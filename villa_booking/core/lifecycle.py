"""
Reservation lifecycle rules.

States:
    PENDING -> AWAITING_APPROVAL -> APPROVED -> PAID
    any non-terminal state -> CANCELLED

PENDING is a time-boxed hold. Once ``hold_expires_at`` has passed it no longer
blocks the calendar, but the row stays in storage until a transition (or the
optional reaper) moves it. Decline is a cancellation carrying a reason.

The functions here are pure: they validate the current row and return the
column changes to persist. Writers apply them with a ``WHERE status = ...``
guard so a concurrent transition cannot be overwritten.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from villa_booking.core.errors import InvalidTransition


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    AWAITING_APPROVAL = "AWAITING_APPROVAL"
    APPROVED = "APPROVED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset({ReservationStatus.PAID, ReservationStatus.CANCELLED})

# Statuses that occupy the calendar (PENDING only while its hold is live)
ACTIVE_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.AWAITING_APPROVAL,
    ReservationStatus.APPROVED,
    ReservationStatus.PAID,
)

RESCHEDULABLE_STATUSES = frozenset({ReservationStatus.APPROVED, ReservationStatus.PAID})

DEFAULT_DECLINE_REASON = "Declined by admin"
HOLD_EXPIRED_REASON = "hold_expired"


def _status(reservation: Any) -> ReservationStatus:
    return ReservationStatus(reservation.status)


def is_hold_expired(reservation: Any, now: datetime) -> bool:
    """
    True when a PENDING reservation's hold has lapsed.

    A PENDING row without an expiry is treated as expired: it was never a
    valid hold.
    """
    if _status(reservation) is not ReservationStatus.PENDING:
        return False
    expires_at = reservation.hold_expires_at
    return expires_at is None or expires_at <= now


def blocks_calendar(reservation: Any, now: datetime) -> bool:
    """Whether a reservation currently occupies its nights."""
    status = _status(reservation)
    if status not in ACTIVE_STATUSES:
        return False
    if status is ReservationStatus.PENDING:
        return not is_hold_expired(reservation, now)
    return True


def _ensure_not_terminal(reservation: Any, action: str) -> None:
    status = _status(reservation)
    if status in TERMINAL_STATUSES:
        raise InvalidTransition(
            f"Cannot {action} a reservation that is {status.value}",
            {"reservation_id": str(reservation.id), "status": status.value, "action": action},
        )


def submit_changes(reservation: Any, now: datetime) -> dict[str, Any]:
    """PENDING (live hold) -> AWAITING_APPROVAL."""
    status = _status(reservation)
    if status is not ReservationStatus.PENDING:
        raise InvalidTransition(
            f"Only PENDING reservations can be submitted, not {status.value}",
            {"reservation_id": str(reservation.id), "status": status.value, "action": "submit"},
        )
    if is_hold_expired(reservation, now):
        raise InvalidTransition(
            "Reservation hold has expired",
            {"reservation_id": str(reservation.id), "status": status.value, "action": "submit"},
        )
    return {"status": ReservationStatus.AWAITING_APPROVAL.value, "hold_expires_at": None}


def approve_changes(reservation: Any, now: datetime) -> dict[str, Any]:
    """AWAITING_APPROVAL -> APPROVED, stamping approved_at."""
    status = _status(reservation)
    if status is not ReservationStatus.AWAITING_APPROVAL:
        raise InvalidTransition(
            f"Only reservations awaiting approval can be approved, not {status.value}",
            {"reservation_id": str(reservation.id), "status": status.value, "action": "approve"},
        )
    return {"status": ReservationStatus.APPROVED.value, "approved_at": now}


def mark_paid_changes(reservation: Any, now: datetime) -> dict[str, Any]:
    """APPROVED -> PAID, stamping paid_at."""
    status = _status(reservation)
    if status is not ReservationStatus.APPROVED:
        raise InvalidTransition(
            f"Only approved reservations can be marked paid, not {status.value}",
            {"reservation_id": str(reservation.id), "status": status.value, "action": "mark_paid"},
        )
    return {"status": ReservationStatus.PAID.value, "paid_at": now}


def cancel_changes(reservation: Any, now: datetime, reason: str | None = None) -> dict[str, Any]:
    """Any non-terminal status -> CANCELLED."""
    _ensure_not_terminal(reservation, "cancel")
    return {
        "status": ReservationStatus.CANCELLED.value,
        "cancelled_at": now,
        "cancellation_reason": reason,
        "hold_expires_at": None,
    }


def decline_changes(reservation: Any, now: datetime, reason: str | None = None) -> dict[str, Any]:
    """Any non-terminal status -> CANCELLED with a decline reason."""
    _ensure_not_terminal(reservation, "decline")
    return {
        "status": ReservationStatus.CANCELLED.value,
        "cancelled_at": now,
        "cancellation_reason": reason or DEFAULT_DECLINE_REASON,
        "hold_expires_at": None,
    }


def ensure_reschedulable(reservation: Any) -> None:
    status = _status(reservation)
    if status not in RESCHEDULABLE_STATUSES:
        raise InvalidTransition(
            f"Only APPROVED or PAID reservations can be rescheduled, not {status.value}",
            {"reservation_id": str(reservation.id), "status": status.value, "action": "reschedule"},
        )
