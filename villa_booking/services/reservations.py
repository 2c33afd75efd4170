"""
Reservation lifecycle actions: approve, decline, cancel, mark paid, reschedule.

Each action reads the row, asks ``core.lifecycle`` for the column changes
and writes them with a status guard inside one transaction. Guest-visible
transitions notify after commit.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence
from uuid import UUID

import structlog
from sqlalchemy.engine import Connection, Engine, Row

from villa_booking.core.availability import find_conflicts, validate_stay_dates
from villa_booking.core.errors import DateConflict, Forbidden, InvalidTransition, NotFound
from villa_booking.core.lifecycle import (
    HOLD_EXPIRED_REASON,
    approve_changes,
    cancel_changes,
    decline_changes,
    ensure_reschedulable,
    mark_paid_changes,
)
from villa_booking.db.locks import lock_property
from villa_booking.db.readers import reservations as reservation_reader
from villa_booking.db.writers.reservations import apply_transition
from villa_booking.metrics import reservation_transitions
from villa_booking.services._stay_context import load_occupancy
from villa_booking.services.notifications import NotificationKind, Notifier, notify
from villa_booking.utils.datetime import property_today, utc_now

logger = structlog.get_logger(__name__)

ChangeBuilder = Callable[[Any], dict[str, Any]]


def _not_found(reservation_id: Any) -> NotFound:
    return NotFound("Reservation not found", {"reservation_id": str(reservation_id)})


def get_reservation(engine: Engine, reservation_id: UUID) -> Row[Any]:
    """Raises NotFound when the reservation does not exist."""
    with engine.connect() as conn:
        row = reservation_reader.get_reservation(conn, reservation_id)
    if row is None:
        raise _not_found(reservation_id)
    return row


def list_reservations(
    engine: Engine,
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> Sequence[Row[Any]]:
    with engine.connect() as conn:
        return reservation_reader.list_reservations(conn, status, user_id, limit, offset)


def transition_in(
    conn: Connection,
    reservation_id: UUID,
    action: str,
    build_changes: ChangeBuilder,
    authorize: Optional[Callable[[Any], None]] = None,
) -> tuple[Row[Any], Row[Any]]:
    """
    Apply one lifecycle transition inside an open transaction.

    Args:
        conn: Connection inside ``engine.begin()``
        reservation_id: Reservation to move
        action: Transition name for metrics and logs
        build_changes: Returns the column changes for the current row, or
            raises InvalidTransition
        authorize: Optional check run on the current row before anything else

    Returns:
        tuple: (row before, row after)

    Raises:
        NotFound: no such reservation
        InvalidTransition: not allowed from the current status, or the
            status changed concurrently
    """
    current = reservation_reader.get_reservation(conn, reservation_id, for_update=True)
    if current is None:
        raise _not_found(reservation_id)
    if authorize is not None:
        authorize(current)

    try:
        changes = build_changes(current)
    except InvalidTransition:
        reservation_transitions.labels(transition=action, status="rejected").inc()
        raise

    updated = apply_transition(conn, current.id, current.status, changes)
    if updated is None:
        reservation_transitions.labels(transition=action, status="rejected").inc()
        raise InvalidTransition(
            "Reservation was modified concurrently",
            {"reservation_id": str(reservation_id), "status": current.status, "action": action},
        )

    reservation_transitions.labels(transition=action, status="success").inc()
    logger.info(
        "reservation_transitioned",
        action=action,
        reservation_id=str(current.id),
        from_status=current.status,
        to_status=updated.status,
    )
    return current, updated


def _transition(
    engine: Engine,
    reservation_id: UUID,
    action: str,
    build_changes: ChangeBuilder,
    authorize: Optional[Callable[[Any], None]] = None,
) -> tuple[Row[Any], Row[Any]]:
    with engine.begin() as conn:
        return transition_in(conn, reservation_id, action, build_changes, authorize)


def approve_reservation(
    engine: Engine, reservation_id: UUID, notifier: Notifier, now: Optional[datetime] = None
) -> Row[Any]:
    """AWAITING_APPROVAL -> APPROVED; notifies the guest."""
    now = now or utc_now()
    _, updated = _transition(
        engine, reservation_id, "approve", lambda res: approve_changes(res, now)
    )
    notify(notifier, NotificationKind.APPROVED, updated)
    return updated


def decline_reservation(
    engine: Engine,
    reservation_id: UUID,
    notifier: Notifier,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Row[Any]:
    """Non-terminal -> CANCELLED with a decline reason; notifies the guest."""
    now = now or utc_now()
    _, updated = _transition(
        engine, reservation_id, "decline", lambda res: decline_changes(res, now, reason)
    )
    notify(notifier, NotificationKind.DECLINED, updated, reason=updated.cancellation_reason)
    return updated


def cancel_reservation(
    engine: Engine,
    reservation_id: UUID,
    notifier: Notifier,
    caller_id: Optional[str] = None,
    is_admin: bool = False,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Row[Any]:
    """
    Cancel a non-terminal reservation.

    Admins may cancel any reservation; anyone else only their own.

    Raises:
        Forbidden: caller is neither admin nor the owner
        InvalidTransition: reservation already PAID or CANCELLED
    """
    now = now or utc_now()

    def authorize(res: Any) -> None:
        if not is_admin and res.user_id != caller_id:
            raise Forbidden(
                "You can only cancel your own reservations",
                {"reservation_id": str(res.id)},
            )

    _, updated = _transition(
        engine,
        reservation_id,
        "cancel",
        lambda res: cancel_changes(res, now, reason),
        authorize=authorize,
    )
    notify(notifier, NotificationKind.CANCELLED, updated, reason=reason)
    return updated


def mark_reservation_paid(
    engine: Engine, reservation_id: UUID, notifier: Notifier, now: Optional[datetime] = None
) -> Row[Any]:
    """APPROVED -> PAID; sends the booking confirmation."""
    now = now or utc_now()
    _, updated = _transition(
        engine, reservation_id, "mark_paid", lambda res: mark_paid_changes(res, now)
    )
    notify(notifier, NotificationKind.CONFIRMATION, updated)
    return updated


def reschedule_reservation(
    engine: Engine,
    reservation_id: UUID,
    new_check_in: date,
    new_check_out: date,
    notifier: Notifier,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Row[Any]:
    """
    Move an APPROVED or PAID reservation to new dates.

    The new range is checked against every other active reservation and
    every blocked period under the property lock; the reservation's own
    current nights never conflict with it. Stored prices are kept and
    ``nights`` is recomputed.

    Raises:
        ValidationError: invalid or past dates
        NotFound: no such reservation
        InvalidTransition: status is not APPROVED or PAID
        DateConflict: the new range is taken
    """
    now = now or utc_now()
    nights = validate_stay_dates(new_check_in, new_check_out, property_today(now))

    with engine.begin() as conn:
        current = reservation_reader.get_reservation(conn, reservation_id)
        if current is None:
            raise _not_found(reservation_id)
        try:
            ensure_reschedulable(current)
        except InvalidTransition:
            reservation_transitions.labels(transition="reschedule", status="rejected").inc()
            raise

        lock_property(conn, current.property_id)
        reservations, blocked = load_occupancy(
            conn, current.property_id, new_check_in, new_check_out
        )
        conflicts = find_conflicts(
            new_check_in,
            new_check_out,
            reservations,
            blocked,
            now,
            exclude_reservation_id=current.id,
        )
        if conflicts:
            reservation_transitions.labels(transition="reschedule", status="rejected").inc()
            raise DateConflict(
                "Selected dates are not available",
                conflicts,
                {
                    "reservation_id": str(current.id),
                    "check_in": new_check_in.isoformat(),
                    "check_out": new_check_out.isoformat(),
                },
            )

        updated = apply_transition(
            conn,
            current.id,
            current.status,
            {"check_in": new_check_in, "check_out": new_check_out, "nights": nights},
        )
        if updated is None:
            reservation_transitions.labels(transition="reschedule", status="rejected").inc()
            raise InvalidTransition(
                "Reservation was modified concurrently",
                {"reservation_id": str(current.id), "action": "reschedule"},
            )

    reservation_transitions.labels(transition="reschedule", status="success").inc()
    logger.info(
        "reservation_rescheduled",
        reservation_id=str(current.id),
        old_check_in=current.check_in.isoformat(),
        old_check_out=current.check_out.isoformat(),
        check_in=new_check_in.isoformat(),
        check_out=new_check_out.isoformat(),
    )
    notify(
        notifier,
        NotificationKind.RESCHEDULED,
        updated,
        old_check_in=current.check_in,
        old_check_out=current.check_out,
        reason=reason,
    )
    return updated


def release_expired_holds(engine: Engine, now: Optional[datetime] = None) -> int:
    """
    Cancel PENDING reservations whose hold lapsed, with reason ``hold_expired``.

    Availability already ignores expired holds; this only tidies storage.
    No notification is sent since the guest never submitted the booking.

    Returns:
        int: Number of holds released
    """
    now = now or utc_now()
    released = 0
    with engine.begin() as conn:
        for row in reservation_reader.list_expired_holds(conn, now):
            changes = cancel_changes(row, now, HOLD_EXPIRED_REASON)
            if apply_transition(conn, row.id, row.status, changes) is not None:
                released += 1
    if released:
        reservation_transitions.labels(transition="expire", status="success").inc(released)
    logger.info("expired_holds_released", count=released)
    return released
