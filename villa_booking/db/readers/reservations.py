from datetime import date, datetime
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Connection, Row

from villa_booking.core.lifecycle import ACTIVE_STATUSES, ReservationStatus
from villa_booking.models.reservations import Reservation

_ACTIVE = [s.value for s in ACTIVE_STATUSES]


def get_reservation(
    conn: Connection, reservation_id: UUID, for_update: bool = False
) -> Optional[Row[Any]]:
    """
    Fetch one reservation by id.

    Args:
        conn (Connection): Active connection.
        reservation_id (UUID): Reservation id.
        for_update (bool): Lock the row until the transaction ends.

    Returns:
        Optional[Row]: The reservation, or None.
    """
    stmt = select(Reservation).where(Reservation.id == reservation_id)
    if for_update:
        stmt = stmt.with_for_update()
    return conn.execute(stmt).fetchone()


def list_overlapping_reservations(
    conn: Connection, property_id: int, check_in: date, check_out: date
) -> Sequence[Row[Any]]:
    """
    Reservations in an active status whose nights overlap ``[check_in, check_out)``.

    Hold expiry is not filtered here; ``core.availability`` decides whether
    a PENDING row still blocks, against the caller's clock.
    """
    result = conn.execute(
        select(Reservation)
        .where(
            Reservation.property_id == property_id,
            Reservation.status.in_(_ACTIVE),
            Reservation.check_in < check_out,
            Reservation.check_out > check_in,
        )
        .order_by(Reservation.check_in)
    )
    return result.fetchall()


def list_reservations(
    conn: Connection,
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> Sequence[Row[Any]]:
    """List reservations, newest first, optionally filtered by status or owner."""
    stmt = select(Reservation)
    if status is not None:
        stmt = stmt.where(Reservation.status == status)
    if user_id is not None:
        stmt = stmt.where(Reservation.user_id == user_id)
    stmt = stmt.order_by(Reservation.created_at.desc()).limit(limit).offset(offset)
    return conn.execute(stmt).fetchall()


def list_check_ins_on(conn: Connection, day: date) -> Sequence[Row[Any]]:
    """Confirmed (APPROVED or PAID) reservations checking in on ``day``."""
    result = conn.execute(
        select(Reservation)
        .where(
            Reservation.check_in == day,
            Reservation.status.in_(
                [ReservationStatus.APPROVED.value, ReservationStatus.PAID.value]
            ),
        )
        .order_by(Reservation.created_at)
    )
    return result.fetchall()


def list_expired_holds(conn: Connection, now: datetime) -> Sequence[Row[Any]]:
    """PENDING reservations whose hold lapsed at or before ``now``."""
    result = conn.execute(
        select(Reservation).where(
            Reservation.status == ReservationStatus.PENDING.value,
            (Reservation.hold_expires_at.is_(None)) | (Reservation.hold_expires_at <= now),
        )
    )
    return result.fetchall()


def hold_token_used(conn: Connection, hold_token: str) -> bool:
    """Whether a quote's hold token was already redeemed by a checkout."""
    result = conn.execute(
        select(Reservation.id).where(Reservation.hold_token == hold_token)
    )
    return result.fetchone() is not None
