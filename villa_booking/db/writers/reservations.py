from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection, Row

from villa_booking.models.reservations import Reservation

logger = structlog.get_logger(__name__)


def insert_reservation(conn: Connection, values: dict[str, Any]) -> Row[Any]:
    """
    Insert a reservation and return the stored row.

    Args:
        conn: Active connection, inside the transaction holding the property lock
        values: Column values; ``id`` is generated when absent

    Returns:
        Row: The inserted reservation
    """
    result = conn.execute(
        insert(Reservation).values(**values).returning(*Reservation.__table__.c)
    )
    row = result.one()
    logger.info(
        "reservation_inserted",
        reservation_id=str(row.id),
        status=row.status,
        check_in=row.check_in.isoformat(),
        check_out=row.check_out.isoformat(),
    )
    return row


def apply_transition(
    conn: Connection,
    reservation_id: UUID,
    expected_status: str,
    changes: dict[str, Any],
) -> Optional[Row[Any]]:
    """
    Update a reservation only if it is still in ``expected_status``.

    Returns:
        Optional[Row]: The updated row, or None when the status moved on
        (or the reservation vanished) since it was read.
    """
    result = conn.execute(
        update(Reservation)
        .where(Reservation.id == reservation_id, Reservation.status == expected_status)
        .values(**changes)
        .returning(*Reservation.__table__.c)
    )
    return result.fetchone()
