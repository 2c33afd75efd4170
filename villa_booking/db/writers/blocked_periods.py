from datetime import date
from typing import Any, Optional

from sqlalchemy import delete, insert
from sqlalchemy.engine import Connection, Row

from villa_booking.models.blocked_periods import BlockedPeriod


def insert_blocked_period(
    conn: Connection, property_id: int, start: date, end: date, reason: Optional[str]
) -> Row[Any]:
    result = conn.execute(
        insert(BlockedPeriod)
        .values(property_id=property_id, start_date=start, end_date=end, reason=reason)
        .returning(*BlockedPeriod.__table__.c)
    )
    return result.one()


def delete_blocked_period(conn: Connection, blocked_period_id: int) -> bool:
    """Delete a blocked period; False when it did not exist."""
    result = conn.execute(delete(BlockedPeriod).where(BlockedPeriod.id == blocked_period_id))
    return result.rowcount > 0
