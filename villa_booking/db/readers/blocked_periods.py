from datetime import date
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection, Row

from villa_booking.models.blocked_periods import BlockedPeriod


def list_blocked_periods(
    conn: Connection,
    property_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Sequence[Row[Any]]:
    """
    Blocked periods of a property, optionally limited to those touching a window.

    Args:
        conn (Connection): Active connection.
        property_id (int): Property id.
        start (Optional[date]): Keep blocks ending on or after this day.
        end (Optional[date]): Keep blocks starting on or before this day.

    Returns:
        Sequence[Row]: Blocked periods ordered by start date.
    """
    stmt = select(BlockedPeriod).where(BlockedPeriod.property_id == property_id)
    if start is not None:
        stmt = stmt.where(BlockedPeriod.end_date >= start)
    if end is not None:
        stmt = stmt.where(BlockedPeriod.start_date <= end)
    return conn.execute(stmt.order_by(BlockedPeriod.start_date)).fetchall()


def get_blocked_period(conn: Connection, blocked_period_id: int) -> Optional[Row[Any]]:
    result = conn.execute(select(BlockedPeriod).where(BlockedPeriod.id == blocked_period_id))
    return result.fetchone()
