from datetime import date
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection, Row

from villa_booking.models.pricing import CustomPricingEntry, Season


def list_seasons(
    conn: Connection,
    property_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Sequence[Row[Any]]:
    """Seasons of a property touching the inclusive window ``[start, end]``, earliest first."""
    stmt = select(Season).where(Season.property_id == property_id)
    if start is not None:
        stmt = stmt.where(Season.end_date >= start)
    if end is not None:
        stmt = stmt.where(Season.start_date <= end)
    return conn.execute(stmt.order_by(Season.start_date, Season.id)).fetchall()


def get_season(conn: Connection, season_id: int) -> Optional[Row[Any]]:
    return conn.execute(select(Season).where(Season.id == season_id)).fetchone()


def list_custom_pricing(
    conn: Connection,
    property_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Sequence[Row[Any]]:
    """Custom pricing entries with ``start <= date <= end``."""
    stmt = select(CustomPricingEntry).where(CustomPricingEntry.property_id == property_id)
    if start is not None:
        stmt = stmt.where(CustomPricingEntry.date >= start)
    if end is not None:
        stmt = stmt.where(CustomPricingEntry.date <= end)
    return conn.execute(stmt.order_by(CustomPricingEntry.date)).fetchall()
