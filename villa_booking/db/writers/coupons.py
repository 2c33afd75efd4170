from typing import Any, Optional

from sqlalchemy import insert, update
from sqlalchemy.engine import Connection, Row

from villa_booking.models.coupons import Coupon


def insert_coupon(conn: Connection, values: dict[str, Any]) -> Row[Any]:
    result = conn.execute(insert(Coupon).values(**values).returning(*Coupon.__table__.c))
    return result.one()


def update_coupon(conn: Connection, coupon_id: int, changes: dict[str, Any]) -> Optional[Row[Any]]:
    """Apply ``changes`` to a coupon; None when it does not exist."""
    result = conn.execute(
        update(Coupon)
        .where(Coupon.id == coupon_id)
        .values(**changes)
        .returning(*Coupon.__table__.c)
    )
    return result.fetchone()
