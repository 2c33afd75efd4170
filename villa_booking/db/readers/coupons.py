from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection, Row

from villa_booking.core.coupons import normalize_code
from villa_booking.models.coupons import Coupon


def get_coupon_by_code(conn: Connection, code: str) -> Optional[Row[Any]]:
    """
    Look a coupon up by code, case-insensitively.

    Codes are stored upper-cased, so the lookup upper-cases its input.

    Args:
        conn (Connection): Active connection.
        code (str): Code as typed by the guest.

    Returns:
        Optional[Row]: The coupon row whether active or not, or None.
    """
    result = conn.execute(select(Coupon).where(Coupon.code == normalize_code(code)))
    return result.fetchone()


def get_coupon(conn: Connection, coupon_id: int) -> Optional[Row[Any]]:
    return conn.execute(select(Coupon).where(Coupon.id == coupon_id)).fetchone()


def list_coupons(conn: Connection, public_only: bool = False) -> Sequence[Row[Any]]:
    """All coupons, or only active public ones; newest first."""
    stmt = select(Coupon)
    if public_only:
        stmt = stmt.where(Coupon.is_active.is_(True), Coupon.is_public.is_(True))
    return conn.execute(stmt.order_by(Coupon.created_at.desc(), Coupon.id.desc())).fetchall()
