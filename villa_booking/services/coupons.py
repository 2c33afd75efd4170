"""Coupon validation for guests and coupon administration."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

import structlog
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError

from villa_booking.core.coupons import (
    Discount,
    evaluate_coupon,
    is_within_window,
    normalize_code,
    validate_discount_fields,
)
from villa_booking.core.errors import NotFound, ValidationError
from villa_booking.db.readers import coupons as coupon_reader
from villa_booking.db.writers.coupons import insert_coupon, update_coupon
from villa_booking.utils.datetime import property_today, utc_now

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = (
    "code",
    "description",
    "percent_off",
    "amount_off",
    "valid_from",
    "valid_to",
    "min_nights",
    "is_active",
    "is_public",
)


def validate_coupon(
    engine: Engine, code: str, nights: Optional[int] = None, now: Optional[datetime] = None
) -> Discount:
    """
    Check a coupon code for a booking.

    Args:
        engine: SQLAlchemy engine
        code: Code as typed, any case
        nights: Night count of the intended stay, when known
        now: Reference instant; the validity window is checked on the
            property's calendar day

    Returns:
        Discount: exactly one of ``percent_off`` / ``amount_off`` set

    Raises:
        InvalidCouponError: unknown, inactive, outside its window, or the
            stay is shorter than the coupon's minimum
    """
    today = property_today(now or utc_now())
    with engine.connect() as conn:
        coupon = coupon_reader.get_coupon_by_code(conn, code)
    return evaluate_coupon(coupon, code, nights, today)


def list_coupons(engine: Engine) -> Sequence[Row[Any]]:
    with engine.connect() as conn:
        return coupon_reader.list_coupons(conn)


def list_public_coupons(engine: Engine, today: Optional[date] = None) -> list[Row[Any]]:
    """Active public coupons whose validity window includes ``today``."""
    today = today or property_today(utc_now())
    with engine.connect() as conn:
        rows = coupon_reader.list_coupons(conn, public_only=True)
    return [row for row in rows if is_within_window(row, today)]


def _validate_coupon_values(values: dict[str, Any]) -> None:
    if not values.get("code"):
        raise ValidationError("Coupon code is required", {"field": "code"})
    validate_discount_fields(values.get("percent_off"), values.get("amount_off"))
    valid_from, valid_to = values.get("valid_from"), values.get("valid_to")
    if valid_from is not None and valid_to is not None and valid_from > valid_to:
        raise ValidationError(
            "valid_from must not be after valid_to",
            {"valid_from": valid_from.isoformat(), "valid_to": valid_to.isoformat()},
        )
    min_nights = values.get("min_nights")
    if min_nights is not None and min_nights < 1:
        raise ValidationError("min_nights must be at least 1", {"min_nights": min_nights})


def _duplicate(code: str) -> ValidationError:
    return ValidationError(
        "A coupon with this code already exists", {"code": code, "reason": "duplicate"}
    )


def create_coupon(engine: Engine, values: dict[str, Any]) -> Row[Any]:
    """
    Create a coupon.

    Raises:
        ValidationError: both or neither discount set, bad window, or the
            code already exists
    """
    values = {k: v for k, v in values.items() if k in EDITABLE_FIELDS}
    values["code"] = normalize_code(values.get("code") or "")
    if values.get("percent_off") is not None:
        values["percent_off"] = Decimal(str(values["percent_off"]))
    _validate_coupon_values(values)

    try:
        with engine.begin() as conn:
            if coupon_reader.get_coupon_by_code(conn, values["code"]) is not None:
                raise _duplicate(values["code"])
            row = insert_coupon(conn, values)
    except IntegrityError as e:
        raise _duplicate(values["code"]) from e

    logger.info("coupon_created", coupon_id=row.id, code=row.code)
    return row


def update_coupon_fields(engine: Engine, coupon_id: int, changes: dict[str, Any]) -> Row[Any]:
    """
    Update a coupon; the merged result must still be a valid coupon.

    Raises:
        NotFound: no such coupon
        ValidationError: see ``create_coupon``
    """
    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "code" in changes:
        changes["code"] = normalize_code(changes["code"] or "")
    if changes.get("percent_off") is not None:
        changes["percent_off"] = Decimal(str(changes["percent_off"]))

    try:
        with engine.begin() as conn:
            current = coupon_reader.get_coupon(conn, coupon_id)
            if current is None:
                raise NotFound("Coupon not found", {"coupon_id": coupon_id})
            merged = {field: getattr(current, field) for field in EDITABLE_FIELDS}
            merged.update(changes)
            _validate_coupon_values(merged)
            if "code" in changes and changes["code"] != current.code:
                if coupon_reader.get_coupon_by_code(conn, changes["code"]) is not None:
                    raise _duplicate(changes["code"])
            row = update_coupon(conn, coupon_id, changes)
    except IntegrityError as e:
        raise _duplicate(changes.get("code", "")) from e

    logger.info("coupon_updated", coupon_id=coupon_id, fields=sorted(changes))
    return row
