"""
Quote service: price a stay and hand out a hold token.

A quote never writes. The hold token it issues is redeemed by checkout,
which re-prices and re-checks availability under the property lock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional

import structlog
from pydantic import Field
from sqlalchemy.engine import Engine

from villa_booking.config import CURRENCY, HOLD_TTL_MINUTES
from villa_booking.core.availability import find_conflicts, validate_stay_dates
from villa_booking.core.coupons import evaluate_coupon
from villa_booking.core.errors import BookingError, DateConflict
from villa_booking.core.pricing import (
    PriceBreakdown,
    price_stay,
    validate_guest_counts,
    validate_night_bounds,
)
from villa_booking.db.readers.coupons import get_coupon_by_code
from villa_booking.db.readers.property import get_property
from villa_booking.hold_tokens import issue_hold_token
from villa_booking.metrics import quote_duration, quotes_total
from villa_booking.services._stay_context import load_stay_context
from villa_booking.utils.datetime import property_today, utc_now

logger = structlog.get_logger(__name__)


class QuoteResult(PriceBreakdown):
    """Priced stay plus the hold token the checkout step must present."""

    check_in: date = Field(alias="checkIn")
    check_out: date = Field(alias="checkOut")
    adults: int
    children: int
    currency: str
    weekday_nights: int = Field(alias="weekdayNights")
    weekend_nights: int = Field(alias="weekendNights")
    season_nights: int = Field(alias="seasonNights")
    custom_nights: int = Field(alias="customNights")
    discount_description: Optional[str] = Field(
        default=None, alias="discountDescription"
    )
    hold_token: str = Field(alias="holdToken")
    hold_expires_at: datetime = Field(alias="holdExpiresAt")


def _clean_code(coupon_code: Optional[str]) -> Optional[str]:
    if coupon_code is None or not coupon_code.strip():
        return None
    return coupon_code


def price_request(
    engine: Engine,
    check_in: date,
    check_out: date,
    coupon_code: Optional[str] = None,
    adults: int = 1,
    children: int = 0,
    now: Optional[datetime] = None,
) -> tuple[Any, PriceBreakdown, Any]:
    """
    Validate and price a stay against the current calendar.

    Checks run in this order: dates, night bounds, guest counts, availability,
    coupon. The first failure is raised.

    Returns:
        tuple: (property row, breakdown, discount or None)

    Raises:
        ValidationError: bad dates, night count or guest counts
        DateConflict: the range overlaps an active reservation or a block
        InvalidCouponError: a coupon code was supplied and does not apply
        NotFound: no property is configured
    """
    now = now or utc_now()
    today = property_today(now)
    nights = validate_stay_dates(check_in, check_out, today)
    code = _clean_code(coupon_code)

    with engine.connect() as conn:
        property_ = get_property(conn)
        validate_night_bounds(nights, property_)
        validate_guest_counts(adults, children, property_.max_occupancy)
        context = load_stay_context(conn, property_.id, check_in, check_out)
        coupon = get_coupon_by_code(conn, code) if code else None

    conflicts = find_conflicts(
        check_in, check_out, context.reservations, context.blocked_periods, now
    )
    if conflicts:
        raise DateConflict(
            "Selected dates are not available",
            conflicts,
            {"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
        )

    discount = evaluate_coupon(coupon, code, nights, today) if code else None

    breakdown = price_stay(
        property_,
        check_in,
        check_out,
        adults=adults,
        children=children,
        seasons=context.seasons,
        custom_pricing=context.custom_pricing,
        discount=discount,
    )
    return property_, breakdown, discount


def quote(
    engine: Engine,
    check_in: date,
    check_out: date,
    coupon_code: Optional[str] = None,
    adults: int = 1,
    children: int = 0,
    now: Optional[datetime] = None,
) -> QuoteResult:
    """
    Price a stay and issue a hold token.

    Args:
        engine: SQLAlchemy engine
        check_in: First night
        check_out: Departure day
        coupon_code: Optional coupon as typed by the guest
        adults: Adult guests (at least one)
        children: Child guests
        now: Reference instant, defaults to the current UTC time

    Returns:
        QuoteResult with ``hold_token`` and ``hold_expires_at``

    Raises:
        BookingError: see ``price_request``
    """
    now = now or utc_now()
    try:
        with quote_duration.time():
            property_, breakdown, discount = price_request(
                engine, check_in, check_out, coupon_code, adults, children, now
            )
    except BookingError as e:
        quotes_total.labels(status=e.code).inc()
        logger.info(
            "quote_rejected",
            error=e.code,
            check_in=check_in.isoformat(),
            check_out=check_out.isoformat(),
            coupon_supplied=_clean_code(coupon_code) is not None,
        )
        raise

    hold_expires_at = now + timedelta(minutes=HOLD_TTL_MINUTES)
    quotes_total.labels(status="success").inc()
    logger.info(
        "quote_issued",
        check_in=check_in.isoformat(),
        check_out=check_out.isoformat(),
        nights=breakdown.nights,
        total=breakdown.total,
        coupon_supplied=discount is not None,
    )

    return QuoteResult(
        **breakdown.model_dump(),
        check_in=check_in,
        check_out=check_out,
        adults=adults,
        children=children,
        currency=property_.currency or CURRENCY,
        weekday_nights=breakdown.count_nights("weekday"),
        weekend_nights=breakdown.count_nights("weekend"),
        season_nights=breakdown.count_nights("season"),
        custom_nights=breakdown.count_nights("custom"),
        discount_description=discount.description if discount and breakdown.discount else None,
        hold_token=issue_hold_token(check_in, check_out, hold_expires_at),
        hold_expires_at=hold_expires_at,
    )
