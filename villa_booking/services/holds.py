"""
Hold creation and checkout.

Creating a hold is the one write where a race matters: the quote and the
checkout are separate requests. The conflict check and the insert therefore
run in one transaction behind the property's advisory lock, so two guests
checking out overlapping dates are serialized and the second one sees the
first one's hold. Checkout also submits the hold in that same transaction,
so a failure at any step leaves no reservation behind.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Connection, Engine, Row

from villa_booking.config import CURRENCY, HOLD_TTL_MINUTES
from villa_booking.core.availability import find_conflicts
from villa_booking.core.errors import DateConflict, ValidationError
from villa_booking.core.lifecycle import ReservationStatus, submit_changes
from villa_booking.core.pricing import PriceBreakdown
from villa_booking.db.locks import lock_property
from villa_booking.db.readers.property import get_property
from villa_booking.db.readers.reservations import hold_token_used
from villa_booking.db.writers.reservations import insert_reservation
from villa_booking.hold_tokens import verify_hold_token
from villa_booking.metrics import holds_total
from villa_booking.services._stay_context import load_occupancy
from villa_booking.services.notifications import NotificationKind, Notifier, notify
from villa_booking.services.quotes import price_request
from villa_booking.services.reservations import transition_in
from villa_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def _create_hold_in(
    conn: Connection,
    user_id: str,
    check_in: date,
    check_out: date,
    breakdown: PriceBreakdown,
    adults: int,
    children: int,
    hold_token: Optional[str],
    now: datetime,
) -> Row[Any]:
    """Lock the property, re-check the range and insert the PENDING row on ``conn``."""
    property_ = get_property(conn)
    lock_property(conn, property_.id)

    if hold_token and hold_token_used(conn, hold_token):
        raise ValidationError(
            "This quote has already been used",
            {"reason": "hold_token_used"},
        )

    reservations, blocked = load_occupancy(conn, property_.id, check_in, check_out)
    conflicts = find_conflicts(check_in, check_out, reservations, blocked, now)
    if conflicts:
        holds_total.labels(status="date_conflict").inc()
        logger.info(
            "hold_rejected",
            check_in=check_in.isoformat(),
            check_out=check_out.isoformat(),
            conflicts=len(conflicts),
        )
        raise DateConflict(
            "Selected dates are not available",
            conflicts,
            {"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
        )

    return insert_reservation(
        conn,
        {
            "property_id": property_.id,
            "user_id": user_id,
            "check_in": check_in,
            "check_out": check_out,
            "nights": breakdown.nights,
            "adults": adults,
            "children": children,
            "subtotal": breakdown.subtotal,
            "fees": breakdown.fees,
            "discount": breakdown.discount,
            "taxes": breakdown.taxes,
            "total": breakdown.total,
            "currency": property_.currency or CURRENCY,
            "coupon_code": breakdown.coupon_code,
            "status": ReservationStatus.PENDING.value,
            "hold_token": hold_token,
            "hold_expires_at": now + timedelta(minutes=HOLD_TTL_MINUTES),
        },
    )


def create_hold(
    engine: Engine,
    user_id: str,
    check_in: date,
    check_out: date,
    breakdown: PriceBreakdown,
    adults: int = 1,
    children: int = 0,
    hold_token: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Row[Any]:
    """
    Insert a PENDING reservation if, and only if, the range is still free.

    Args:
        engine: SQLAlchemy engine
        user_id: Owner of the reservation
        check_in: First night
        check_out: Departure day
        breakdown: Price computed for this stay
        adults: Adult guests
        children: Child guests
        hold_token: Quote token being redeemed, stored to make it single use
        now: Reference instant

    Returns:
        Row: The PENDING reservation, hold expiring ``HOLD_TTL_MINUTES`` from now

    Raises:
        DateConflict: the range overlaps an active reservation or a block;
            nothing is written
        ValidationError: ``hold_token`` was already redeemed
    """
    now = now or utc_now()

    with engine.begin() as conn:
        row = _create_hold_in(
            conn, user_id, check_in, check_out, breakdown, adults, children, hold_token, now
        )

    holds_total.labels(status="created").inc()
    logger.info(
        "hold_created", reservation_id=str(row.id), expires_at=row.hold_expires_at.isoformat()
    )
    return row


def submit_for_approval(
    engine: Engine, reservation_id: UUID, now: Optional[datetime] = None
) -> Row[Any]:
    """PENDING (live hold) -> AWAITING_APPROVAL."""
    now = now or utc_now()
    with engine.begin() as conn:
        _, updated = transition_in(
            conn, reservation_id, "submit", lambda res: submit_changes(res, now)
        )
    return updated


def checkout(
    engine: Engine,
    user_id: str,
    check_in: date,
    check_out: date,
    notifier: Notifier,
    adults: int = 1,
    children: int = 0,
    coupon_code: Optional[str] = None,
    expected_total: Optional[int] = None,
    hold_token: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Row[Any]:
    """
    Turn a quote into a reservation awaiting admin approval.

    The quote's token must match the stay and still be live. The stay is
    re-priced server side; a client total that no longer matches is rejected
    so the guest never books at a price they did not see. The hold is then
    created and submitted in one transaction under the property lock, and
    the admin is notified once it has committed.

    Returns:
        Row: The reservation in AWAITING_APPROVAL

    Raises:
        ValidationError: invalid request, missing/expired/foreign quote token,
            changed price, or reused quote
        DateConflict: the dates were taken since the quote
        InvalidCouponError: the coupon no longer applies
    """
    now = now or utc_now()
    verify_hold_token(hold_token, check_in, check_out, now)
    _, breakdown, _ = price_request(
        engine, check_in, check_out, coupon_code, adults, children, now
    )

    if expected_total is not None and expected_total != breakdown.total:
        raise ValidationError(
            "The price of this stay has changed, please review the new quote",
            {"reason": "quote_changed", "expected_total": expected_total, "total": breakdown.total},
        )

    with engine.begin() as conn:
        hold = _create_hold_in(
            conn, user_id, check_in, check_out, breakdown, adults, children, hold_token, now
        )
        _, submitted = transition_in(
            conn, hold.id, "submit", lambda res: submit_changes(res, now)
        )

    holds_total.labels(status="created").inc()
    logger.info("checkout_completed", reservation_id=str(submitted.id), total=submitted.total)
    notify(notifier, NotificationKind.APPROVAL_REQUIRED, submitted)
    return submitted
