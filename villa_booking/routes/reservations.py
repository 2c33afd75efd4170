"""Authenticated guest endpoints: checkout and the guest's own reservations."""

from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Engine

from villa_booking.dependencies import get_db_engine, get_notifier, require_caller
from villa_booking.identity import CallerIdentity
from villa_booking.schemas.booking import CancelPayload, CheckoutRequest, ReservationOut
from villa_booking.services.holds import checkout
from villa_booking.services.notifications import Notifier
from villa_booking.services.reservations import cancel_reservation, list_reservations

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/checkout", status_code=status.HTTP_201_CREATED, response_model=ReservationOut)
def create_reservation(
    payload: CheckoutRequest,
    caller: CallerIdentity = Depends(require_caller),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    """
    Book the quoted stay.

    The reservation is created PENDING under the property lock and
    immediately submitted for admin approval.

    Returns:
        ReservationOut: the reservation in AWAITING_APPROVAL
    """
    reservation = checkout(
        engine,
        caller.user_id,
        payload.check_in,
        payload.check_out,
        notifier,
        adults=payload.adults,
        children=payload.children,
        coupon_code=payload.coupon_code,
        expected_total=payload.expected_total,
        hold_token=payload.hold_token,
    )
    logger.info("checkout_completed", reservation_id=str(reservation.id), user_id=caller.user_id)
    return ReservationOut.model_validate(reservation)


@router.get("/reservations/mine", response_model=list[ReservationOut])
def my_reservations(
    caller: CallerIdentity = Depends(require_caller),
    engine: Engine = Depends(get_db_engine),
) -> list[ReservationOut]:
    rows = list_reservations(engine, user_id=caller.user_id)
    return [ReservationOut.model_validate(row) for row in rows]


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationOut)
def cancel_my_reservation(
    reservation_id: UUID,
    payload: Optional[CancelPayload] = None,
    caller: CallerIdentity = Depends(require_caller),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    """Guests may cancel their own reservation; admins any reservation."""
    reservation = cancel_reservation(
        engine,
        reservation_id,
        notifier,
        caller_id=caller.user_id,
        is_admin=caller.is_admin,
        reason=payload.reason if payload else None,
    )
    return ReservationOut.model_validate(reservation)
