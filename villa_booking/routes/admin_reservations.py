"""Admin reservation management: listing and lifecycle actions."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Engine

from villa_booking.core.lifecycle import ReservationStatus
from villa_booking.dependencies import get_db_engine, get_notifier, require_admin
from villa_booking.identity import CallerIdentity
from villa_booking.schemas.admin import DeclinePayload, ReschedulePayload
from villa_booking.schemas.booking import CancelPayload, ReservationOut
from villa_booking.services import reservations as reservation_service
from villa_booking.services.notifications import Notifier

router = APIRouter()


@router.get("/reservations", response_model=list[ReservationOut])
def list_all_reservations(
    status: Optional[ReservationStatus] = Query(None, description="Filter by status"),
    user_id: Optional[str] = Query(None, description="Filter by owner"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> list[ReservationOut]:
    rows = reservation_service.list_reservations(
        engine, status.value if status else None, user_id, limit, offset
    )
    return [ReservationOut.model_validate(row) for row in rows]


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
def get_reservation(
    reservation_id: UUID,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> ReservationOut:
    row = reservation_service.get_reservation(engine, reservation_id)
    return ReservationOut.model_validate(row)


@router.post("/reservations/{reservation_id}/approve", response_model=ReservationOut)
def approve(
    reservation_id: UUID,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    row = reservation_service.approve_reservation(engine, reservation_id, notifier)
    return ReservationOut.model_validate(row)


@router.post("/reservations/{reservation_id}/decline", response_model=ReservationOut)
def decline(
    reservation_id: UUID,
    payload: Optional[DeclinePayload] = None,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    row = reservation_service.decline_reservation(
        engine, reservation_id, notifier, reason=payload.reason if payload else None
    )
    return ReservationOut.model_validate(row)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationOut)
def cancel(
    reservation_id: UUID,
    payload: Optional[CancelPayload] = None,
    caller: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    row = reservation_service.cancel_reservation(
        engine,
        reservation_id,
        notifier,
        caller_id=caller.user_id,
        is_admin=True,
        reason=payload.reason if payload else None,
    )
    return ReservationOut.model_validate(row)


@router.post("/reservations/{reservation_id}/reschedule", response_model=ReservationOut)
def reschedule(
    reservation_id: UUID,
    payload: ReschedulePayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    row = reservation_service.reschedule_reservation(
        engine,
        reservation_id,
        payload.new_check_in,
        payload.new_check_out,
        notifier,
        reason=payload.reason,
    )
    return ReservationOut.model_validate(row)


@router.post("/reservations/{reservation_id}/mark-paid", response_model=ReservationOut)
def mark_paid(
    reservation_id: UUID,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationOut:
    row = reservation_service.mark_reservation_paid(engine, reservation_id, notifier)
    return ReservationOut.model_validate(row)
