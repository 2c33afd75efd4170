"""Admin endpoints for coupons, property settings and maintenance jobs."""

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Engine

from villa_booking.dependencies import get_db_engine, get_notifier, require_admin
from villa_booking.identity import CallerIdentity
from villa_booking.schemas.admin import (
    CouponCreatePayload,
    CouponOut,
    CouponUpdatePayload,
    PropertySettingsOut,
    PropertySettingsUpdatePayload,
    ReminderResult,
    SecurityDepositSettings,
)
from villa_booking.services import coupons as coupon_service
from villa_booking.services import settings as settings_service
from villa_booking.services.notifications import Notifier
from villa_booking.services.reminders import send_upcoming_check_in_reminders
from villa_booking.services.reservations import release_expired_holds

router = APIRouter()


@router.get("/coupons", response_model=list[CouponOut])
def list_coupons(
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> list[CouponOut]:
    return [CouponOut.model_validate(row) for row in coupon_service.list_coupons(engine)]


@router.post("/coupons", status_code=status.HTTP_201_CREATED, response_model=CouponOut)
def create_coupon(
    payload: CouponCreatePayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> CouponOut:
    """400 ``validation_error`` when both or neither discount is set, or the code exists."""
    row = coupon_service.create_coupon(engine, payload.model_dump())
    return CouponOut.model_validate(row)


@router.patch("/coupons/{coupon_id}", response_model=CouponOut)
def update_coupon(
    coupon_id: int,
    payload: CouponUpdatePayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> CouponOut:
    row = coupon_service.update_coupon_fields(
        engine, coupon_id, payload.model_dump(exclude_unset=True)
    )
    return CouponOut.model_validate(row)


@router.get("/property", response_model=PropertySettingsOut)
def get_property_settings(
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> PropertySettingsOut:
    return PropertySettingsOut.model_validate(settings_service.get_property_settings(engine))


@router.patch("/property", response_model=PropertySettingsOut)
def update_property_settings(
    payload: PropertySettingsUpdatePayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> PropertySettingsOut:
    row = settings_service.update_property_settings(
        engine, payload.model_dump(exclude_unset=True)
    )
    return PropertySettingsOut.model_validate(row)


@router.put("/security-deposit")
def update_security_deposit(
    payload: SecurityDepositSettings,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    settings = settings_service.update_security_deposit_settings(
        engine, payload.model_dump(exclude_none=True)
    )
    return {"success": True, "settings": settings}


@router.post("/reminders", response_model=ReminderResult)
def send_reminders(
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
    notifier: Notifier = Depends(get_notifier),
) -> ReminderResult:
    """Remind guests checking in tomorrow."""
    return ReminderResult(**send_upcoming_check_in_reminders(engine, notifier))


@router.post("/holds/release-expired")
def release_holds(
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    return {"success": True, "released": release_expired_holds(engine)}
