"""Public booking endpoints: quotes, availability, coupons, deposit terms."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Path
from sqlalchemy.engine import Engine

from villa_booking.dependencies import get_db_engine
from villa_booking.schemas.booking import (
    AvailabilityCheckRequest,
    CouponValidateRequest,
    CouponValidateResponse,
    DiscountOut,
    PublicCouponOut,
    QuoteRequest,
)
from villa_booking.services.availability import list_conflicts, month_calendar
from villa_booking.services.coupons import list_public_coupons, validate_coupon
from villa_booking.services.quotes import quote
from villa_booking.services.settings import get_security_deposit_settings

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/quote")
def create_quote(
    payload: QuoteRequest, engine: Engine = Depends(get_db_engine)
) -> dict[str, Any]:
    """
    Price a stay and issue a hold token.

    Returns:
        dict: ``success`` plus the quote (camelCase keys: ``lineItems``,
        ``holdToken``, ``holdExpiresAt`` ...)
    """
    result = quote(
        engine,
        payload.check_in,
        payload.check_out,
        coupon_code=payload.coupon_code,
        adults=payload.adults,
        children=payload.children,
    )
    return {"success": True, **result.model_dump(by_alias=True, mode="json")}


@router.post("/availability/check")
def check_availability(
    payload: AvailabilityCheckRequest, engine: Engine = Depends(get_db_engine)
) -> dict[str, Any]:
    """Whether a range is free, with the conflicting ranges when it is not."""
    conflicts = list_conflicts(engine, payload.check_in, payload.check_out)
    return {
        "success": True,
        "available": not conflicts,
        "conflicts": [c.model_dump(mode="json") for c in conflicts],
    }


@router.get("/availability/{year}/{month}")
def get_month_calendar(
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    days = month_calendar(engine, year, month)
    return {
        "success": True,
        "year": year,
        "month": month,
        "days": [d.model_dump(by_alias=True, mode="json") for d in days],
    }


@router.post("/coupons/validate", response_model=CouponValidateResponse)
def validate_coupon_code(
    payload: CouponValidateRequest, engine: Engine = Depends(get_db_engine)
) -> CouponValidateResponse:
    """Invalid codes come back as 400 ``invalid_coupon`` with ``details.reason``."""
    discount = validate_coupon(engine, payload.code, payload.nights)
    return CouponValidateResponse(
        discount=DiscountOut(
            code=discount.code,
            percent_off=discount.percent_off,
            amount_off=discount.amount_off,
            description=discount.description,
        )
    )


@router.get("/coupons/public", response_model=list[PublicCouponOut])
def get_public_coupons(engine: Engine = Depends(get_db_engine)) -> list[PublicCouponOut]:
    return [PublicCouponOut.model_validate(row) for row in list_public_coupons(engine)]


@router.get("/security-deposit")
def get_security_deposit(engine: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    return {"success": True, "settings": get_security_deposit_settings(engine)}
