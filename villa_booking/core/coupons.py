"""Coupon rules: normalization, discount exclusivity and booking-time eligibility."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, model_validator

from villa_booking.core.errors import InvalidCouponError, ValidationError


class Discount(BaseModel):
    """Discount descriptor: exactly one of percent_off / amount_off."""

    code: str
    percent_off: Optional[Decimal] = None
    amount_off: Optional[int] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Discount":
        validate_discount_fields(self.percent_off, self.amount_off)
        return self

    @property
    def description(self) -> str:
        if self.percent_off is not None:
            return f"{self.percent_off.normalize():f}% discount"
        return f"{self.amount_off} off"


def normalize_code(code: str) -> str:
    """Coupon codes are case-insensitive and stored upper-cased."""
    return code.strip().upper()


def validate_discount_fields(percent_off: Any, amount_off: Any) -> None:
    """
    Enforce that a coupon discounts either by percentage or by amount.

    Raises:
        ValidationError: both or neither set, or a value out of range
    """
    if percent_off is not None and amount_off is not None:
        raise ValidationError(
            "A coupon cannot have both percent_off and amount_off",
            {"percent_off": str(percent_off), "amount_off": amount_off},
        )
    if percent_off is None and amount_off is None:
        raise ValidationError("A coupon needs either percent_off or amount_off")
    if percent_off is not None and not (Decimal(0) < Decimal(str(percent_off)) <= Decimal(100)):
        raise ValidationError(
            "percent_off must be greater than 0 and at most 100",
            {"percent_off": str(percent_off)},
        )
    if amount_off is not None and int(amount_off) <= 0:
        raise ValidationError("amount_off must be positive", {"amount_off": amount_off})


def is_within_window(coupon: Any, today: date) -> bool:
    """Validity window check, inclusive at both ends; open ends always pass."""
    if coupon.valid_from is not None and today < coupon.valid_from:
        return False
    if coupon.valid_to is not None and today > coupon.valid_to:
        return False
    return True


def evaluate_coupon(coupon: Any, code: str, nights: Optional[int], today: date) -> Discount:
    """
    Decide whether a looked-up coupon row applies to a booking.

    Args:
        coupon: Coupon row or None when the code was not found
        code: Code as entered by the guest
        nights: Night count of the stay, when known
        today: Booking date in the property timezone

    Returns:
        Discount descriptor

    Raises:
        InvalidCouponError: unknown, inactive, outside its window, or minimum
            nights not met
    """
    normalized = normalize_code(code)
    if coupon is None or not coupon.is_active:
        raise InvalidCouponError("Invalid coupon code", {"code": normalized, "reason": "not_found"})

    if not is_within_window(coupon, today):
        raise InvalidCouponError(
            "Coupon is not valid for these dates",
            {
                "code": normalized,
                "reason": "outside_validity_window",
                "valid_from": coupon.valid_from.isoformat() if coupon.valid_from else None,
                "valid_to": coupon.valid_to.isoformat() if coupon.valid_to else None,
            },
        )

    if coupon.min_nights and nights is not None and nights < coupon.min_nights:
        raise InvalidCouponError(
            f"This coupon requires a minimum of {coupon.min_nights} nights",
            {"code": normalized, "reason": "min_nights", "min_nights": coupon.min_nights,
             "nights": nights},
        )

    return Discount(
        code=coupon.code,
        percent_off=Decimal(str(coupon.percent_off)) if coupon.percent_off is not None else None,
        amount_off=int(coupon.amount_off) if coupon.amount_off is not None else None,
    )
