"""
Unit tests for coupon eligibility rules.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from villa_booking.core.coupons import (
    Discount,
    evaluate_coupon,
    is_within_window,
    normalize_code,
    validate_discount_fields,
)
from villa_booking.core.errors import InvalidCouponError, ValidationError


@pytest.mark.unit
def test_normalize_code_upper_cases_and_strips() -> None:
    """Test that codes are case-insensitive."""
    assert normalize_code("  save10 ") == "SAVE10"


@pytest.mark.unit
def test_evaluate_coupon_returns_discount(make_coupon: Callable) -> None:
    """Test that an active coupon inside its window yields a discount."""
    discount = evaluate_coupon(make_coupon(), "save10", 2, date(2025, 1, 1))

    assert discount.code == "SAVE10"
    assert discount.percent_off == Decimal("10")
    assert discount.amount_off is None
    assert discount.description == "10% discount"


@pytest.mark.unit
def test_unknown_or_inactive_coupon_is_invalid(make_coupon: Callable) -> None:
    """Test that missing and inactive coupons fail with reason not_found."""
    with pytest.raises(InvalidCouponError) as missing:
        evaluate_coupon(None, "nope", 2, date(2025, 1, 1))
    with pytest.raises(InvalidCouponError) as inactive:
        evaluate_coupon(make_coupon(is_active=False), "SAVE10", 2, date(2025, 1, 1))

    assert missing.value.details["reason"] == "not_found"
    assert missing.value.details["code"] == "NOPE"
    assert inactive.value.details["reason"] == "not_found"


@pytest.mark.unit
def test_coupon_window_is_inclusive(make_coupon: Callable) -> None:
    """Test that the validity window includes both of its end dates."""
    coupon = make_coupon(valid_from=date(2025, 1, 1), valid_to=date(2025, 1, 31))

    assert is_within_window(coupon, date(2025, 1, 1))
    assert is_within_window(coupon, date(2025, 1, 31))
    assert not is_within_window(coupon, date(2024, 12, 31))
    assert not is_within_window(coupon, date(2025, 2, 1))


@pytest.mark.unit
def test_expired_coupon_is_invalid(make_coupon: Callable) -> None:
    """Test that a coupon past its valid_to is rejected with the window in details."""
    coupon = make_coupon(valid_to=date(2024, 12, 31))

    with pytest.raises(InvalidCouponError) as exc_info:
        evaluate_coupon(coupon, "SAVE10", 2, date(2025, 1, 1))

    assert exc_info.value.details["reason"] == "outside_validity_window"
    assert exc_info.value.details["valid_to"] == "2024-12-31"


@pytest.mark.unit
def test_coupon_min_nights(make_coupon: Callable) -> None:
    """Test that the coupon's own minimum stay is enforced when nights are known."""
    coupon = make_coupon(min_nights=3)

    with pytest.raises(InvalidCouponError) as exc_info:
        evaluate_coupon(coupon, "SAVE10", 2, date(2025, 1, 1))
    assert exc_info.value.details["reason"] == "min_nights"

    assert evaluate_coupon(coupon, "SAVE10", None, date(2025, 1, 1)).code == "SAVE10"


@pytest.mark.unit
def test_amount_coupon_description(make_coupon: Callable) -> None:
    """Test that fixed-amount coupons carry amount_off only."""
    coupon = make_coupon(percent_off=None, amount_off=5000)

    discount = evaluate_coupon(coupon, "SAVE10", 2, date(2025, 1, 1))

    assert discount.amount_off == 5000
    assert discount.percent_off is None
    assert discount.description == "5000 off"


@pytest.mark.unit
@pytest.mark.parametrize(
    "percent_off,amount_off",
    [
        (Decimal("10"), 500),
        (None, None),
        (Decimal("0"), None),
        (Decimal("100.01"), None),
        (None, 0),
    ],
)
def test_validate_discount_fields_rejects_bad_combinations(
    percent_off: Decimal | None, amount_off: int | None
) -> None:
    """Test that a coupon needs exactly one positive, in-range discount."""
    with pytest.raises(ValidationError):
        validate_discount_fields(percent_off, amount_off)


@pytest.mark.unit
def test_discount_model_enforces_exclusivity() -> None:
    """Test that building a Discount with both fields fails."""
    with pytest.raises(ValidationError):
        Discount(code="X", percent_off=Decimal("5"), amount_off=100)
