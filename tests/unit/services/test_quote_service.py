"""
Unit tests for the quote service.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable
from unittest.mock import MagicMock, patch

import pytest

from villa_booking.config import HOLD_TTL_MINUTES
from villa_booking.core.errors import DateConflict, InvalidCouponError, ValidationError
from villa_booking.hold_tokens import verify_hold_token
from villa_booking.services._stay_context import StayContext
from villa_booking.services.quotes import price_request, quote


def _context(reservations: list | None = None, blocked: list | None = None) -> StayContext:
    return StayContext(
        seasons=[], custom_pricing=[], reservations=reservations or [], blocked_periods=blocked or []
    )


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_coupon_by_code")
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_quote_issues_hold_token(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_get_coupon: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    now: datetime,
) -> None:
    """Test that a successful quote carries a fresh hold token and expiry."""
    mock_get_property.return_value = make_property()
    mock_load_context.return_value = _context()

    result = quote(mock_engine, date(2025, 1, 8), date(2025, 1, 10), now=now)

    assert result.total == 66000
    assert result.weekday_nights == 1
    assert result.weekend_nights == 1
    assert result.currency == "ILS"
    verify_hold_token(result.hold_token, date(2025, 1, 8), date(2025, 1, 10), now)
    assert result.hold_expires_at == now + timedelta(minutes=HOLD_TTL_MINUTES)
    mock_get_coupon.assert_not_called()


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_coupon_by_code")
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_quotes_get_distinct_tokens(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_get_coupon: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    now: datetime,
) -> None:
    """Test that two quotes for the same stay never share a token."""
    mock_get_property.return_value = make_property()
    mock_load_context.return_value = _context()

    first = quote(mock_engine, date(2025, 1, 8), date(2025, 1, 10), now=now)
    second = quote(mock_engine, date(2025, 1, 8), date(2025, 1, 10), now=now)

    assert first.hold_token != second.hold_token


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_coupon_by_code")
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_quote_applies_coupon(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_get_coupon: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    make_coupon: Callable,
    now: datetime,
) -> None:
    """Test that a valid coupon discounts the quote and is looked up by code."""
    mock_get_property.return_value = make_property(
        weekday_rate=45000, weekend_rate=None, cleaning_fee=10000, vat_rate=Decimal("0.17")
    )
    mock_load_context.return_value = _context()
    mock_get_coupon.return_value = make_coupon()

    result = quote(mock_engine, date(2025, 1, 8), date(2025, 1, 10), coupon_code="save10", now=now)

    assert result.discount == 10000
    assert result.taxes == 15300
    assert result.total == 105300
    assert result.discount_description == "10% discount"
    mock_get_coupon.assert_called_once_with(mock_engine.conn, "save10")


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_coupon_by_code")
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_quote_with_unknown_coupon_fails(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_get_coupon: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    now: datetime,
) -> None:
    """Test that an explicitly supplied bad coupon fails instead of being ignored."""
    mock_get_property.return_value = make_property()
    mock_load_context.return_value = _context()
    mock_get_coupon.return_value = None

    with pytest.raises(InvalidCouponError):
        quote(mock_engine, date(2025, 1, 8), date(2025, 1, 10), coupon_code="NOPE", now=now)


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_coupon_by_code")
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_blank_coupon_code_is_ignored(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_get_coupon: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    now: datetime,
) -> None:
    """Test that an empty coupon field prices without a discount."""
    mock_get_property.return_value = make_property()
    mock_load_context.return_value = _context()

    result = quote(mock_engine, date(2025, 1, 8), date(2025, 1, 10), coupon_code="  ", now=now)

    assert result.discount == 0
    mock_get_coupon.assert_not_called()


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_property")
def test_past_dates_rejected_before_reading(
    mock_get_property: MagicMock, mock_engine: MagicMock, now: datetime
) -> None:
    """Test that a past check-in is a validation error and touches no storage."""
    with pytest.raises(ValidationError):
        quote(mock_engine, date(2024, 12, 30), date(2025, 1, 2), now=now)

    mock_get_property.assert_not_called()


@pytest.mark.unit
@patch("villa_booking.services.quotes.get_coupon_by_code")
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_conflict_reported_before_coupon(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_get_coupon: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    make_reservation: Callable,
    now: datetime,
) -> None:
    """Test that unavailable dates win over an invalid coupon."""
    mock_get_property.return_value = make_property()
    mock_load_context.return_value = _context(
        reservations=[make_reservation(date(2025, 1, 9), date(2025, 1, 11))]
    )
    mock_get_coupon.return_value = None

    with pytest.raises(DateConflict) as exc_info:
        price_request(mock_engine, date(2025, 1, 8), date(2025, 1, 10), coupon_code="NOPE", now=now)

    assert len(exc_info.value.conflicts) == 1


@pytest.mark.unit
@patch("villa_booking.services.quotes.load_stay_context")
@patch("villa_booking.services.quotes.get_property")
def test_night_bounds_checked_before_availability(
    mock_get_property: MagicMock,
    mock_load_context: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
    now: datetime,
) -> None:
    """Test that a too-short stay fails with a validation error."""
    mock_get_property.return_value = make_property(min_nights=2)

    with pytest.raises(ValidationError) as exc_info:
        quote(mock_engine, date(2025, 1, 8), date(2025, 1, 9), now=now)

    assert exc_info.value.details["min_nights"] == 2
    mock_load_context.assert_not_called()
