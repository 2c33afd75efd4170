"""
Unit tests for the stay pricing engine.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from villa_booking.core.coupons import Discount
from villa_booking.core.errors import ValidationError
from villa_booking.core.pricing import (
    compute_taxes,
    discount_amount,
    find_season,
    price_stay,
    resolve_nightly_rate,
    round_half_up,
)


@pytest.mark.unit
def test_price_stay_mixes_weekday_and_weekend_rates(make_property: Callable) -> None:
    """Test that Wednesday and Thursday nights use weekday and weekend rates."""
    villa = make_property()

    breakdown = price_stay(villa, date(2025, 1, 8), date(2025, 1, 10))

    assert breakdown.nights == 2
    assert [n.rate for n in breakdown.nightly_rates] == [30000, 36000]
    assert [n.source for n in breakdown.nightly_rates] == ["weekday", "weekend"]
    assert breakdown.base_price == 66000
    assert breakdown.total == 66000


@pytest.mark.unit
def test_price_stay_with_percent_coupon_fees_and_vat(make_property: Callable) -> None:
    """Test that discount applies to subtotal plus fees and VAT applies after discount."""
    villa = make_property(
        weekday_rate=45000, weekend_rate=None, cleaning_fee=10000, vat_rate=Decimal("0.17")
    )
    discount = Discount(code="SAVE10", percent_off=Decimal("10"))

    breakdown = price_stay(villa, date(2025, 1, 8), date(2025, 1, 10), discount=discount)

    assert breakdown.subtotal == 90000
    assert breakdown.fees == 10000
    assert breakdown.discount == 10000
    assert breakdown.pre_tax == 90000
    assert breakdown.taxes == 15300
    assert breakdown.total == 105300
    assert breakdown.coupon_code == "SAVE10"


@pytest.mark.unit
def test_line_items_sum_to_total(make_property: Callable) -> None:
    """Test that every line item, discount included, adds up to the total."""
    villa = make_property(
        price_per_adult=5000,
        price_per_child=2500,
        cleaning_fee=15000,
        vat_rate=Decimal("0.17"),
    )
    discount = Discount(code="FLAT", amount_off=12345)

    breakdown = price_stay(
        villa, date(2025, 3, 3), date(2025, 3, 9), adults=3, children=2, discount=discount
    )

    assert sum(item.amount for item in breakdown.line_items) == breakdown.total
    labels = [item.label for item in breakdown.line_items]
    assert "Per-adult supplement" in labels
    assert "Per-child supplement" in labels
    assert "Cleaning fee" in labels
    assert "Coupon discount (FLAT)" in labels
    assert "VAT (17%)" in labels


@pytest.mark.unit
def test_guest_supplements_are_per_night(make_property: Callable) -> None:
    """Test that adult and child supplements multiply by nights and head count."""
    villa = make_property(weekend_rate=None, price_per_adult=1000, price_per_child=500)

    breakdown = price_stay(villa, date(2025, 1, 6), date(2025, 1, 9), adults=2, children=1)

    assert breakdown.adult_supplement == 1000 * 3 * 2
    assert breakdown.child_supplement == 500 * 3
    assert breakdown.subtotal == 30000 * 3 + 6000 + 1500


@pytest.mark.unit
def test_min_nights_violation_raises(make_property: Callable) -> None:
    """Test that a one-night stay fails when the property requires two nights."""
    villa = make_property(min_nights=2)

    with pytest.raises(ValidationError) as exc_info:
        price_stay(villa, date(2025, 1, 8), date(2025, 1, 9))

    assert exc_info.value.details == {"nights": 1, "min_nights": 2}


@pytest.mark.unit
def test_max_nights_violation_raises(make_property: Callable) -> None:
    """Test that stays longer than max_nights are rejected."""
    villa = make_property(max_nights=3)

    with pytest.raises(ValidationError) as exc_info:
        price_stay(villa, date(2025, 1, 1), date(2025, 1, 5))

    assert exc_info.value.details["max_nights"] == 3


@pytest.mark.unit
def test_zero_night_stay_raises(make_property: Callable) -> None:
    """Test that check-out on the check-in day is rejected."""
    with pytest.raises(ValidationError):
        price_stay(make_property(), date(2025, 1, 8), date(2025, 1, 8))


@pytest.mark.unit
@pytest.mark.parametrize(
    "adults,children,max_occupancy",
    [(0, 0, None), (1, -1, None), (4, 3, 6)],
)
def test_guest_count_validation(
    make_property: Callable, adults: int, children: int, max_occupancy: int | None
) -> None:
    """Test that missing adults, negative children and over-occupancy are rejected."""
    villa = make_property(max_occupancy=max_occupancy)

    with pytest.raises(ValidationError):
        price_stay(villa, date(2025, 1, 8), date(2025, 1, 10), adults=adults, children=children)


@pytest.mark.unit
def test_rate_precedence_custom_over_season_over_weekend(
    make_property: Callable, make_season: Callable, make_custom_price: Callable
) -> None:
    """Test that custom pricing beats seasons, which beat weekend and weekday rates."""
    villa = make_property()
    seasons = [make_season(date(2025, 1, 9), date(2025, 1, 10), 50000)]
    custom = [make_custom_price(date(2025, 1, 10), 70000)]

    breakdown = price_stay(
        villa, date(2025, 1, 8), date(2025, 1, 12), seasons=seasons, custom_pricing=custom
    )

    assert [(n.rate, n.source) for n in breakdown.nightly_rates] == [
        (30000, "weekday"),
        (50000, "season"),
        (70000, "custom"),
        (36000, "weekend"),
    ]
    assert breakdown.count_nights("season") == 1


@pytest.mark.unit
def test_find_season_prefers_earliest_start(make_season: Callable) -> None:
    """Test that overlapping seasons resolve to the one that starts first."""
    late = make_season(date(2025, 7, 10), date(2025, 7, 31), 90000, name="Late", id=2)
    early = make_season(date(2025, 7, 1), date(2025, 7, 20), 80000, name="Early", id=1)

    assert find_season(date(2025, 7, 15), [late, early]) is early
    assert find_season(date(2025, 7, 25), [late, early]) is late
    assert find_season(date(2025, 8, 1), [late, early]) is None


@pytest.mark.unit
def test_custom_entry_overrides_guest_rates(
    make_property: Callable, make_custom_price: Callable
) -> None:
    """Test that custom per-adult pricing replaces the property default for that night."""
    villa = make_property(price_per_adult=1000, price_per_child=500)
    entry = make_custom_price(date(2025, 1, 8), 40000, price_per_adult=2000)

    rate = resolve_nightly_rate(date(2025, 1, 8), villa, [], {entry.date: entry})

    assert rate.adult_rate == 2000
    assert rate.child_rate == 500


@pytest.mark.unit
def test_custom_weekend_days(make_property: Callable) -> None:
    """Test that the weekend set comes from the property when configured."""
    villa = make_property(weekend_days=[5, 6])

    thursday = resolve_nightly_rate(date(2025, 1, 9), villa, [], {})
    saturday = resolve_nightly_rate(date(2025, 1, 11), villa, [], {})

    assert thursday.source == "weekday"
    assert saturday.source == "weekend"


@pytest.mark.unit
def test_discount_never_exceeds_amount() -> None:
    """Test that a fixed discount larger than the amount is capped."""
    discount = Discount(code="BIG", amount_off=500000)

    assert discount_amount(100000, discount) == 100000
    assert discount_amount(0, discount) == 0
    assert discount_amount(100000, None) == 0


@pytest.mark.unit
def test_capped_discount_yields_zero_total(make_property: Callable) -> None:
    """Test that a discount covering the whole stay leaves nothing to tax."""
    villa = make_property(vat_rate=Decimal("0.17"))

    breakdown = price_stay(
        villa, date(2025, 1, 6), date(2025, 1, 7), discount=Discount(code="FREE", amount_off=999999)
    )

    assert breakdown.total == 0
    assert breakdown.taxes == 0


@pytest.mark.unit
def test_rounding_is_half_up() -> None:
    """Test that half values round away from zero."""
    assert round_half_up(Decimal("0.5")) == 1
    assert round_half_up(Decimal("2.5")) == 3
    assert compute_taxes(50, Decimal("0.17")) == 9  # 8.5
    assert compute_taxes(1000, None) == 0


@pytest.mark.unit
def test_breakdown_serializes_with_camel_case_aliases(make_property: Callable) -> None:
    """Test that nightly rates dump under the public field names."""
    breakdown = price_stay(make_property(), date(2025, 1, 8), date(2025, 1, 9))

    data = breakdown.model_dump(by_alias=True, mode="json")

    assert data["basePrice"] == 30000
    assert data["nightlyRates"][0]["date"] == "2025-01-08"
    assert "lineItems" in data
