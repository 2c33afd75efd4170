"""
Deterministic price computation for a stay.

All money is integer minor units (agorot, cents). Rounding happens in two
places only, both half-up: a percentage discount, and the final tax amount.
The line items always sum to the total exactly.

Nightly rate precedence, per night:
    custom pricing entry for the date > season covering the date >
    weekend rate (weekday in the property's weekend set) > weekday rate
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from villa_booking.core.coupons import Discount
from villa_booking.core.errors import ValidationError
from villa_booking.utils.datetime import each_night, nights_between

# Python weekday numbers: Monday=0 ... Sunday=6
DEFAULT_WEEKEND_DAYS = (3, 4, 5)  # Thu, Fri, Sat

RateSource = Literal["custom", "season", "weekend", "weekday"]


class NightlyRate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    night: date = Field(alias="date")
    rate: int
    source: RateSource
    adult_rate: int = Field(default=0, alias="adultRate")
    child_rate: int = Field(default=0, alias="childRate")


class LineItem(BaseModel):
    label: str
    amount: int
    quantity: Optional[int] = None


class PriceBreakdown(BaseModel):
    """Computed price of a stay, before any hold is issued."""

    model_config = ConfigDict(populate_by_name=True)

    nights: int
    base_price: int = Field(alias="basePrice")
    adult_supplement: int = Field(alias="adultSupplement")
    child_supplement: int = Field(alias="childSupplement")
    subtotal: int
    fees: int
    discount: int
    pre_tax: int = Field(alias="preTax")
    taxes: int
    total: int
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")
    line_items: list[LineItem] = Field(alias="lineItems")
    nightly_rates: list[NightlyRate] = Field(alias="nightlyRates")

    def count_nights(self, source: RateSource) -> int:
        return sum(1 for n in self.nightly_rates if n.source == source)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def weekend_days_of(property_: Any) -> tuple[int, ...]:
    days = getattr(property_, "weekend_days", None)
    return tuple(days) if days else DEFAULT_WEEKEND_DAYS


def find_season(night: date, seasons: Sequence[Any]) -> Optional[Any]:
    """First season (by start date) covering ``night``; season ranges are inclusive."""
    for season in sorted(seasons, key=lambda s: s.start_date):
        if season.start_date <= night <= season.end_date:
            return season
    return None


def resolve_nightly_rate(
    night: date,
    property_: Any,
    seasons: Sequence[Any],
    custom_by_date: Mapping[date, Any],
) -> NightlyRate:
    """Resolve the rate and per-guest supplements for one night."""
    adult_rate = property_.price_per_adult or 0
    child_rate = property_.price_per_child or 0

    custom = custom_by_date.get(night)
    if custom is not None:
        return NightlyRate(
            night=night,
            rate=custom.price_per_night,
            source="custom",
            adult_rate=custom.price_per_adult if custom.price_per_adult is not None else adult_rate,
            child_rate=custom.price_per_child if custom.price_per_child is not None else child_rate,
        )

    season = find_season(night, seasons)
    if season is not None:
        return NightlyRate(
            night=night,
            rate=season.nightly_rate,
            source="season",
            adult_rate=adult_rate,
            child_rate=child_rate,
        )

    weekend_rate = property_.weekend_rate
    if weekend_rate is not None and night.weekday() in weekend_days_of(property_):
        return NightlyRate(
            night=night, rate=weekend_rate, source="weekend",
            adult_rate=adult_rate, child_rate=child_rate,
        )
    return NightlyRate(
        night=night, rate=property_.weekday_rate, source="weekday",
        adult_rate=adult_rate, child_rate=child_rate,
    )


def validate_night_bounds(nights: int, property_: Any) -> None:
    if property_.min_nights is not None and nights < property_.min_nights:
        raise ValidationError(
            f"Minimum {property_.min_nights} nights required",
            {"nights": nights, "min_nights": property_.min_nights},
        )
    if property_.max_nights is not None and nights > property_.max_nights:
        raise ValidationError(
            f"Maximum {property_.max_nights} nights allowed",
            {"nights": nights, "max_nights": property_.max_nights},
        )


def validate_guest_counts(adults: int, children: int, max_occupancy: Optional[int]) -> None:
    if adults < 1:
        raise ValidationError("At least one adult is required", {"adults": adults})
    if children < 0:
        raise ValidationError("Children cannot be negative", {"children": children})
    if max_occupancy is not None and adults + children > max_occupancy:
        raise ValidationError(
            f"Maximum occupancy is {max_occupancy} guests",
            {"guests": adults + children, "max_occupancy": max_occupancy},
        )


def discount_amount(amount: int, discount: Optional[Discount]) -> int:
    """Discount on ``amount``, never larger than ``amount`` itself."""
    if discount is None or amount <= 0:
        return 0
    if discount.percent_off is not None:
        value = round_half_up(Decimal(amount) * discount.percent_off / Decimal(100))
    else:
        value = int(discount.amount_off or 0)
    return max(0, min(value, amount))


def compute_taxes(pre_tax: int, vat_rate: Any) -> int:
    """Half-up rounded VAT on the discounted amount; ``vat_rate`` is a fraction (0.17)."""
    if not vat_rate:
        return 0
    return round_half_up(Decimal(pre_tax) * Decimal(str(vat_rate)))


def _format_rate(vat_rate: Any) -> str:
    percent = (Decimal(str(vat_rate)) * 100).normalize()
    return f"{percent:f}"


def price_stay(
    property_: Any,
    check_in: date,
    check_out: date,
    adults: int = 1,
    children: int = 0,
    seasons: Sequence[Any] = (),
    custom_pricing: Iterable[Any] = (),
    discount: Optional[Discount] = None,
) -> PriceBreakdown:
    """
    Price a stay on the property.

    Date validity (past dates, check-out after check-in) is the caller's
    concern; this enforces the property's night bounds and occupancy.

    Args:
        property_: Property row (rates, supplements, fees, vat_rate, bounds)
        check_in: First night
        check_out: Departure day
        adults: Adult guests
        children: Child guests
        seasons: Seasons of the property that may cover the stay
        custom_pricing: Custom pricing entries that may fall in the stay
        discount: Validated coupon discount, if any

    Returns:
        PriceBreakdown whose line items sum to ``total``

    Raises:
        ValidationError: night count outside [min_nights, max_nights], or
            guest counts out of range

    Example:
        >>> breakdown = price_stay(villa, date(2025, 1, 8), date(2025, 1, 10))
        >>> breakdown.base_price == villa.weekday_rate + villa.weekend_rate
        True
    """
    nights = nights_between(check_in, check_out)
    if nights <= 0:
        raise ValidationError(
            "Check-out date must be after check-in date",
            {"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
        )
    validate_night_bounds(nights, property_)
    validate_guest_counts(adults, children, property_.max_occupancy)

    custom_by_date = {entry.date: entry for entry in custom_pricing}
    nightly = [
        resolve_nightly_rate(night, property_, seasons, custom_by_date)
        for night in each_night(check_in, check_out)
    ]

    base_price = sum(n.rate for n in nightly)
    adult_supplement = sum(n.adult_rate for n in nightly) * adults
    child_supplement = sum(n.child_rate for n in nightly) * children
    subtotal = base_price + adult_supplement + child_supplement
    fees = property_.cleaning_fee or 0

    discount_value = discount_amount(subtotal + fees, discount)
    pre_tax = subtotal + fees - discount_value
    taxes = compute_taxes(pre_tax, property_.vat_rate)
    total = pre_tax + taxes

    items = [LineItem(label=f"Accommodation ({nights} nights)", amount=base_price, quantity=nights)]
    if adult_supplement:
        items.append(LineItem(label="Per-adult supplement", amount=adult_supplement, quantity=adults))
    if child_supplement:
        items.append(LineItem(label="Per-child supplement", amount=child_supplement, quantity=children))
    if fees:
        items.append(LineItem(label="Cleaning fee", amount=fees))
    if discount_value:
        items.append(LineItem(label=f"Coupon discount ({discount.code})", amount=-discount_value))
    if taxes:
        items.append(LineItem(label=f"VAT ({_format_rate(property_.vat_rate)}%)", amount=taxes))

    return PriceBreakdown(
        nights=nights,
        base_price=base_price,
        adult_supplement=adult_supplement,
        child_supplement=child_supplement,
        subtotal=subtotal,
        fees=fees,
        discount=discount_value,
        pre_tax=pre_tax,
        taxes=taxes,
        total=total,
        coupon_code=discount.code if discount_value and discount else None,
        line_items=items,
        nightly_rates=nightly,
    )
