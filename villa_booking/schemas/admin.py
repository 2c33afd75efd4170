"""Admin dashboard request and response bodies."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeclinePayload(BaseModel):
    reason: Optional[str] = Field(None, description="Reason shown to the guest")


class ReschedulePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_check_in: date = Field(..., alias="newCheckIn", description="New first night")
    new_check_out: date = Field(..., alias="newCheckOut", description="New departure day")
    reason: Optional[str] = Field(None, description="Reason shown to the guest")


class BlockDatesPayload(BaseModel):
    start_date: date = Field(..., description="First blocked day (inclusive)")
    end_date: date = Field(..., description="Last blocked day (inclusive)")
    reason: Optional[str] = Field(None, description="Internal note")


class BlockedPeriodOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None


class SeasonCreatePayload(BaseModel):
    name: str = Field(..., description="Display name, e.g. Summer")
    start_date: date = Field(..., description="First day (inclusive)")
    end_date: date = Field(..., description="Last day (inclusive)")
    nightly_rate: int = Field(..., description="Nightly rate in minor units")


class SeasonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    start_date: date
    end_date: date
    nightly_rate: int


class CustomPricingEntryIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(..., alias="date", description="Calendar date")
    price_per_night: int = Field(..., description="Nightly rate in minor units")
    price_per_adult: Optional[int] = Field(None, description="Per-adult override")
    price_per_child: Optional[int] = Field(None, description="Per-child override")

    def as_row(self) -> dict[str, Any]:
        return {
            "date": self.day,
            "price_per_night": self.price_per_night,
            "price_per_adult": self.price_per_adult,
            "price_per_child": self.price_per_child,
        }


class CustomPricingUpsertPayload(BaseModel):
    entries: list[CustomPricingEntryIn] = Field(..., description="Entries keyed by date")


class CustomPricingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    day: date = Field(..., alias="date")
    price_per_night: int
    price_per_adult: Optional[int] = None
    price_per_child: Optional[int] = None


class CouponCreatePayload(BaseModel):
    code: str = Field(..., description="Coupon code; stored upper-cased")
    description: Optional[str] = None
    percent_off: Optional[Decimal] = Field(None, description="Percentage off, (0, 100]")
    amount_off: Optional[int] = Field(None, description="Amount off in minor units")
    valid_from: Optional[date] = Field(None, description="First valid day (inclusive)")
    valid_to: Optional[date] = Field(None, description="Last valid day (inclusive)")
    min_nights: Optional[int] = Field(None, description="Minimum stay length")
    is_active: bool = True
    is_public: bool = False


class CouponUpdatePayload(BaseModel):
    """All fields optional; only fields present in the request are changed."""

    code: Optional[str] = None
    description: Optional[str] = None
    percent_off: Optional[Decimal] = None
    amount_off: Optional[int] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    min_nights: Optional[int] = None
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None


class CouponOut(CouponCreatePayload):
    model_config = ConfigDict(from_attributes=True)

    id: int


class PropertySettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    currency: str
    weekday_rate: int
    weekend_rate: Optional[int] = None
    weekend_days: list[int]
    price_per_adult: int
    price_per_child: int
    cleaning_fee: int
    vat_rate: Decimal
    min_nights: int
    max_nights: int
    max_occupancy: Optional[int] = None


class PropertySettingsUpdatePayload(BaseModel):
    name: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    weekday_rate: Optional[int] = None
    weekend_rate: Optional[int] = Field(None, description="Null for flat pricing")
    weekend_days: Optional[list[int]] = Field(None, description="Python weekdays, Monday=0")
    price_per_adult: Optional[int] = None
    price_per_child: Optional[int] = None
    cleaning_fee: Optional[int] = None
    vat_rate: Optional[Decimal] = Field(None, description="Fraction, e.g. 0.17")
    min_nights: Optional[int] = None
    max_nights: Optional[int] = None
    max_occupancy: Optional[int] = None


class SecurityDepositSettings(BaseModel):
    """Unknown keys are kept so the dashboard can add texts without a migration."""

    model_config = ConfigDict(extra="allow")

    enabled: bool
    amount: Optional[int] = Field(None, description="Deposit in minor units")
    currency: Optional[str] = None
    title_en: Optional[str] = None
    title_ar: Optional[str] = None
    message_en: Optional[str] = None
    message_ar: Optional[str] = None
    bank_account_info_en: Optional[str] = None
    bank_account_info_ar: Optional[str] = None
    confirmation_text_en: Optional[str] = None
    confirmation_text_ar: Optional[str] = None


class ReminderResult(BaseModel):
    sent: int
    failed: int
