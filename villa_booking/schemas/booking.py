"""Guest-facing request and response bodies."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class StayRequest(BaseModel):
    """Date range and party size of an intended stay. Accepts camelCase or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True)

    check_in: date = Field(..., alias="checkIn", description="First night (YYYY-MM-DD)")
    check_out: date = Field(..., alias="checkOut", description="Departure day (YYYY-MM-DD)")
    adults: int = Field(1, description="Adult guests")
    children: int = Field(0, description="Child guests")


class QuoteRequest(StayRequest):
    coupon_code: Optional[str] = Field(None, alias="couponCode", description="Coupon code, any case")


class AvailabilityCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    check_in: date = Field(..., alias="checkIn", description="First night (YYYY-MM-DD)")
    check_out: date = Field(..., alias="checkOut", description="Departure day (YYYY-MM-DD)")


class CheckoutRequest(QuoteRequest):
    """Confirm a quote. ``total`` is the amount the guest was shown."""

    expected_total: Optional[int] = Field(
        None, alias="total", description="Quoted total in minor units"
    )
    hold_token: str = Field(..., alias="holdToken", description="Token from the quote")


class CouponValidateRequest(BaseModel):
    code: str = Field(..., description="Coupon code, any case")
    nights: Optional[int] = Field(None, description="Nights of the intended stay")


class DiscountOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    percent_off: Optional[Decimal] = Field(None, alias="percentOff")
    amount_off: Optional[int] = Field(None, alias="amountOff")
    description: str


class CouponValidateResponse(BaseModel):
    success: bool = True
    discount: DiscountOut


class PublicCouponOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    description: Optional[str] = None
    percent_off: Optional[Decimal] = None
    amount_off: Optional[int] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    min_nights: Optional[int] = None


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    check_in: date
    check_out: date
    nights: int
    adults: int
    children: int
    subtotal: int
    fees: int
    discount: int
    taxes: int
    total: int
    currency: str
    coupon_code: Optional[str] = None
    status: str
    hold_expires_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class CancelPayload(BaseModel):
    reason: Optional[str] = Field(None, description="Free-text cancellation reason")
