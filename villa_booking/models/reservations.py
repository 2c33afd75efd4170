# models/reservations.py

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from villa_booking.config import SCHEMA
from villa_booking.models.base import Base


class Reservation(Base):
    """
    ORM model for villa reservations.

    ``check_out`` is exclusive (the guest leaves that morning), so ``nights``
    always equals ``check_out - check_in``. A PENDING row is a hold that
    stops blocking the calendar once ``hold_expires_at`` passes. Price
    columns are snapshots of the quote at checkout, in minor units.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("check_out > check_in", name="date_order"),
        CheckConstraint("nights = check_out - check_in", name="nights_match"),
        CheckConstraint(
            "status IN ('PENDING', 'AWAITING_APPROVAL', 'APPROVED', 'PAID', 'CANCELLED')",
            name="status_values",
        ),
        Index("ix_reservations_property_dates", "property_id", "check_in", "check_out"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(
        Integer,
        ForeignKey(f"{SCHEMA}.properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String, nullable=False, index=True)  # Identity provider subject
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    nights = Column(Integer, nullable=False)
    adults = Column(Integer, nullable=False, server_default=text("1"))
    children = Column(Integer, nullable=False, server_default=text("0"))
    subtotal = Column(Integer, nullable=False)
    fees = Column(Integer, nullable=False, server_default=text("0"))
    discount = Column(Integer, nullable=False, server_default=text("0"))
    taxes = Column(Integer, nullable=False, server_default=text("0"))
    total = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    coupon_code = Column(String, nullable=True)
    status = Column(String, nullable=False, index=True)
    hold_token = Column(String, nullable=True, unique=True)
    hold_expires_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
