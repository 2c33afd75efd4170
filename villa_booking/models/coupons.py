"""SQLAlchemy model for discount coupons."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.sql import func

from villa_booking.models.base import Base


class Coupon(Base):
    """
    ORM model for coupons.

    ``code`` is stored upper-cased and looked up case-insensitively. Exactly
    one of ``percent_off`` / ``amount_off`` (minor units) is set. The
    validity window is inclusive; open ends mean unbounded.
    """

    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint(
            "(percent_off IS NULL) <> (amount_off IS NULL)", name="exactly_one_discount"
        ),
        CheckConstraint("percent_off IS NULL OR (percent_off > 0 AND percent_off <= 100)",
                        name="percent_range"),
        CheckConstraint("amount_off IS NULL OR amount_off > 0", name="amount_positive"),
        CheckConstraint("code = upper(code)", name="code_upper"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String, nullable=False, unique=True)
    description = Column(String, nullable=True)
    percent_off = Column(Numeric(5, 2), nullable=True)
    amount_off = Column(Integer, nullable=True)
    valid_from = Column(Date, nullable=True)
    valid_to = Column(Date, nullable=True)
    min_nights = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"))
    is_public = Column(Boolean, nullable=False, server_default=text("FALSE"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
