"""SQLAlchemy model for the villa itself."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.sql import func

from villa_booking.models.base import Base


class Property(Base):
    """
    ORM model for the rentable villa.

    The system has exactly one active property; it is modelled as a row so
    rates, fees and stay rules can be edited from the admin dashboard.
    Money columns are integer minor units. ``vat_rate`` is a fraction
    (0.17 for 17%). ``weekend_days`` holds Python weekday numbers
    (Monday=0), Thu/Fri/Sat by default. A null ``weekend_rate`` means
    flat pricing.
    """

    __tablename__ = "properties"
    __table_args__ = (
        CheckConstraint("min_nights >= 1", name="min_nights_positive"),
        CheckConstraint("max_nights >= min_nights", name="night_bounds"),
        CheckConstraint("vat_rate >= 0 AND vat_rate < 1", name="vat_rate_fraction"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    currency = Column(String(3), nullable=False, server_default=text("'ILS'"))
    weekday_rate = Column(Integer, nullable=False)
    weekend_rate = Column(Integer, nullable=True)
    weekend_days = Column(ARRAY(Integer), nullable=False, server_default=text("'{3,4,5}'"))
    price_per_adult = Column(Integer, nullable=False, server_default=text("0"))
    price_per_child = Column(Integer, nullable=False, server_default=text("0"))
    cleaning_fee = Column(Integer, nullable=False, server_default=text("0"))
    vat_rate = Column(Numeric(6, 4), nullable=False, server_default=text("0"))
    min_nights = Column(Integer, nullable=False, server_default=text("1"))
    max_nights = Column(Integer, nullable=False, server_default=text("30"))
    max_occupancy = Column(Integer, nullable=True)
    security_deposit = Column(JSONB, nullable=True)
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
