from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from villa_booking.config import SCHEMA
from villa_booking.models.base import Base


class Season(Base):
    """
    ORM model for a seasonal nightly rate.

    ``start_date`` and ``end_date`` are inclusive. Seasons of a property must
    not overlap; the admin service rejects overlapping inserts.
    """

    __tablename__ = "seasons"
    __table_args__ = (CheckConstraint("end_date >= start_date", name="date_order"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer,
        ForeignKey(f"{SCHEMA}.properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    nightly_rate = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CustomPricingEntry(Base):
    """
    ORM model for a single-date price override.

    Takes precedence over seasons and the base rates. Optional per-adult and
    per-child values override the property's supplements for that night.
    """

    __tablename__ = "custom_pricing"
    __table_args__ = (UniqueConstraint("property_id", "date", name="uq_custom_pricing_property_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer,
        ForeignKey(f"{SCHEMA}.properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    date = Column(Date, nullable=False)
    price_per_night = Column(Integer, nullable=False)
    price_per_adult = Column(Integer, nullable=True)
    price_per_child = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
