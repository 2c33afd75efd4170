from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from villa_booking.config import SCHEMA
from villa_booking.models.base import Base


class BlockedPeriod(Base):
    """
    ORM model for admin-declared unavailability.

    Both ``start_date`` and ``end_date`` are inclusive whole days. Carries no
    guest information.
    """

    __tablename__ = "blocked_periods"
    __table_args__ = (CheckConstraint("end_date >= start_date", name="date_order"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer,
        ForeignKey(f"{SCHEMA}.properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
