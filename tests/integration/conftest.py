"""
Shared fixtures for database integration tests.

Tests run against the database in ``DATABASE_URL``. The ``villa`` schema is
created from the models when missing, and every table is emptied around each
test that uses the ``villa`` fixture.
"""

from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Engine, Row

from villa_booking.config import SCHEMA
from villa_booking.db.engine import check_engine_health, engine
from villa_booking.db.writers.property import insert_property
from villa_booking.models.base import Base
from villa_booking.models.blocked_periods import BlockedPeriod  # noqa: F401
from villa_booking.models.coupons import Coupon  # noqa: F401
from villa_booking.models.pricing import CustomPricingEntry, Season  # noqa: F401
from villa_booking.models.reservations import Reservation  # noqa: F401

TABLES = ("reservations", "blocked_periods", "custom_pricing", "seasons", "coupons", "properties")


@pytest.fixture(scope="session", autouse=True)
def database() -> Engine:
    """Skip the integration suite when no database is reachable."""
    if not check_engine_health():
        pytest.skip("database not reachable at DATABASE_URL")
    with engine.begin() as conn:
        conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}"))
    Base.metadata.create_all(engine)
    return engine


def _truncate() -> None:
    with engine.begin() as conn:
        for table in TABLES:
            conn.execute(text(f"DELETE FROM {SCHEMA}.{table}"))


@pytest.fixture
def villa() -> Generator[Row, None, None]:
    """
    A single active property with weekday 30000, weekend 36000 (Thu-Sat).

    Cleans up every booking table after the test completes.
    """
    _truncate()
    with engine.begin() as conn:
        row = insert_property(
            conn,
            {
                "name": "Test Villa",
                "currency": "ILS",
                "weekday_rate": 30000,
                "weekend_rate": 36000,
                "weekend_days": [3, 4, 5],
                "cleaning_fee": 0,
                "min_nights": 1,
                "max_nights": 30,
            },
        )

    yield row

    _truncate()
