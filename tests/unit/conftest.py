"""
Row factories for unit tests.

Domain and service code read rows by attribute, so ``SimpleNamespace``
objects stand in for SQLAlchemy rows.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

# 12:00 in Jerusalem, so the property's calendar day is 2025-01-01
NOW = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_property() -> Callable[..., SimpleNamespace]:
    def factory(**overrides: Any) -> SimpleNamespace:
        values: dict[str, Any] = {
            "id": 1,
            "name": "Test Villa",
            "currency": "ILS",
            "weekday_rate": 30000,
            "weekend_rate": 36000,
            "weekend_days": [3, 4, 5],
            "price_per_adult": 0,
            "price_per_child": 0,
            "cleaning_fee": 0,
            "vat_rate": Decimal("0"),
            "min_nights": 1,
            "max_nights": 30,
            "max_occupancy": None,
            "security_deposit": None,
            "is_active": True,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return factory


@pytest.fixture
def make_reservation() -> Callable[..., SimpleNamespace]:
    def factory(
        check_in: date = date(2025, 6, 10),
        check_out: date = date(2025, 6, 12),
        status: str = "APPROVED",
        **overrides: Any,
    ) -> SimpleNamespace:
        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "property_id": 1,
            "user_id": "guest-1",
            "check_in": check_in,
            "check_out": check_out,
            "nights": (check_out - check_in).days,
            "adults": 2,
            "children": 0,
            "subtotal": 60000,
            "fees": 0,
            "discount": 0,
            "taxes": 0,
            "total": 60000,
            "currency": "ILS",
            "coupon_code": None,
            "status": status,
            "hold_token": None,
            "hold_expires_at": NOW + timedelta(minutes=15) if status == "PENDING" else None,
            "approved_at": None,
            "paid_at": None,
            "cancelled_at": None,
            "cancellation_reason": None,
            "created_at": NOW,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return factory


@pytest.fixture
def make_block() -> Callable[..., SimpleNamespace]:
    def factory(start: date, end: date, reason: str | None = None, id: int = 1) -> SimpleNamespace:
        return SimpleNamespace(id=id, property_id=1, start_date=start, end_date=end, reason=reason)

    return factory


@pytest.fixture
def make_season() -> Callable[..., SimpleNamespace]:
    def factory(
        start: date, end: date, nightly_rate: int, name: str = "Season", id: int = 1
    ) -> SimpleNamespace:
        return SimpleNamespace(
            id=id, property_id=1, name=name, start_date=start, end_date=end, nightly_rate=nightly_rate
        )

    return factory


@pytest.fixture
def make_custom_price() -> Callable[..., SimpleNamespace]:
    def factory(
        day: date,
        price_per_night: int,
        price_per_adult: int | None = None,
        price_per_child: int | None = None,
    ) -> SimpleNamespace:
        return SimpleNamespace(
            property_id=1,
            date=day,
            price_per_night=price_per_night,
            price_per_adult=price_per_adult,
            price_per_child=price_per_child,
        )

    return factory


@pytest.fixture
def make_coupon() -> Callable[..., SimpleNamespace]:
    def factory(**overrides: Any) -> SimpleNamespace:
        values: dict[str, Any] = {
            "id": 1,
            "code": "SAVE10",
            "description": None,
            "percent_off": Decimal("10"),
            "amount_off": None,
            "valid_from": None,
            "valid_to": None,
            "min_nights": None,
            "is_active": True,
            "is_public": False,
            "created_at": NOW,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return factory


@pytest.fixture
def mock_engine() -> MagicMock:
    """Engine whose ``connect()`` and ``begin()`` yield the same mock connection."""
    engine = MagicMock()
    conn = MagicMock(name="conn")
    engine.connect.return_value.__enter__.return_value = conn
    engine.begin.return_value.__enter__.return_value = conn
    engine.conn = conn
    return engine
