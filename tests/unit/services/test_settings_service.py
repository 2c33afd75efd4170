"""
Unit tests for property and security-deposit settings.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable
from unittest.mock import MagicMock, patch

import pytest

from villa_booking.core.errors import ValidationError
from villa_booking.services.settings import (
    get_security_deposit_settings,
    update_property_settings,
    update_security_deposit_settings,
)

DEPOSIT = {
    "enabled": True,
    "amount": 100000,
    "title_en": "Security deposit",
    "title_ar": "تأمين",
    "message_en": "Refunded after check-out",
    "message_ar": "يسترد بعد المغادرة",
}


@pytest.mark.unit
@patch("villa_booking.services.settings.update_property")
@patch("villa_booking.services.settings.get_property")
def test_update_property_settings(
    mock_get_property: MagicMock,
    mock_update: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
) -> None:
    """Test that valid changes are written and weekend days sorted."""
    mock_get_property.return_value = make_property()
    mock_update.return_value = make_property(weekend_days=[4, 5])

    update_property_settings(
        mock_engine, {"weekend_days": [5, 4], "cleaning_fee": 20000, "is_active": False}
    )

    mock_update.assert_called_once_with(
        mock_engine.conn, 1, {"weekend_days": [4, 5], "cleaning_fee": 20000}
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "changes",
    [
        {"min_nights": 0},
        {"min_nights": 5, "max_nights": 3},
        {"weekday_rate": 0},
        {"cleaning_fee": -1},
        {"vat_rate": Decimal("17")},
        {"weekend_days": [7]},
        {"weekend_days": [4, 4]},
        {"max_occupancy": 0},
        {"weekday_rate": None},
    ],
)
@patch("villa_booking.services.settings.update_property")
@patch("villa_booking.services.settings.get_property")
def test_update_property_settings_validation(
    mock_get_property: MagicMock,
    mock_update: MagicMock,
    changes: dict[str, Any],
    mock_engine: MagicMock,
    make_property: Callable,
) -> None:
    """Test that inconsistent settings are refused without a write."""
    mock_get_property.return_value = make_property()

    with pytest.raises(ValidationError):
        update_property_settings(mock_engine, changes)

    mock_update.assert_not_called()


@pytest.mark.unit
@patch("villa_booking.services.settings.find_property")
def test_security_deposit_defaults_to_disabled(
    mock_find_property: MagicMock, mock_engine: MagicMock, make_property: Callable
) -> None:
    """Test that an unset deposit or a missing property reads as disabled."""
    mock_find_property.return_value = make_property(security_deposit=None)
    assert get_security_deposit_settings(mock_engine) == {"enabled": False}

    mock_find_property.return_value = None
    assert get_security_deposit_settings(mock_engine) == {"enabled": False}


@pytest.mark.unit
@patch("villa_booking.services.settings.update_property")
@patch("villa_booking.services.settings.get_property")
def test_update_security_deposit(
    mock_get_property: MagicMock,
    mock_update: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
) -> None:
    """Test that complete enabled settings are stored as given."""
    mock_get_property.return_value = make_property()
    mock_update.return_value = make_property(security_deposit=DEPOSIT)

    result = update_security_deposit_settings(mock_engine, DEPOSIT)

    assert result == DEPOSIT
    mock_update.assert_called_once_with(mock_engine.conn, 1, {"security_deposit": DEPOSIT})


@pytest.mark.unit
@pytest.mark.parametrize(
    "settings",
    [
        {},
        {"enabled": "yes"},
        {**DEPOSIT, "amount": 0},
        {**DEPOSIT, "title_ar": ""},
    ],
)
def test_update_security_deposit_validation(
    settings: dict[str, Any], mock_engine: MagicMock
) -> None:
    """Test that enabled deposits need an amount and every guest-facing text."""
    with pytest.raises(ValidationError):
        update_security_deposit_settings(mock_engine, settings)


@pytest.mark.unit
@patch("villa_booking.services.settings.update_property")
@patch("villa_booking.services.settings.get_property")
def test_disabled_deposit_needs_no_texts(
    mock_get_property: MagicMock,
    mock_update: MagicMock,
    mock_engine: MagicMock,
    make_property: Callable,
) -> None:
    """Test that turning the deposit off only needs the flag."""
    mock_get_property.return_value = make_property()
    mock_update.return_value = make_property(security_deposit={"enabled": False})

    assert update_security_deposit_settings(mock_engine, {"enabled": False}) == {"enabled": False}
