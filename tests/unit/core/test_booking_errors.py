"""
Unit tests for the booking error hierarchy.
"""

from __future__ import annotations

from datetime import date

import pytest

from villa_booking.core.availability import Conflict
from villa_booking.core.errors import BookingError, DateConflict, NotFound, ValidationError


@pytest.mark.unit
def test_error_to_dict() -> None:
    """Test that errors serialize to the uniform failure envelope."""
    err = ValidationError("Bad dates", {"check_in": "2025-01-01"})

    assert err.to_dict() == {
        "success": False,
        "error": "validation_error",
        "message": "Bad dates",
        "details": {"check_in": "2025-01-01"},
    }
    assert str(err) == "Bad dates"


@pytest.mark.unit
def test_date_conflict_serializes_conflicts() -> None:
    """Test that DateConflict puts its conflicting ranges in details."""
    conflict = Conflict(kind="blocked_period", id="3", start=date(2025, 6, 10), end=date(2025, 6, 12))

    err = DateConflict("Dates unavailable", [conflict], {"check_in": "2025-06-11"})

    assert err.conflicts == [conflict]
    assert err.details["check_in"] == "2025-06-11"
    assert err.details["conflicts"][0]["start"] == "2025-06-10"
    assert err.details["conflicts"][0]["kind"] == "blocked_period"


@pytest.mark.unit
def test_errors_share_base_class() -> None:
    """Test that all booking errors can be caught as BookingError."""
    assert issubclass(NotFound, BookingError)
    assert NotFound("x").details == {}
    assert NotFound.code == "not_found"
