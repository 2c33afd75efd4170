"""
Booking error hierarchy.

Every error carries a stable machine-readable ``code``, a human message and a
``details`` dict the UI can use to explain why an operation failed (conflicting
ranges, violated minimum stay, ...). The HTTP layer maps each class to a
status code in ``villa_booking.error_handlers``.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base class for expected, recoverable booking outcomes."""

    code = "booking_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(BookingError):
    """Malformed or out-of-range input (dates, night bounds, guest counts)."""

    code = "validation_error"


class InvalidCouponError(BookingError):
    """An explicitly supplied coupon code cannot be applied."""

    code = "invalid_coupon"


class DateConflict(BookingError):
    """The requested range overlaps an active reservation or a blocked period."""

    code = "date_conflict"

    def __init__(
        self,
        message: str,
        conflicts: list[Any] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.conflicts = list(conflicts or [])
        merged = dict(details or {})
        merged["conflicts"] = [
            c.model_dump(mode="json") if hasattr(c, "model_dump") else c for c in self.conflicts
        ]
        super().__init__(message, merged)


class InvalidTransition(BookingError):
    """A reservation lifecycle action is not allowed from the current status."""

    code = "invalid_transition"


class NotFound(BookingError):
    """A referenced reservation, coupon, season or property does not exist."""

    code = "not_found"


class Unauthorized(BookingError):
    """No valid caller identity was presented."""

    code = "unauthorized"


class Forbidden(BookingError):
    """The caller is known but lacks the role for this operation."""

    code = "forbidden"
