"""
Property settings and security-deposit settings.

Both live on the singleton property row; there is no in-process settings
cache. Security-deposit settings fall back to ``{"enabled": false}`` when the
column is empty.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.engine import Engine, Row

from villa_booking.core.errors import ValidationError
from villa_booking.db.readers.property import find_property, get_property
from villa_booking.db.writers.property import update_property

logger = structlog.get_logger(__name__)

DEFAULT_SECURITY_DEPOSIT: dict[str, Any] = {"enabled": False}

SETTINGS_FIELDS = (
    "name",
    "currency",
    "weekday_rate",
    "weekend_rate",
    "weekend_days",
    "price_per_adult",
    "price_per_child",
    "cleaning_fee",
    "vat_rate",
    "min_nights",
    "max_nights",
    "max_occupancy",
)

_NON_NEGATIVE = ("weekend_rate", "price_per_adult", "price_per_child", "cleaning_fee")

_REQUIRED = (
    "name",
    "currency",
    "weekday_rate",
    "weekend_days",
    "price_per_adult",
    "price_per_child",
    "cleaning_fee",
    "vat_rate",
    "min_nights",
    "max_nights",
)

# Required, non-empty when the deposit is enabled
_DEPOSIT_TEXT_FIELDS = ("title_en", "title_ar", "message_en", "message_ar")


def get_property_settings(engine: Engine) -> Row[Any]:
    with engine.connect() as conn:
        return get_property(conn)


def _validate_settings(values: dict[str, Any]) -> None:
    if values["weekday_rate"] is None or values["weekday_rate"] <= 0:
        raise ValidationError(
            "weekday_rate must be positive", {"weekday_rate": values["weekday_rate"]}
        )
    for field in _NON_NEGATIVE:
        if values.get(field) is not None and values[field] < 0:
            raise ValidationError(f"{field} must not be negative", {field: values[field]})
    if values["min_nights"] < 1:
        raise ValidationError(
            "min_nights must be at least 1", {"min_nights": values["min_nights"]}
        )
    if values["max_nights"] < values["min_nights"]:
        raise ValidationError(
            "max_nights must not be below min_nights",
            {"min_nights": values["min_nights"], "max_nights": values["max_nights"]},
        )
    if values.get("max_occupancy") is not None and values["max_occupancy"] < 1:
        raise ValidationError(
            "max_occupancy must be at least 1", {"max_occupancy": values["max_occupancy"]}
        )
    vat_rate = values["vat_rate"]
    if vat_rate is None or not (0 <= vat_rate < 1):
        raise ValidationError(
            "vat_rate is a fraction between 0 and 1", {"vat_rate": str(vat_rate)}
        )
    days = values.get("weekend_days") or []
    if any(day not in range(7) for day in days) or len(set(days)) != len(days):
        raise ValidationError(
            "weekend_days must be distinct weekday numbers 0-6 (Monday=0)",
            {"weekend_days": list(days)},
        )


def update_property_settings(engine: Engine, changes: dict[str, Any]) -> Row[Any]:
    """
    Update rates, fees and stay rules of the villa.

    Raises:
        NotFound: no property configured
        ValidationError: the merged settings are inconsistent
    """
    changes = {k: v for k, v in changes.items() if k in SETTINGS_FIELDS}
    cleared = [field for field in _REQUIRED if field in changes and changes[field] is None]
    if cleared:
        raise ValidationError("These settings cannot be empty", {"fields": cleared})
    if "weekend_days" in changes:
        changes["weekend_days"] = sorted(changes["weekend_days"])

    with engine.begin() as conn:
        current = get_property(conn)
        if not changes:
            return current
        merged = {field: getattr(current, field) for field in SETTINGS_FIELDS}
        merged.update(changes)
        _validate_settings(merged)
        row = update_property(conn, current.id, changes)

    logger.info("property_settings_updated", property_id=row.id, fields=sorted(changes))
    return row


def get_security_deposit_settings(engine: Engine) -> dict[str, Any]:
    """Security-deposit settings, or the disabled default when unset or no property exists."""
    with engine.connect() as conn:
        property_ = find_property(conn)
    if property_ is None or not property_.security_deposit:
        return dict(DEFAULT_SECURITY_DEPOSIT)
    return dict(property_.security_deposit)


def update_security_deposit_settings(engine: Engine, settings: dict[str, Any]) -> dict[str, Any]:
    """
    Replace the security-deposit settings.

    Raises:
        ValidationError: ``enabled`` missing, or enabled without a positive
            amount and the guest-facing texts
    """
    if not isinstance(settings.get("enabled"), bool):
        raise ValidationError("enabled must be a boolean", {"field": "enabled"})
    if settings["enabled"]:
        amount = settings.get("amount")
        if not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Amount must be greater than 0", {"amount": amount})
        missing = [f for f in _DEPOSIT_TEXT_FIELDS if not settings.get(f)]
        if missing:
            raise ValidationError("Missing security deposit texts", {"missing": missing})

    with engine.begin() as conn:
        current = get_property(conn)
        row = update_property(conn, current.id, {"security_deposit": settings})

    logger.info("security_deposit_updated", property_id=row.id, enabled=settings["enabled"])
    return dict(row.security_deposit)
