"""
Outbound notifications for guest-visible reservation events.

The booking core only decides *which* event happened to *which*
reservation; delivery (email templates, SMS) belongs to an external service.
When ``NOTIFICATION_WEBHOOK_URL`` is set each event is POSTed there as JSON,
otherwise it is only logged. Delivery failures are logged and counted but
never raised: a committed state transition stays committed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

import requests
import structlog

from villa_booking.config import NOTIFICATION_TIMEOUT_SECONDS, NOTIFICATION_WEBHOOK_URL
from villa_booking.metrics import notifications_total

logger = structlog.get_logger(__name__)


class NotificationKind(str, Enum):
    CONFIRMATION = "confirmation"
    APPROVAL_REQUIRED = "approval_required"
    APPROVED = "approved"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"
    REMINDER = "reminder"


class Notifier(ABC):
    """Delivers one notification payload. Implementations may raise."""

    @abstractmethod
    def send(self, kind: NotificationKind, payload: dict[str, Any]) -> None:
        pass


class LoggingNotifier(Notifier):
    """Fallback used when no webhook is configured."""

    def send(self, kind: NotificationKind, payload: dict[str, Any]) -> None:
        logger.info(
            "notification_logged", kind=kind.value, reservation_id=payload.get("reservation_id")
        )


class WebhookNotifier(Notifier):
    """POSTs notifications to the messaging service."""

    def __init__(self, url: str, timeout: float = NOTIFICATION_TIMEOUT_SECONDS) -> None:
        self.url = url
        self.timeout = timeout

    def send(self, kind: NotificationKind, payload: dict[str, Any]) -> None:
        """
        Deliver one event.

        Raises:
            requests.RequestException: connection failure or non-2xx response
        """
        response = requests.post(
            self.url,
            json={"kind": kind.value, **payload},
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        response.raise_for_status()


def get_default_notifier() -> Notifier:
    if NOTIFICATION_WEBHOOK_URL:
        return WebhookNotifier(NOTIFICATION_WEBHOOK_URL)
    return LoggingNotifier()


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def build_payload(reservation: Any, **extra: Any) -> dict[str, Any]:
    """Notification payload for a reservation row plus event-specific fields."""
    payload: dict[str, Any] = {
        "reservation_id": str(reservation.id),
        "user_id": reservation.user_id,
        "status": reservation.status,
        "check_in": _iso(reservation.check_in),
        "check_out": _iso(reservation.check_out),
        "nights": reservation.nights,
        "adults": reservation.adults,
        "children": reservation.children,
        "total": reservation.total,
        "currency": reservation.currency,
    }
    for key, value in extra.items():
        payload[key] = value.isoformat() if hasattr(value, "isoformat") else value
    return payload


def notify(notifier: Notifier, kind: NotificationKind, reservation: Any, **extra: Any) -> bool:
    """
    Send a notification for ``reservation`` without ever raising.

    Args:
        notifier: Delivery implementation
        kind: Event kind
        reservation: Reservation row after the transition
        **extra: Event fields (``reason``, ``old_check_in``, ...)

    Returns:
        bool: True when the notifier accepted the event
    """
    payload = build_payload(reservation, **extra)
    try:
        notifier.send(kind, payload)
    except Exception:
        notifications_total.labels(kind=kind.value, status="failed").inc()
        logger.exception(
            "notification_failed", kind=kind.value, reservation_id=payload["reservation_id"]
        )
        return False

    notifications_total.labels(kind=kind.value, status="sent").inc()
    logger.info("notification_sent", kind=kind.value, reservation_id=payload["reservation_id"])
    return True
