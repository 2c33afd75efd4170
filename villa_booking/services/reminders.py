"""Check-in reminders for confirmed stays."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

import structlog
from sqlalchemy.engine import Engine

from villa_booking.db.readers.reservations import list_check_ins_on
from villa_booking.services.notifications import NotificationKind, Notifier, notify
from villa_booking.utils.datetime import property_today, utc_now

logger = structlog.get_logger(__name__)


def send_upcoming_check_in_reminders(
    engine: Engine, notifier: Notifier, today: Optional[date] = None
) -> dict[str, int]:
    """
    Send a REMINDER for every APPROVED or PAID reservation checking in tomorrow.

    Args:
        engine: SQLAlchemy engine
        notifier: Delivery implementation
        today: Calendar day in the property timezone

    Returns:
        dict: ``{"sent": n, "failed": m}``
    """
    today = today or property_today(utc_now())
    tomorrow = today + timedelta(days=1)

    with engine.connect() as conn:
        reservations = list_check_ins_on(conn, tomorrow)

    sent = failed = 0
    for reservation in reservations:
        if notify(notifier, NotificationKind.REMINDER, reservation):
            sent += 1
        else:
            failed += 1

    logger.info("check_in_reminders_sent", check_in=tomorrow.isoformat(), sent=sent, failed=failed)
    return {"sent": sent, "failed": failed}
