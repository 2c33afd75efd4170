"""
Per-property write serialization.

Every write that changes what the calendar can accept (hold creation,
blocking dates, rescheduling) takes a transaction-scoped PostgreSQL advisory
lock keyed on the property before re-listing conflicts. Two such writes for
the same property therefore run one after the other, and the conflict check
each performs sees the other's committed rows.
"""

import zlib

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Connection

logger = structlog.get_logger(__name__)


def property_lock_key(property_id: int) -> int:
    """Advisory lock key for a property; a crc32, so it fits PostgreSQL's bigint."""
    return zlib.crc32(f"villa-booking:property:{property_id}".encode("utf-8"))


def lock_property(conn: Connection, property_id: int) -> None:
    """
    Block until this transaction holds the write lock of ``property_id``.

    Must be called inside ``engine.begin()``; the lock is released when the
    transaction commits or rolls back.
    """
    key = property_lock_key(property_id)
    conn.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})
    logger.debug("property_lock_acquired", property_id=property_id, key=key)
