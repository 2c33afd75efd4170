from datetime import date, datetime, timezone
from typing import Any

import structlog
from sqlalchemy import delete, insert
from sqlalchemy.engine import Connection, Row

from villa_booking.db.writers._upsert import upsert_with_distinct_check
from villa_booking.models.pricing import CustomPricingEntry, Season

logger = structlog.get_logger(__name__)


def insert_season(
    conn: Connection, property_id: int, name: str, start: date, end: date, nightly_rate: int
) -> Row[Any]:
    result = conn.execute(
        insert(Season)
        .values(
            property_id=property_id,
            name=name,
            start_date=start,
            end_date=end,
            nightly_rate=nightly_rate,
        )
        .returning(*Season.__table__.c)
    )
    return result.one()


def delete_season(conn: Connection, season_id: int) -> bool:
    result = conn.execute(delete(Season).where(Season.id == season_id))
    return result.rowcount > 0


def upsert_custom_pricing(
    conn: Connection, property_id: int, entries: list[dict[str, Any]]
) -> int:
    """
    Upsert custom pricing entries keyed by (property_id, date).

    Args:
        conn: Active connection
        property_id: Property id
        entries: Dicts with ``date``, ``price_per_night`` and optional
            ``price_per_adult`` / ``price_per_child``

    Returns:
        int: Rows inserted or changed
    """
    now = datetime.now(tz=timezone.utc)
    rows = [
        {
            "property_id": property_id,
            "date": e["date"],
            "price_per_night": e["price_per_night"],
            "price_per_adult": e.get("price_per_adult"),
            "price_per_child": e.get("price_per_child"),
            "created_at": now,
            "updated_at": now,
        }
        for e in entries
    ]
    written = upsert_with_distinct_check(
        conn=conn,
        table=CustomPricingEntry,
        rows=rows,
        conflict_columns=["property_id", "date"],
        update_columns=["price_per_night", "price_per_adult", "price_per_child"],
    )
    logger.info("custom_pricing_upserted", property_id=property_id, received=len(rows),
                written=written)
    return written


def delete_custom_pricing(conn: Connection, property_id: int, day: date) -> bool:
    result = conn.execute(
        delete(CustomPricingEntry).where(
            CustomPricingEntry.property_id == property_id, CustomPricingEntry.date == day
        )
    )
    return result.rowcount > 0
