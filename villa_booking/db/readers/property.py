from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection, Row

from villa_booking.core.errors import NotFound
from villa_booking.models.property import Property


def find_property(conn: Connection) -> Optional[Row[Any]]:
    """
    Fetch the villa.

    The system rents out exactly one property. Should more than one active
    row exist, the lowest id is the villa.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        Optional[Row]: The property row, or None when none is configured.
    """
    result = conn.execute(
        select(Property).where(Property.is_active.is_(True)).order_by(Property.id).limit(1)
    )
    return result.fetchone()


def get_property(conn: Connection) -> Row[Any]:
    """
    Fetch the villa or raise.

    Raises:
        NotFound: no active property is configured
    """
    row = find_property(conn)
    if row is None:
        raise NotFound("No property is configured", {"entity": "property"})
    return row
