from typing import Any

from sqlalchemy import insert, update
from sqlalchemy.engine import Connection, Row

from villa_booking.models.property import Property


def update_property(conn: Connection, property_id: int, changes: dict[str, Any]) -> Row[Any]:
    """Apply ``changes`` to the property row and return it."""
    result = conn.execute(
        update(Property)
        .where(Property.id == property_id)
        .values(**changes)
        .returning(*Property.__table__.c)
    )
    return result.one()


def insert_property(conn: Connection, values: dict[str, Any]) -> Row[Any]:
    result = conn.execute(insert(Property).values(**values).returning(*Property.__table__.c))
    return result.one()
