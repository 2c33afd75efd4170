"""
Generic upsert helper with an IS DISTINCT FROM guard.

Rows whose tracked columns already hold the incoming values are left
untouched, so ``updated_at`` only moves on a real change.
"""

from typing import Any, Sequence

from sqlalchemy import or_
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.engine import Connection


def upsert_with_distinct_check(
    conn: Connection,
    table: type,
    rows: list[dict[str, Any]],
    conflict_columns: Sequence[str],
    update_columns: Sequence[str],
) -> int:
    """
    Insert rows, updating existing ones only when a tracked value changed.

    Args:
        conn: Active database connection (within transaction)
        table: SQLAlchemy ORM table class (e.g., CustomPricingEntry)
        rows: List of row dicts to upsert
        conflict_columns: Columns of the unique constraint for ON CONFLICT
        update_columns: Columns copied from the incoming row on conflict;
            a row is rewritten only when one of them differs

    Returns:
        int: Number of rows inserted or actually updated

    Example:
        >>> with engine.begin() as conn:
        ...     upsert_with_distinct_check(
        ...         conn=conn,
        ...         table=CustomPricingEntry,
        ...         rows=[{"property_id": 1, "date": date(2025, 8, 1), "price_per_night": 90000}],
        ...         conflict_columns=["property_id", "date"],
        ...         update_columns=["price_per_night", "price_per_adult", "price_per_child"],
        ...     )
    """
    if not rows:
        return 0

    stmt = insert(table).values(rows)

    set_dict = {col: getattr(stmt.excluded, col) for col in update_columns}
    if hasattr(table, "updated_at"):
        set_dict["updated_at"] = stmt.excluded.updated_at

    distinct_check = or_(
        *[
            getattr(table, col).is_distinct_from(getattr(stmt.excluded, col))
            for col in update_columns
        ]
    )

    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_=set_dict,
        where=distinct_check,
    )

    result = conn.execute(stmt)
    return result.rowcount
