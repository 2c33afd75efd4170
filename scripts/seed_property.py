import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging  # noqa: E402
from decimal import Decimal  # noqa: E402

from villa_booking.db.engine import engine  # noqa: E402
from villa_booking.db.readers.property import find_property  # noqa: E402
from villa_booking.db.writers.property import insert_property  # noqa: E402
from villa_booking.logging_config import setup_logging  # noqa: E402

setup_logging()
logger = logging.getLogger(__name__)

# Minor units (agorot)
DEFAULT_PROPERTY = {
    "name": "Villa",
    "currency": "ILS",
    "weekday_rate": 150000,
    "weekend_rate": 180000,
    "weekend_days": [3, 4, 5],
    "price_per_adult": 0,
    "price_per_child": 0,
    "cleaning_fee": 30000,
    "vat_rate": Decimal("0.17"),
    "min_nights": 2,
    "max_nights": 30,
    "max_occupancy": 12,
}


def main() -> None:
    """Create the villa row on an empty database; a no-op when one exists."""
    with engine.begin() as conn:
        existing = find_property(conn)
        if existing is not None:
            logger.info("Property already configured (id=%s)", existing.id)
            return
        row = insert_property(conn, DEFAULT_PROPERTY)
    logger.info("Created property id=%s; edit it from the admin dashboard", row.id)


if __name__ == "__main__":
    main()
