"""
SQLAlchemy engine singleton.

One engine per process, pooled. Every booking write runs in a single
``engine.begin()`` transaction so a failure leaves nothing half-written.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from villa_booking.config import DATABASE_URL, DB_MAX_OVERFLOW, DB_POOL_SIZE

engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_size=DB_POOL_SIZE,
    max_overflow=DB_MAX_OVERFLOW,
    pool_pre_ping=True,  # Detect connections dropped by the server
    pool_recycle=3600,
    echo=False,
)


def check_engine_health() -> bool:
    """
    Check that the database is reachable.

    Used by the /ready endpoint and by the integration test fixtures.

    Returns:
        bool: True if ``SELECT 1`` succeeds, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
