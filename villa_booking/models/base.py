from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

from villa_booking.config import SCHEMA


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every table lives in the villa schema; constraint names follow a fixed
    convention so Alembic migrations can refer to them.
    """

    metadata = MetaData(
        schema=SCHEMA,
        naming_convention={
            "ix": "ix_%(table_name)s_%(column_0_name)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s",
        },
    )
