"""
FastAPI dependency providers.

Overridable in tests through ``app.dependency_overrides``:

    >>> app.dependency_overrides[get_db_engine] = lambda: mock_engine
    >>> app.dependency_overrides[get_notifier] = lambda: mock_notifier
"""

from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from villa_booking.core.errors import Forbidden, Unauthorized
from villa_booking.identity import CallerIdentity, decode_token
from villa_booking.services.notifications import Notifier, get_default_notifier

bearer_scheme = HTTPBearer(auto_error=False)


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide the database engine.

    Imported lazily so the app can be built in tests without a database.

    Yields:
        Engine: SQLAlchemy database engine
    """
    from villa_booking.db.engine import engine

    yield engine


def get_notifier() -> Notifier:
    return get_default_notifier()


def require_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CallerIdentity:
    """
    Authenticated caller, resolved before the route touches any data.

    Raises:
        Unauthorized: missing or invalid bearer token
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Authentication required")
    return decode_token(credentials.credentials)


def require_admin(caller: CallerIdentity = Depends(require_caller)) -> CallerIdentity:
    """
    Authenticated caller holding the admin role.

    Raises:
        Forbidden: caller is not an admin
    """
    if not caller.is_admin:
        raise Forbidden("Admin role required", {"user_id": caller.user_id})
    return caller
