"""
Fixtures for API route tests: dependency overrides and signed bearer tokens.
"""

from __future__ import annotations

from typing import Callable, Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from villa_booking.config import ADMIN_ROLE, AUTH_JWT_SECRET
from villa_booking.dependencies import get_db_engine, get_notifier
from villa_booking.main import app


def _encode(user_id: str, role: str | None = None) -> str:
    claims: dict = {"sub": user_id, "email": f"{user_id}@example.com"}
    if role:
        claims["app_metadata"] = {"role": role}
    return jwt.encode(claims, AUTH_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def make_token() -> Callable[..., str]:
    return _encode


@pytest.fixture
def guest_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {_encode('guest-1')}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {_encode('admin-1', role=ADMIN_ROLE)}"}


@pytest.fixture
def api_engine() -> MagicMock:
    return MagicMock(name="engine")


@pytest.fixture
def api_notifier() -> MagicMock:
    return MagicMock(name="notifier")


@pytest.fixture
def client(api_engine: MagicMock, api_notifier: MagicMock) -> Generator[TestClient, None, None]:
    """Test client with the engine and notifier replaced by mocks."""
    app.dependency_overrides[get_db_engine] = lambda: api_engine
    app.dependency_overrides[get_notifier] = lambda: api_notifier
    yield TestClient(app)
    app.dependency_overrides.clear()
