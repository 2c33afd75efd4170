"""
Unit tests for FastAPI dependency injection.
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from villa_booking.core.errors import Forbidden, Unauthorized
from villa_booking.dependencies import get_db_engine, get_notifier, require_admin, require_caller
from villa_booking.identity import CallerIdentity
from villa_booking.services.notifications import Notifier


@pytest.mark.unit
def test_get_db_engine_dependency() -> None:
    """Test that get_db_engine returns the engine instance."""
    engine_gen = get_db_engine()
    engine = next(engine_gen)

    assert engine is not None
    assert isinstance(engine, Engine)


@pytest.mark.unit
def test_dependency_injection_can_be_overridden() -> None:
    """Test that dependency can be overridden for testing."""
    app = FastAPI()

    @app.get("/test")
    def test_endpoint(engine: Engine = Depends(get_db_engine)) -> dict[str, str]:
        """Test endpoint."""
        return {"engine_name": engine.name}

    mock_engine = Mock(spec=Engine)
    mock_engine.name = "mock_engine"

    app.dependency_overrides[get_db_engine] = lambda: mock_engine

    client = TestClient(app)
    response = client.get("/test")

    assert response.status_code == 200
    assert response.json() == {"engine_name": "mock_engine"}


@pytest.mark.unit
def test_dependency_injection_provides_same_engine() -> None:
    """Test that multiple calls get the same engine instance."""
    engine1 = next(get_db_engine())
    engine2 = next(get_db_engine())

    assert engine1 is engine2


@pytest.mark.unit
def test_get_notifier_returns_notifier() -> None:
    """Test that a notifier is always available, webhook configured or not."""
    assert isinstance(get_notifier(), Notifier)


@pytest.mark.unit
def test_require_caller_without_credentials() -> None:
    """Test that a missing bearer token raises Unauthorized."""
    with pytest.raises(Unauthorized):
        require_caller(None)


@pytest.mark.unit
def test_require_admin_checks_role() -> None:
    """Test that only callers with the admin role pass."""
    admin = CallerIdentity(user_id="a", role="admin")
    guest = CallerIdentity(user_id="g", role=None)

    assert require_admin(admin) is admin
    with pytest.raises(Forbidden):
        require_admin(guest)
