"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from arc_scoring.api.app import create_app
from arc_scoring.api.dependencies import get_authority_service, get_database


def _mock_db(healthy: bool = True):
    """Create a mock database."""
    db = AsyncMock()
    if healthy:
        db.health_check = AsyncMock(return_value=True)
    else:
        db.health_check = AsyncMock(side_effect=Exception("Connection refused"))
    return db


@pytest.fixture
def authority_service() -> AsyncMock:
    """Mock AuthorityService for snapshot lookups."""
    service = AsyncMock()
    service.get_smart_followers = AsyncMock(return_value=None)
    return service


@pytest.fixture
def client(authority_service) -> TestClient:
    """Test client with the database and authority service mocked out."""
    app = create_app()
    app.dependency_overrides[get_database] = lambda: _mock_db()
    app.dependency_overrides[get_authority_service] = lambda: authority_service
    return TestClient(app)


@pytest.fixture
def unhealthy_client() -> TestClient:
    """Test client whose database health check fails."""
    app = create_app()
    app.dependency_overrides[get_database] = lambda: _mock_db(healthy=False)
    return TestClient(app)
