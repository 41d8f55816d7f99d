"""Shared fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from storefront.infrastructure.config import settings
from storefront.main import app


@pytest.fixture
def client(sync_factory) -> Generator[TestClient, None, None]:
    """Create test client without authentication."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(sync_factory) -> Generator[TestClient, None, None]:
    """Create test client with valid admin key authentication."""
    with TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.admin_api_key}"},
    ) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {settings.admin_api_key}"}
