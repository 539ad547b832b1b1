"""
Test Configuration
==================

Pytest fixtures for Bizcomply tests.
"""

import os
from collections.abc import AsyncGenerator
from datetime import date
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["REDIS_ENABLED"] = "false"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mock database session."""
    return AsyncMock()


@pytest_asyncio.fixture
async def compliance_checker_client(
    mock_db_session: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Compliance Checker Service."""
    from shared.database.postgres import get_postgres_session
    from services.compliance_checker.main import app

    async def _session_override() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db_session

    app.dependency_overrides[get_postgres_session] = _session_override
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_business_data() -> dict[str, Any]:
    """Sample business profile as submitted by a user."""
    return {
        "name": "Bakersfield Auto Repair",
        "industry": "Automotive",
        "state": "CA",
        "county": "Kern",
        "city": "Bakersfield",
        "zipCode": "93304",
        "size": "Small",
        "employeeCount": 8,
        "annualRevenue": 450000,
        "businessType": "LLC",
    }


@pytest.fixture
def make_regulation():
    """Factory for Regulation models with sensible defaults."""
    from shared.models.regulation import Regulation

    counter = {"id": 0}

    def _make(**overrides: Any) -> Regulation:
        counter["id"] += 1
        data: dict[str, Any] = {
            "id": counter["id"],
            "title": f"Regulation {counter['id']}",
            "description": "Test regulation",
            "category": "Business Licensing",
            "jurisdiction": "Federal",
            "authority": "Test Authority",
            "effective_date": date(2020, 1, 1),
        }
        data.update(overrides)
        return Regulation.model_validate(data)

    return _make
