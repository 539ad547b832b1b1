"""
Compliance Checker Routes Tests
===============================

Tests for the HTTP surface: status codes, error bodies and camelCase output.

Version: 0.1.0
"""

from datetime import UTC, date, datetime
from typing import Any
from unittest.mock import AsyncMock, patch

from fastapi import status
from httpx import AsyncClient

from shared.errors import NotFoundError, StorageError
from shared.models.business import Business, BusinessProfileInput
from shared.models.common import PaginatedResponse
from shared.models.compliance import (
    ComplianceHistory,
    ComplianceResult,
    RiskLevel,
    SavedComplianceResult,
)

from services.compliance_checker.routes import businesses as business_routes
from services.compliance_checker.routes import compliance as compliance_routes
from services.compliance_checker.routes import regulations as regulation_routes


NOW = datetime(2026, 6, 1, tzinfo=UTC)


def _business(data: dict[str, Any], business_id: int = 1) -> Business:
    profile = BusinessProfileInput.model_validate(data).to_profile()
    return Business(id=business_id, created_at=NOW, updated_at=NOW, **profile.model_dump())


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """Tests for service metadata endpoints."""

    async def test_root(self, compliance_checker_client: AsyncClient) -> None:
        """Test the root endpoint."""
        response = await compliance_checker_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["service"] == "Bizcomply Compliance Checker"

    async def test_request_id_echoed(self, compliance_checker_client: AsyncClient) -> None:
        """Test that the request id header is returned."""
        response = await compliance_checker_client.get("/", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"


# =============================================================================
# Compliance
# =============================================================================


class TestComplianceRoutes:
    """Tests for /api/v1/compliance."""

    async def test_check_returns_camel_case(
        self,
        compliance_checker_client: AsyncClient,
        sample_business_data: dict[str, Any],
        make_regulation,
    ) -> None:
        """Test a successful check response."""
        profile = BusinessProfileInput.model_validate(sample_business_data).to_profile()
        result = ComplianceResult(
            business=profile,
            applicable_regulations=[
                make_regulation(compliance_deadline=date(2026, 12, 31)),
            ],
            compliance_score=97,
            risk_level=RiskLevel.LOW,
            next_deadlines=["2026-12-31"],
            recommendations=["Maintain detailed records of all compliance activities"],
        )

        with patch.object(
            compliance_routes.compliance_service, "check", new=AsyncMock(return_value=result)
        ):
            response = await compliance_checker_client.post(
                "/api/v1/compliance/check", json=sample_business_data
            )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["complianceScore"] == 97
        assert body["riskLevel"] == "Low"
        assert body["nextDeadlines"] == ["2026-12-31"]
        assert body["business"]["location"]["zipCode"] == "93304"
        assert body["applicableRegulations"][0]["complianceDeadline"] == "2026-12-31"

    async def test_check_invalid_profile(
        self,
        compliance_checker_client: AsyncClient,
        sample_business_data: dict[str, Any],
    ) -> None:
        """Test that invalid input is rejected with 400 before evaluation."""
        sample_business_data["employeeCount"] = 0
        check = AsyncMock()

        with patch.object(compliance_routes.compliance_service, "check", new=check):
            response = await compliance_checker_client.post(
                "/api/v1/compliance/check", json=sample_business_data
            )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("employeeCount:")
        check.assert_not_awaited()

    async def test_check_storage_unavailable(
        self,
        compliance_checker_client: AsyncClient,
        sample_business_data: dict[str, Any],
    ) -> None:
        """Test that corpus failures map to 503."""
        with patch.object(
            compliance_routes.compliance_service,
            "check",
            new=AsyncMock(side_effect=StorageError("fetch_corpus")),
        ):
            response = await compliance_checker_client.post(
                "/api/v1/compliance/check", json=sample_business_data
            )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "Storage unavailable"

    async def test_save_result(self, compliance_checker_client: AsyncClient) -> None:
        """Test saving a result."""
        saved = SavedComplianceResult(
            id=4,
            business_id=2,
            compliance_score=81,
            risk_level=RiskLevel.MEDIUM,
            created_at=NOW,
            linked_regulations=2,
        )

        with patch.object(
            compliance_routes.compliance_service, "save_result", new=AsyncMock(return_value=saved)
        ):
            response = await compliance_checker_client.post(
                "/api/v1/compliance/save",
                json={
                    "businessId": 2,
                    "score": 81,
                    "riskLevel": "Medium",
                    "applicableRegulations": [{"id": 1}, {"id": 2}],
                },
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["linkedRegulations"] == 2

    async def test_save_unknown_business(self, compliance_checker_client: AsyncClient) -> None:
        """Test that saving for a missing business returns 404."""
        with patch.object(
            compliance_routes.compliance_service,
            "save_result",
            new=AsyncMock(side_effect=NotFoundError("Business", 99)),
        ):
            response = await compliance_checker_client.post(
                "/api/v1/compliance/save",
                json={"businessId": 99, "score": 50, "riskLevel": "High"},
            )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Business not found: 99"

    async def test_save_invalid_risk_level(self, compliance_checker_client: AsyncClient) -> None:
        """Test that an unknown risk level is a validation error."""
        response = await compliance_checker_client.post(
            "/api/v1/compliance/save",
            json={"businessId": 1, "score": 50, "riskLevel": "Extreme"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_empty_history(self, compliance_checker_client: AsyncClient) -> None:
        """Test the history of a business without saved results."""
        with patch.object(
            compliance_routes.compliance_service,
            "get_history",
            new=AsyncMock(return_value=ComplianceHistory()),
        ):
            response = await compliance_checker_client.get("/api/v1/compliance/history/3")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"compliance": None, "regulations": []}


# =============================================================================
# Businesses
# =============================================================================


class TestBusinessRoutes:
    """Tests for /api/v1/businesses."""

    async def test_create_business(
        self,
        compliance_checker_client: AsyncClient,
        sample_business_data: dict[str, Any],
    ) -> None:
        """Test creating a business."""
        created = _business(sample_business_data, business_id=6)

        with patch.object(
            business_routes.business_service,
            "create_business",
            new=AsyncMock(return_value=created),
        ):
            response = await compliance_checker_client.post(
                "/api/v1/businesses", json=sample_business_data
            )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"] == 6
        assert body["employeeCount"] == 8
        assert "createdAt" in body

    async def test_list_businesses_filters(
        self,
        compliance_checker_client: AsyncClient,
        sample_business_data: dict[str, Any],
    ) -> None:
        """Test that filters and pagination reach the service."""
        page = PaginatedResponse[Business](
            items=[_business(sample_business_data)],
            total=1,
            page=1,
            page_size=5,
            pages=1,
        )
        list_businesses = AsyncMock(return_value=page)

        with patch.object(business_routes.business_service, "list_businesses", new=list_businesses):
            response = await compliance_checker_client.get(
                "/api/v1/businesses",
                params={"industry": "Automotive", "size": "Small", "pageSize": 5},
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["pageSize"] == 5
        kwargs = list_businesses.await_args.kwargs
        assert kwargs["industry"] == "Automotive"
        assert kwargs["size"] == "Small"
        assert list_businesses.await_args.args[1].page_size == 5

    async def test_get_missing_business(self, compliance_checker_client: AsyncClient) -> None:
        """Test 404 for an unknown business."""
        with patch.object(
            business_routes.business_service,
            "get_business_detail",
            new=AsyncMock(side_effect=NotFoundError("Business", 77)),
        ):
            response = await compliance_checker_client.get("/api/v1/businesses/77")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_delete_business(self, compliance_checker_client: AsyncClient) -> None:
        """Test deleting a business."""
        with patch.object(
            business_routes.business_service, "delete_business", new=AsyncMock(return_value=None)
        ):
            response = await compliance_checker_client.delete("/api/v1/businesses/5")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Business deleted successfully"}

    async def test_invalid_business_id(self, compliance_checker_client: AsyncClient) -> None:
        """Test that a non-positive id is rejected."""
        response = await compliance_checker_client.get("/api/v1/businesses/0")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Regulations
# =============================================================================


class TestRegulationRoutes:
    """Tests for /api/v1/regulations."""

    async def test_get_regulation(
        self,
        compliance_checker_client: AsyncClient,
        make_regulation,
    ) -> None:
        """Test fetching one regulation."""
        regulation = make_regulation(title="Family and Medical Leave Act (FMLA)")

        with patch.object(
            regulation_routes.regulation_repository,
            "get_regulation",
            new=AsyncMock(return_value=regulation),
        ):
            response = await compliance_checker_client.get(f"/api/v1/regulations/{regulation.id}")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["effectiveDate"] == "2020-01-01"
        assert body["flags"] == ["family_medical_leave", "healthcare_specific"]

    async def test_search_requires_query(self, compliance_checker_client: AsyncClient) -> None:
        """Test that advanced search needs a query."""
        response = await compliance_checker_client.get("/api/v1/regulations/search/advanced")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"].startswith("query:")

    async def test_categories_not_shadowed_by_id_route(
        self,
        compliance_checker_client: AsyncClient,
    ) -> None:
        """Test that fixed paths are matched before the id path."""
        with patch.object(
            regulation_routes.regulation_repository,
            "list_categories",
            new=AsyncMock(return_value=[]),
        ):
            response = await compliance_checker_client.get("/api/v1/regulations/categories/list")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []
