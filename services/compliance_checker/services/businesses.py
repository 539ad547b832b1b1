"""
Business Service
================

CRUD and statistics for stored business profiles.

Version: 0.1.0
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, StorageError
from shared.logging import get_logger
from shared.models.business import (
    Business,
    BusinessCompliance,
    BusinessDetail,
    BusinessProfileInput,
    BusinessStats,
    ComplianceHistoryEntry,
    IndustryCount,
    Location,
    LocationCount,
)
from shared.models.common import PaginatedResponse, Pagination

from services.compliance_checker.services.regulations import RegulationRepository


logger = get_logger(__name__)


_BUSINESS_COLUMNS = """
    id, name, industry, state, county, city, zip_code, size,
    employee_count, annual_revenue, business_type, created_at, updated_at
"""


def business_from_row(row: Any) -> Business:
    """Map a ``businesses`` row onto the API model."""
    return Business(
        id=row.id,
        name=row.name,
        industry=row.industry,
        location=Location(
            state=row.state,
            county=row.county,
            city=row.city,
            zip_code=row.zip_code,
        ),
        size=row.size,
        employee_count=row.employee_count,
        annual_revenue=float(row.annual_revenue),
        business_type=row.business_type,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _profile_params(profile: BusinessProfileInput) -> dict[str, Any]:
    return {
        "name": profile.name,
        "industry": profile.industry,
        "state": profile.state,
        "county": profile.county,
        "city": profile.city,
        "zip_code": profile.zip_code,
        "size": profile.size.value,
        "employee_count": profile.employee_count,
        "annual_revenue": profile.annual_revenue,
        "business_type": profile.business_type,
    }


class BusinessService:
    """
    Service for managing business profiles.

    Writes are not retried; a failed write surfaces as StorageError.
    """

    def __init__(self, regulations: RegulationRepository | None = None) -> None:
        self.regulations = regulations or RegulationRepository()

    async def create_business(
        self,
        db: AsyncSession,
        profile: BusinessProfileInput,
    ) -> Business:
        """Insert a business and return it with its id and timestamps."""
        query = text(f"""
            INSERT INTO businesses (
                name, industry, state, county, city, zip_code, size,
                employee_count, annual_revenue, business_type
            ) VALUES (
                :name, :industry, :state, :county, :city, :zip_code, :size,
                :employee_count, :annual_revenue, :business_type
            )
            RETURNING {_BUSINESS_COLUMNS}
        """)
        row = await self._execute_one(db, "create_business", query, _profile_params(profile))
        business = business_from_row(row)

        logger.info(
            "business_created",
            business_id=business.id,
            industry=business.industry,
            size=business.size.value,
        )
        return business

    async def list_businesses(
        self,
        db: AsyncSession,
        pagination: Pagination,
        industry: str | None = None,
        size: str | None = None,
        county: str | None = None,
    ) -> PaginatedResponse[Business]:
        """List businesses, newest first, with optional filters."""
        conditions = ["1=1"]
        params: dict[str, Any] = {}

        if industry:
            conditions.append("industry = :industry")
            params["industry"] = industry
        if size:
            conditions.append("size = :size")
            params["size"] = size
        if county:
            conditions.append("county = :county")
            params["county"] = county

        where = " AND ".join(conditions)

        count_rows = await self._execute(
            db,
            "count_businesses",
            text(f"SELECT COUNT(*) AS total FROM businesses WHERE {where}"),
            params,
        )
        total = int(count_rows[0].total) if count_rows else 0

        rows = await self._execute(
            db,
            "list_businesses",
            text(f"""
                SELECT {_BUSINESS_COLUMNS}
                FROM businesses
                WHERE {where}
                ORDER BY created_at DESC, id DESC
                LIMIT :limit OFFSET :offset
            """),
            {**params, "limit": pagination.limit, "offset": pagination.offset},
        )

        return PaginatedResponse[Business](
            items=[business_from_row(row) for row in rows],
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            pages=pagination.pages_for(total),
        )

    async def get_business(self, db: AsyncSession, business_id: int) -> Business:
        """
        Get a business by id.

        Raises:
            NotFoundError: No business with this id
        """
        rows = await self._execute(
            db,
            "get_business",
            text(f"SELECT {_BUSINESS_COLUMNS} FROM businesses WHERE id = :id"),
            {"id": business_id},
        )
        if not rows:
            raise NotFoundError("Business", business_id)
        return business_from_row(rows[0])

    async def get_business_detail(self, db: AsyncSession, business_id: int) -> BusinessDetail:
        """Business with its compliance history and linked regulations."""
        business = await self.get_business(db, business_id)
        history = await self.get_compliance_history(db, business_id)
        regulations = await self.regulations.fetch_linked(
            db, business_id, applicable_only=False
        )

        return BusinessDetail(
            **business.model_dump(),
            compliance_history=history,
            applicable_regulations=regulations,
        )

    async def get_business_compliance(
        self,
        db: AsyncSession,
        business_id: int,
    ) -> BusinessCompliance:
        """Compliance history and linked regulations of an existing business."""
        await self.get_business(db, business_id)
        history = await self.get_compliance_history(db, business_id)
        regulations = await self.regulations.fetch_linked(
            db, business_id, applicable_only=False
        )
        return BusinessCompliance(
            business_id=business_id,
            compliance_history=history,
            applicable_regulations=regulations,
        )

    async def get_compliance_history(
        self,
        db: AsyncSession,
        business_id: int,
    ) -> list[ComplianceHistoryEntry]:
        """Saved compliance results for a business, newest first."""
        rows = await self._execute(
            db,
            "compliance_history",
            text("""
                SELECT cr.id, cr.compliance_score, cr.risk_level, cr.created_at,
                       (
                           SELECT COUNT(*) FROM business_regulations br
                           WHERE br.business_id = cr.business_id
                       ) AS regulation_count
                FROM compliance_results cr
                WHERE cr.business_id = :business_id
                ORDER BY cr.created_at DESC, cr.id DESC
            """),
            {"business_id": business_id},
        )
        return [
            ComplianceHistoryEntry(
                id=row.id,
                compliance_score=float(row.compliance_score),
                risk_level=row.risk_level,
                created_at=row.created_at,
                regulation_count=int(row.regulation_count or 0),
            )
            for row in rows
        ]

    async def update_business(
        self,
        db: AsyncSession,
        business_id: int,
        profile: BusinessProfileInput,
    ) -> Business:
        """
        Replace a business profile.

        Raises:
            NotFoundError: No business with this id
        """
        query = text(f"""
            UPDATE businesses SET
                name = :name,
                industry = :industry,
                state = :state,
                county = :county,
                city = :city,
                zip_code = :zip_code,
                size = :size,
                employee_count = :employee_count,
                annual_revenue = :annual_revenue,
                business_type = :business_type,
                updated_at = NOW()
            WHERE id = :id
            RETURNING {_BUSINESS_COLUMNS}
        """)
        rows = await self._execute(
            db,
            "update_business",
            query,
            {**_profile_params(profile), "id": business_id},
        )
        if not rows:
            raise NotFoundError("Business", business_id)

        logger.info("business_updated", business_id=business_id)
        return business_from_row(rows[0])

    async def delete_business(self, db: AsyncSession, business_id: int) -> None:
        """
        Delete a business and, by cascade, its results and links.

        Raises:
            NotFoundError: No business with this id
        """
        rows = await self._execute(
            db,
            "delete_business",
            text("DELETE FROM businesses WHERE id = :id RETURNING id"),
            {"id": business_id},
        )
        if not rows:
            raise NotFoundError("Business", business_id)

        logger.info("business_deleted", business_id=business_id)

    async def business_exists(self, db: AsyncSession, business_id: int) -> bool:
        rows = await self._execute(
            db,
            "business_exists",
            text("SELECT id FROM businesses WHERE id = :id"),
            {"id": business_id},
        )
        return bool(rows)

    async def get_stats(self, db: AsyncSession) -> BusinessStats:
        """Aggregate statistics over all businesses."""
        overview_rows = await self._execute(
            db,
            "business_stats",
            text("""
                SELECT
                    COUNT(*) AS total_businesses,
                    COUNT(DISTINCT industry) AS total_industries,
                    COUNT(DISTINCT county) AS total_counties,
                    COUNT(DISTINCT city) AS total_cities,
                    AVG(employee_count) AS avg_employees,
                    AVG(annual_revenue) AS avg_revenue,
                    COUNT(*) FILTER (WHERE size = 'Small') AS small_businesses,
                    COUNT(*) FILTER (WHERE size = 'Medium') AS medium_businesses,
                    COUNT(*) FILTER (WHERE size = 'Large') AS large_businesses
                FROM businesses
            """),
            {},
        )
        industry_rows = await self._execute(
            db,
            "business_industry_stats",
            text("""
                SELECT industry, COUNT(*) AS count
                FROM businesses
                GROUP BY industry
                ORDER BY count DESC, industry
                LIMIT 10
            """),
            {},
        )
        location_rows = await self._execute(
            db,
            "business_location_stats",
            text("""
                SELECT county, city, COUNT(*) AS count
                FROM businesses
                GROUP BY county, city
                ORDER BY count DESC, county, city
                LIMIT 10
            """),
            {},
        )

        overview = overview_rows[0]
        return BusinessStats(
            total_businesses=overview.total_businesses,
            total_industries=overview.total_industries,
            total_counties=overview.total_counties,
            total_cities=overview.total_cities,
            avg_employees=float(overview.avg_employees) if overview.avg_employees is not None else None,
            avg_revenue=float(overview.avg_revenue) if overview.avg_revenue is not None else None,
            small_businesses=overview.small_businesses,
            medium_businesses=overview.medium_businesses,
            large_businesses=overview.large_businesses,
            top_industries=[
                IndustryCount(industry=row.industry, count=row.count) for row in industry_rows
            ],
            top_locations=[
                LocationCount(county=row.county, city=row.city, count=row.count)
                for row in location_rows
            ],
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _execute(
        self,
        db: AsyncSession,
        operation: str,
        query: Any,
        params: dict[str, Any],
    ) -> Sequence[Any]:
        try:
            result = await db.execute(query, params)
            return result.fetchall()
        except SQLAlchemyError as e:
            logger.error("business_query_failed", operation=operation, error=str(e))
            raise StorageError(operation, e) from e

    async def _execute_one(
        self,
        db: AsyncSession,
        operation: str,
        query: Any,
        params: dict[str, Any],
    ) -> Any:
        rows = await self._execute(db, operation, query, params)
        if not rows:
            raise StorageError(operation)
        return rows[0]
