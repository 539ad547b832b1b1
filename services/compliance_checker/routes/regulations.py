"""
Regulations Routes
==================

API endpoints for browsing and searching the regulation catalogue.

Version: 0.1.0
"""

from datetime import date

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.database.postgres import get_postgres_session
from shared.logging import get_logger
from shared.models.common import PaginatedResponse, Pagination
from shared.models.regulation import (
    CategoryCount,
    JurisdictionCount,
    Regulation,
    RegulationSearchHit,
    RegulationStats,
)
from services.compliance_checker.services.regulations import RegulationRepository

logger = get_logger(__name__)

router = APIRouter()

regulation_repository = RegulationRepository()


@router.get("", response_model=PaginatedResponse[Regulation])
async def list_regulations(
    category: str | None = Query(default=None, description="Filter by category"),
    jurisdiction: str | None = Query(default=None, description="Filter by jurisdiction"),
    industry: str | None = Query(default=None, description="Filter by applicability tag"),
    search: str | None = Query(default=None, description="Full-text search"),
    sort_by: str = Query(default="title", alias="sortBy"),
    sort_order: str = Query(default="ASC", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    db: AsyncSession = Depends(get_postgres_session),
) -> PaginatedResponse[Regulation]:
    """
    List regulations with filtering, sorting and pagination.

    Unknown ``sortBy`` values fall back to ``title`` and unknown
    ``sortOrder`` values to ``ASC``.
    """
    return await regulation_repository.list_regulations(
        db,
        Pagination(page=page, page_size=page_size),
        category=category,
        jurisdiction=jurisdiction,
        industry=industry,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/search/advanced", response_model=PaginatedResponse[RegulationSearchHit])
async def search_regulations(
    query: str = Query(..., min_length=1, description="Search query"),
    category: str | None = Query(default=None),
    jurisdiction: str | None = Query(default=None),
    effective_date_from: date | None = Query(default=None, alias="effectiveDateFrom"),
    effective_date_to: date | None = Query(default=None, alias="effectiveDateTo"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    db: AsyncSession = Depends(get_postgres_session),
) -> PaginatedResponse[RegulationSearchHit]:
    """Full-text search ranked by relevance."""
    return await regulation_repository.search(
        db,
        query,
        Pagination(page=page, page_size=page_size),
        category=category,
        jurisdiction=jurisdiction,
        effective_date_from=effective_date_from,
        effective_date_to=effective_date_to,
    )


@router.get("/categories/list", response_model=list[CategoryCount])
async def list_categories(
    db: AsyncSession = Depends(get_postgres_session),
) -> list[CategoryCount]:
    """Regulation categories with counts."""
    return await regulation_repository.list_categories(db)


@router.get("/jurisdictions/list", response_model=list[JurisdictionCount])
async def list_jurisdictions(
    db: AsyncSession = Depends(get_postgres_session),
) -> list[JurisdictionCount]:
    """Jurisdictions with counts."""
    return await regulation_repository.list_jurisdictions(db)


@router.get("/stats/overview", response_model=RegulationStats)
async def get_regulation_stats(
    db: AsyncSession = Depends(get_postgres_session),
) -> RegulationStats:
    """Corpus statistics overview."""
    return await regulation_repository.get_stats(db)


@router.get("/{regulation_id}", response_model=Regulation)
async def get_regulation(
    regulation_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_postgres_session),
) -> Regulation:
    """Get a regulation with its penalties, requirements and exemptions."""
    return await regulation_repository.get_regulation(db, regulation_id)
