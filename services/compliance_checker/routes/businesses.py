"""
Businesses Routes
=================

API endpoints for business profile management.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.database.postgres import get_postgres_session
from shared.logging import get_logger
from shared.models.business import (
    Business,
    BusinessCompliance,
    BusinessDetail,
    BusinessProfileInput,
    BusinessSize,
    BusinessStats,
)
from shared.models.common import MessageResponse, PaginatedResponse, Pagination
from services.compliance_checker.services.businesses import BusinessService

logger = get_logger(__name__)

router = APIRouter()

business_service = BusinessService()


@router.post("", response_model=Business, status_code=status.HTTP_201_CREATED)
async def create_business(
    profile: BusinessProfileInput,
    db: AsyncSession = Depends(get_postgres_session),
) -> Business:
    """Create a business profile."""
    return await business_service.create_business(db, profile)


@router.get("", response_model=PaginatedResponse[Business])
async def list_businesses(
    industry: str | None = Query(default=None, description="Filter by industry"),
    size: BusinessSize | None = Query(default=None, description="Filter by size"),
    county: str | None = Query(default=None, description="Filter by county"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    db: AsyncSession = Depends(get_postgres_session),
) -> PaginatedResponse[Business]:
    """
    List businesses with optional filtering, newest first.

    Args:
        industry: Exact industry
        size: Small, Medium or Large
        county: Exact county name
        page: Page number
        page_size: Items per page
        db: Database session
    """
    result = await business_service.list_businesses(
        db,
        Pagination(page=page, page_size=page_size),
        industry=industry,
        size=size.value if size else None,
        county=county,
    )

    logger.debug("businesses_listed", total=result.total, page=page)
    return result


@router.get("/stats/overview", response_model=BusinessStats)
async def get_business_stats(
    db: AsyncSession = Depends(get_postgres_session),
) -> BusinessStats:
    """Aggregate statistics over stored businesses."""
    return await business_service.get_stats(db)


@router.get("/{business_id}", response_model=BusinessDetail)
async def get_business(
    business_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_postgres_session),
) -> BusinessDetail:
    """Get a business with its compliance history and linked regulations."""
    return await business_service.get_business_detail(db, business_id)


@router.put("/{business_id}", response_model=Business)
async def update_business(
    profile: BusinessProfileInput,
    business_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_postgres_session),
) -> Business:
    """Replace a business profile."""
    return await business_service.update_business(db, business_id, profile)


@router.delete("/{business_id}", response_model=MessageResponse)
async def delete_business(
    business_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_postgres_session),
) -> MessageResponse:
    """Delete a business together with its saved results."""
    await business_service.delete_business(db, business_id)
    return MessageResponse(message="Business deleted successfully")


@router.get("/{business_id}/compliance", response_model=BusinessCompliance)
async def get_business_compliance(
    business_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_postgres_session),
) -> BusinessCompliance:
    """Compliance history and linked regulations for a business."""
    return await business_service.get_business_compliance(db, business_id)
