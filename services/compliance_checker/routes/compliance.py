"""
Compliance Routes
=================

API endpoints for compliance checks and saved results.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.database.postgres import get_postgres_session
from shared.logging import get_logger
from shared.models.business import BusinessProfileInput
from shared.models.compliance import (
    ComplianceHistory,
    ComplianceResult,
    ComplianceResultSave,
    SavedComplianceResult,
)
from services.compliance_checker.services.compliance import ComplianceService

logger = get_logger(__name__)

router = APIRouter()

compliance_service = ComplianceService()


@router.post("/check", response_model=ComplianceResult)
async def check_compliance(
    profile: BusinessProfileInput,
    db: AsyncSession = Depends(get_postgres_session),
) -> ComplianceResult:
    """
    Determine applicable regulations and score a business profile.

    The profile is validated before any evaluation work; invalid input
    yields 400 with the first validation message.
    """
    return await compliance_service.check(db, profile)


@router.post(
    "/save",
    response_model=SavedComplianceResult,
    status_code=status.HTTP_201_CREATED,
)
async def save_compliance_result(
    request: ComplianceResultSave,
    db: AsyncSession = Depends(get_postgres_session),
) -> SavedComplianceResult:
    """
    Save a computed compliance result for an existing business.

    Links every applicable regulation to the business with status
    ``pending``.
    """
    return await compliance_service.save_result(db, request)


@router.get("/history/{business_id}", response_model=ComplianceHistory)
async def get_compliance_history(
    business_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_postgres_session),
) -> ComplianceHistory:
    """Latest saved result and linked regulations for a business."""
    return await compliance_service.get_history(db, business_id)
