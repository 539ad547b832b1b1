"""
Shared Models
=============

Pydantic models shared by the bizcomply services.

Models:
- Business models (BusinessProfileInput, BusinessProfile, Business)
- Regulation models (Regulation, Penalty, Requirement)
- Compliance models (ComplianceResult, RiskLevel, ComplianceResultSave)
"""

from shared.models.business import (
    Business,
    BusinessCompliance,
    BusinessDetail,
    BusinessProfile,
    BusinessProfileInput,
    BusinessSize,
    BusinessStats,
    ComplianceHistoryEntry,
    IndustryCount,
    Location,
    LocationCount,
)
from shared.models.common import (
    ApiModel,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    PaginatedResponse,
    Pagination,
)
from shared.models.compliance import (
    ComplianceHistory,
    ComplianceResult,
    ComplianceResultSave,
    ComplianceStatus,
    RegulationRef,
    RiskLevel,
    SavedComplianceResult,
)
from shared.models.regulation import (
    FEDERAL,
    CategoryCount,
    JurisdictionCount,
    LinkedRegulation,
    Penalty,
    Regulation,
    RegulationCategory,
    RegulationFlag,
    RegulationSearchHit,
    RegulationStats,
    Requirement,
    derive_regulation_flags,
)

__all__ = [
    # Business
    "Business",
    "BusinessCompliance",
    "BusinessDetail",
    "BusinessProfile",
    "BusinessProfileInput",
    "BusinessSize",
    "BusinessStats",
    "ComplianceHistoryEntry",
    "IndustryCount",
    "Location",
    "LocationCount",
    # Regulation
    "FEDERAL",
    "CategoryCount",
    "JurisdictionCount",
    "LinkedRegulation",
    "Penalty",
    "Regulation",
    "RegulationCategory",
    "RegulationFlag",
    "RegulationSearchHit",
    "RegulationStats",
    "Requirement",
    "derive_regulation_flags",
    # Compliance
    "ComplianceHistory",
    "ComplianceResult",
    "ComplianceResultSave",
    "ComplianceStatus",
    "RegulationRef",
    "RiskLevel",
    "SavedComplianceResult",
    # Common
    "ApiModel",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "PaginatedResponse",
    "Pagination",
]
