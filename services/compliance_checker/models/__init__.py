"""
Compliance Checker Database Models
==================================

SQLAlchemy ORM models for businesses, the regulation corpus and saved
compliance results.

Tables:
- businesses: Small-business profiles
- regulations: Regulation corpus
- penalties, requirements, regulation_exemptions, regulation_applicability:
  Nested regulation records
- compliance_results: Saved compliance scores
- business_regulations: Business/regulation applicability links

Version: 0.1.0
"""

from services.compliance_checker.models.business import (
    BusinessModel,
    BusinessRegulationModel,
    ComplianceResultModel,
)
from services.compliance_checker.models.regulation import (
    PenaltyModel,
    RegulationApplicabilityModel,
    RegulationExemptionModel,
    RegulationModel,
    RequirementModel,
)

__all__ = [
    # Business
    "BusinessModel",
    "BusinessRegulationModel",
    "ComplianceResultModel",
    # Regulation
    "RegulationModel",
    "PenaltyModel",
    "RequirementModel",
    "RegulationExemptionModel",
    "RegulationApplicabilityModel",
]
