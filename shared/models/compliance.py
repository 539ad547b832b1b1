"""
Compliance Models
=================

Models for compliance evaluation results and their persisted form.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import Field

from shared.models.business import BusinessProfile
from shared.models.common import ApiModel
from shared.models.regulation import LinkedRegulation, Regulation


class RiskLevel(str, Enum):
    """Risk tier derived from the compliance score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class ComplianceStatus(str, Enum):
    """Status of a business/regulation linkage."""

    PENDING = "pending"
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non_compliant"
    NOT_APPLICABLE = "not_applicable"


class ComplianceResult(ApiModel):
    """Outcome of evaluating one business profile against the corpus."""

    business: BusinessProfile
    applicable_regulations: list[Regulation] = Field(
        default_factory=list,
        alias="applicableRegulations",
    )
    compliance_score: int = Field(..., ge=0, le=100, alias="complianceScore")
    risk_level: RiskLevel = Field(alias="riskLevel")
    next_deadlines: list[str] = Field(default_factory=list, alias="nextDeadlines")
    recommendations: list[str] = Field(default_factory=list)


class RegulationRef(ApiModel):
    """Reference to a regulation inside a save request."""

    id: int


class ComplianceResultSave(ApiModel):
    """Request to persist a previously computed result for a business."""

    business_id: int = Field(..., ge=1, alias="businessId")
    score: float = Field(..., ge=0, le=100)
    risk_level: RiskLevel = Field(alias="riskLevel")
    applicable_regulations: list[RegulationRef] = Field(
        default_factory=list,
        alias="applicableRegulations",
    )

    @classmethod
    def from_result(cls, business_id: int, result: ComplianceResult) -> "ComplianceResultSave":
        """Build a save request from an evaluation result."""
        return cls(
            business_id=business_id,
            score=result.compliance_score,
            risk_level=result.risk_level,
            applicable_regulations=[
                RegulationRef(id=regulation.id) for regulation in result.applicable_regulations
            ],
        )


class SavedComplianceResult(ApiModel):
    """A persisted compliance result row."""

    id: int
    business_id: int = Field(alias="businessId")
    compliance_score: float = Field(alias="complianceScore")
    risk_level: RiskLevel = Field(alias="riskLevel")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        alias="createdAt",
    )
    linked_regulations: int = Field(default=0, alias="linkedRegulations")


class ComplianceHistory(ApiModel):
    """Latest saved result for a business plus its linked regulations."""

    compliance: SavedComplianceResult | None = None
    regulations: list[LinkedRegulation] = Field(default_factory=list)
