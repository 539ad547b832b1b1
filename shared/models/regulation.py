"""
Regulation Models
=================

Models for regulation records and their nested penalties, requirements,
exemptions and applicability tags.

Version: 0.1.0
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_serializer, model_validator

from shared.models.common import ApiModel


FEDERAL = "Federal"


class RegulationCategory(str, Enum):
    """Fixed subject-matter taxonomy."""

    LABOR_EMPLOYMENT = "Labor & Employment"
    WORKPLACE_SAFETY = "Workplace Safety"
    ENVIRONMENTAL = "Environmental"
    HEALTH_SAFETY = "Health & Safety"
    PRIVACY_SECURITY = "Privacy & Security"
    BUSINESS_LICENSING = "Business Licensing"
    LOCAL_ORDINANCES = "Local Ordinances"
    LAND_USE = "Land Use"
    TRANSPORTATION = "Transportation"
    TAXATION = "Taxation"
    PROFESSIONAL_LICENSING = "Professional Licensing"
    CIVIL_RIGHTS = "Civil Rights"
    FINANCIAL_SERVICES = "Financial Services"


class RegulationFlag(str, Enum):
    """Boolean markers derived from a regulation when it is loaded."""

    HEALTHCARE_SPECIFIC = "healthcare_specific"
    FAMILY_MEDICAL_LEAVE = "family_medical_leave"


# Title fragments that mark a flag
FLAG_TITLE_PATTERNS: dict[RegulationFlag, tuple[str, ...]] = {
    RegulationFlag.HEALTHCARE_SPECIFIC: ("HIPAA", "Healthcare", "Medical"),
    RegulationFlag.FAMILY_MEDICAL_LEAVE: ("FMLA", "Family and Medical Leave"),
}


def derive_regulation_flags(title: str) -> frozenset[RegulationFlag]:
    """Compute the flags implied by a regulation title (case-sensitive)."""
    return frozenset(
        flag
        for flag, patterns in FLAG_TITLE_PATTERNS.items()
        if any(pattern in title for pattern in patterns)
    )


class Penalty(ApiModel):
    """Penalty attached to a regulation."""

    type: str
    amount: float | None = None
    description: str


class Requirement(ApiModel):
    """A compliance obligation imposed by a regulation."""

    description: str
    frequency: str = "As needed"
    documentation: str = "Required documentation varies by regulation"
    deadline: str = "Varies by requirement"


class Regulation(ApiModel):
    """A regulation record from the corpus."""

    id: int
    title: str
    description: str
    category: RegulationCategory
    jurisdiction: str
    authority: str
    effective_date: date = Field(alias="effectiveDate")
    compliance_deadline: date | None = Field(default=None, alias="complianceDeadline")

    penalties: list[Penalty] = Field(default_factory=list)
    requirements: list[Requirement] = Field(default_factory=list)
    exemptions: list[str] = Field(default_factory=list)
    applies_to: list[str] = Field(default_factory=list, alias="appliesTo")

    flags: frozenset[RegulationFlag] = Field(default_factory=frozenset)

    @model_validator(mode="before")
    @classmethod
    def derive_flags(cls, data: Any) -> Any:
        """Fill ``flags`` from the title unless they were supplied."""
        if isinstance(data, dict) and not data.get("flags") and data.get("title"):
            data = {**data, "flags": derive_regulation_flags(str(data["title"]))}
        return data

    @field_serializer("flags")
    def serialize_flags(self, flags: frozenset[RegulationFlag]) -> list[str]:
        """Emit flags in a stable order."""
        return sorted(flag.value for flag in flags)

    def has_flag(self, flag: RegulationFlag) -> bool:
        """Check whether the regulation carries a flag."""
        return flag in self.flags


class LinkedRegulation(Regulation):
    """A regulation as linked to a business by a saved compliance result."""

    compliance_status: str = Field(default="pending", alias="complianceStatus")
    is_applicable: bool = Field(default=True, alias="isApplicable")
    applied_date: datetime | None = Field(default=None, alias="appliedDate")


class RegulationSearchHit(ApiModel):
    """Regulation summary ranked by full-text relevance."""

    id: int
    title: str
    description: str
    category: RegulationCategory
    jurisdiction: str
    authority: str
    effective_date: date = Field(alias="effectiveDate")
    compliance_deadline: date | None = Field(default=None, alias="complianceDeadline")
    relevance_score: float = Field(default=0.0, alias="relevanceScore")


class CategoryCount(ApiModel):
    """Number of regulations in a category."""

    category: str
    count: int


class JurisdictionCount(ApiModel):
    """Number of regulations issued by a jurisdiction."""

    jurisdiction: str
    count: int


class RegulationStats(ApiModel):
    """Corpus statistics overview."""

    total_regulations: int = Field(alias="totalRegulations")
    total_categories: int = Field(alias="totalCategories")
    total_jurisdictions: int = Field(alias="totalJurisdictions")
    total_authorities: int = Field(alias="totalAuthorities")
    regulations_with_deadlines: int = Field(alias="regulationsWithDeadlines")
    recent_regulations: int = Field(alias="recentRegulations")
    top_categories: list[CategoryCount] = Field(default_factory=list, alias="topCategories")
    jurisdictions: list[JurisdictionCount] = Field(default_factory=list)
