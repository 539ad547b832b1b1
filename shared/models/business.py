"""
Business Models
===============

Business profiles: the validated input, the immutable profile snapshot used
during one evaluation, and persisted business records.

Version: 0.1.0
"""

import hashlib
import json
from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field, field_validator

from shared.models.common import ApiModel
from shared.models.regulation import LinkedRegulation


class BusinessSize(str, Enum):
    """Business size classes."""

    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class Location(ApiModel):
    """Where a business operates."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)

    state: str
    county: str
    city: str
    zip_code: str = Field(alias="zipCode")


class BusinessProfile(ApiModel):
    """Immutable profile snapshot evaluated by the compliance engine."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)

    name: str
    industry: str
    location: Location
    size: BusinessSize
    employee_count: int = Field(alias="employeeCount")
    annual_revenue: float = Field(alias="annualRevenue")
    business_type: str = Field(alias="businessType")


class BusinessProfileInput(ApiModel):
    """
    Flat business profile as entered by a user.

    Construction raises ``pydantic.ValidationError`` for any field outside its
    type, range or required constraints.
    """

    name: str = Field(..., min_length=1, max_length=255)
    industry: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=2, max_length=2, pattern=r"^[A-Za-z]{2}$")
    county: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=5, max_length=10, alias="zipCode")
    size: BusinessSize
    employee_count: int = Field(..., ge=1, le=10000, alias="employeeCount")
    annual_revenue: float = Field(..., gt=0, le=1_000_000_000, alias="annualRevenue")
    business_type: str = Field(..., min_length=1, max_length=100, alias="businessType")

    @field_validator("name", "industry", "county", "city", "zip_code", "business_type")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Reject values that are blank once trimmed."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    @field_validator("state")
    @classmethod
    def uppercase_state(cls, v: str) -> str:
        """State codes are stored upper-case."""
        return v.upper()

    def to_profile(self) -> BusinessProfile:
        """Build the nested profile snapshot."""
        return BusinessProfile(
            name=self.name,
            industry=self.industry,
            location=Location(
                state=self.state,
                county=self.county,
                city=self.city,
                zip_code=self.zip_code,
            ),
            size=self.size,
            employee_count=self.employee_count,
            annual_revenue=self.annual_revenue,
            business_type=self.business_type,
        )

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form of this profile."""
        canonical = json.dumps(
            self.model_dump(mode="json", by_alias=True),
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class Business(BusinessProfile):
    """A persisted business."""

    id: int
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class ComplianceHistoryEntry(ApiModel):
    """One saved compliance result in a business's history."""

    id: int
    compliance_score: float = Field(alias="complianceScore")
    risk_level: str = Field(alias="riskLevel")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    regulation_count: int = Field(default=0, alias="regulationCount")


class BusinessDetail(Business):
    """A business with its compliance history and linked regulations."""

    compliance_history: list[ComplianceHistoryEntry] = Field(
        default_factory=list,
        alias="complianceHistory",
    )
    applicable_regulations: list[LinkedRegulation] = Field(
        default_factory=list,
        alias="applicableRegulations",
    )


class BusinessCompliance(ApiModel):
    """Compliance history view for one business."""

    business_id: int = Field(alias="businessId")
    compliance_history: list[ComplianceHistoryEntry] = Field(
        default_factory=list,
        alias="complianceHistory",
    )
    applicable_regulations: list[LinkedRegulation] = Field(
        default_factory=list,
        alias="applicableRegulations",
    )


class IndustryCount(ApiModel):
    """Number of businesses in an industry."""

    industry: str
    count: int


class LocationCount(ApiModel):
    """Number of businesses at a county/city pair."""

    county: str
    city: str
    count: int


class BusinessStats(ApiModel):
    """Aggregate statistics over stored businesses."""

    total_businesses: int = Field(alias="totalBusinesses")
    total_industries: int = Field(alias="totalIndustries")
    total_counties: int = Field(alias="totalCounties")
    total_cities: int = Field(alias="totalCities")
    avg_employees: float | None = Field(default=None, alias="avgEmployees")
    avg_revenue: float | None = Field(default=None, alias="avgRevenue")
    small_businesses: int = Field(default=0, alias="smallBusinesses")
    medium_businesses: int = Field(default=0, alias="mediumBusinesses")
    large_businesses: int = Field(default=0, alias="largeBusinesses")
    top_industries: list[IndustryCount] = Field(default_factory=list, alias="topIndustries")
    top_locations: list[LocationCount] = Field(default_factory=list, alias="topLocations")
