"""
Compliance Evaluator
====================

Turns a business profile and its applicable regulations into a compliance
score, risk level, upcoming deadlines and recommendations.

Score Components:
- Per-category penalties over the unique categories present
- Size and employee-count multipliers on that penalty
- Flat revenue, enterprise-size and industry deductions
- Floors for small and medium businesses

The evaluator performs no I/O and holds no mutable state; one instance can
serve concurrent requests.

Version: 0.1.0
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from shared.config.settings import ComplianceSettings
from shared.logging import get_logger
from shared.models.business import BusinessProfile, BusinessSize
from shared.models.compliance import ComplianceResult, RiskLevel
from shared.models.regulation import Regulation, RegulationCategory


logger = get_logger(__name__)


# =============================================================================
# Scoring Configuration
# =============================================================================


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


@dataclass(frozen=True)
class ScoringRules:
    """Immutable tables driving score, risk and recommendation rules."""

    base_score: float = 100.0

    category_penalties: Mapping[RegulationCategory, float] = field(
        default_factory=lambda: _frozen(
            {
                RegulationCategory.WORKPLACE_SAFETY: 10,
                RegulationCategory.HEALTH_SAFETY: 9,
                RegulationCategory.LABOR_EMPLOYMENT: 8,
                RegulationCategory.CIVIL_RIGHTS: 7,
                RegulationCategory.ENVIRONMENTAL: 7,
                RegulationCategory.TAXATION: 6,
                RegulationCategory.PRIVACY_SECURITY: 6,
                RegulationCategory.FINANCIAL_SERVICES: 6,
                RegulationCategory.PROFESSIONAL_LICENSING: 5,
                RegulationCategory.LAND_USE: 5,
                RegulationCategory.BUSINESS_LICENSING: 4,
                RegulationCategory.TRANSPORTATION: 4,
                RegulationCategory.LOCAL_ORDINANCES: 3,
            }
        )
    )
    default_category_penalty: float = 5

    size_multipliers: Mapping[BusinessSize, float] = field(
        default_factory=lambda: _frozen(
            {
                BusinessSize.SMALL: 0.2,
                BusinessSize.MEDIUM: 0.5,
                BusinessSize.LARGE: 1.0,
            }
        )
    )

    # (upper bound inclusive, multiplier), checked in order
    employee_steps: tuple[tuple[int, float], ...] = (
        (5, 0.2),
        (10, 0.3),
        (25, 0.5),
        (50, 0.7),
        (200, 0.85),
        (1000, 1.5),
    )
    # (exclusive lower bound, multiplier), most specific first
    employee_overflow_steps: tuple[tuple[int, float], ...] = (
        (5000, 2.5),
        (1000, 2.0),
    )

    # (inclusive lower bound, deduction, sizes it applies to)
    # Exactly $1M, $10M and $50M incur the deduction too (>=, not >)
    revenue_deductions: tuple[tuple[float, float, frozenset[BusinessSize]], ...] = (
        (1_000_000, 5, frozenset({BusinessSize.MEDIUM, BusinessSize.LARGE})),
        (10_000_000, 8, frozenset({BusinessSize.MEDIUM, BusinessSize.LARGE})),
        (50_000_000, 12, frozenset({BusinessSize.LARGE})),
    )

    # (exclusive lower bound, deduction)
    enterprise_deductions: tuple[tuple[int, float], ...] = (
        (5000, 15),
        (10000, 20),
    )

    # industry -> (deduction when Small, deduction otherwise)
    industry_deductions: Mapping[str, tuple[float, float]] = field(
        default_factory=lambda: _frozen(
            {
                "Healthcare": (8, 15),
                "Technology": (5, 10),
                "Construction": (6, 12),
            }
        )
    )

    small_micro_max_employees: int = 10
    small_micro_floor: float = 75
    small_floor: float = 65
    medium_floor_max_employees: int = 50
    medium_floor: float = 50

    # (minimum score, level), highest first
    risk_thresholds: tuple[tuple[int, RiskLevel], ...] = (
        (85, RiskLevel.LOW),
        (65, RiskLevel.MEDIUM),
        (45, RiskLevel.HIGH),
    )

    max_deadlines: int = 5

    officer_min_employees: int = 50
    critical_categories: frozenset[RegulationCategory] = frozenset(
        {
            RegulationCategory.HEALTH_SAFETY,
            RegulationCategory.ENVIRONMENTAL,
            RegulationCategory.WORKPLACE_SAFETY,
        }
    )
    reference_county: str = "Kern"
    reference_city: str = "Bakersfield"

    @classmethod
    def from_settings(cls, compliance: ComplianceSettings) -> "ScoringRules":
        """Default tables with the configurable values taken from settings."""
        return cls(
            max_deadlines=compliance.max_deadlines,
            reference_county=compliance.reference_county,
            reference_city=compliance.reference_city,
        )


# Recommendation texts
RECOMMEND_OFFICER = "Consider hiring a compliance officer or consultant"
RECOMMEND_CRITICAL = (
    "Prioritize compliance with health, safety, and environmental regulations"
)
RECOMMEND_RECORDS = "Maintain detailed records of all compliance activities"
RECOMMEND_REVIEWS = "Schedule regular compliance reviews and updates"


def county_recommendation(county: str) -> str:
    return f"Ensure compliance with {county} County specific regulations"


def city_recommendation(city: str) -> str:
    return f"Check {city} municipal code requirements"


@dataclass(frozen=True)
class ScoreBreakdown:
    """Intermediate values of one score computation."""

    categories: tuple[RegulationCategory, ...] = ()
    category_penalty: float = 0.0
    size_multiplier: float = 1.0
    employee_multiplier: float = 1.0
    final_penalty: float = 0.0
    flat_deductions: float = 0.0
    floor: float | None = None
    score: int = 100


# =============================================================================
# Evaluator
# =============================================================================


class ComplianceEvaluator:
    """
    Pure compliance evaluation.

    Every step is a separate method so the rule tables can be tested in
    isolation; ``evaluate`` composes them into a ComplianceResult.
    """

    def __init__(self, rules: ScoringRules | None = None) -> None:
        """
        Initialize the evaluator.

        Args:
            rules: Custom scoring rules
        """
        self.rules = rules or ScoringRules()

    def evaluate(
        self,
        profile: BusinessProfile,
        regulations: Sequence[Regulation],
        now: datetime | None = None,
    ) -> ComplianceResult:
        """
        Evaluate a profile against its applicable regulations.

        Args:
            profile: Business profile snapshot
            regulations: Regulations already selected for the profile
            now: Reference time for deadline filtering (defaults to UTC now)

        Returns:
            ComplianceResult
        """
        breakdown = self.score_breakdown(profile, regulations)
        risk_level = self.determine_risk_level(breakdown.score, regulations)
        deadlines = self.next_deadlines(regulations, now=now)
        recommendations = self.generate_recommendations(profile, regulations)

        logger.info(
            "compliance_evaluated",
            industry=profile.industry,
            size=profile.size.value,
            regulations=len(regulations),
            categories=len(breakdown.categories),
            score=breakdown.score,
            risk_level=risk_level.value,
        )

        return ComplianceResult(
            business=profile,
            applicable_regulations=list(regulations),
            compliance_score=breakdown.score,
            risk_level=risk_level,
            next_deadlines=deadlines,
            recommendations=recommendations,
        )

    # -------------------------------------------------------------------------
    # Score
    # -------------------------------------------------------------------------

    def calculate_score(
        self,
        profile: BusinessProfile,
        regulations: Sequence[Regulation],
    ) -> int:
        """Compliance score, an integer in [0, 100]."""
        return self.score_breakdown(profile, regulations).score

    def score_breakdown(
        self,
        profile: BusinessProfile,
        regulations: Sequence[Regulation],
    ) -> ScoreBreakdown:
        """Compute the score along with its intermediate values."""
        if not regulations:
            return ScoreBreakdown(score=_clamp_round(self.rules.base_score))

        categories = tuple(sorted({r.category for r in regulations}, key=lambda c: c.value))
        category_penalty = sum(self.category_penalty(c) for c in categories)
        size_multiplier = self.size_multiplier(profile.size)
        employee_multiplier = self.employee_multiplier(profile.employee_count)
        final_penalty = category_penalty * size_multiplier * employee_multiplier

        score = max(0.0, self.rules.base_score - final_penalty)
        before_flat = score
        for deduction in self._flat_deductions(profile):
            score = max(0.0, score - deduction)
        flat_deductions = before_flat - score

        floor = self.score_floor(profile)
        if floor is not None:
            score = max(score, floor)

        return ScoreBreakdown(
            categories=categories,
            category_penalty=category_penalty,
            size_multiplier=size_multiplier,
            employee_multiplier=employee_multiplier,
            final_penalty=final_penalty,
            flat_deductions=flat_deductions,
            floor=floor,
            score=_clamp_round(score),
        )

    def category_penalty(self, category: RegulationCategory) -> float:
        return self.rules.category_penalties.get(
            category, self.rules.default_category_penalty
        )

    def size_multiplier(self, size: BusinessSize) -> float:
        return self.rules.size_multipliers.get(size, 1.0)

    def employee_multiplier(self, employee_count: int) -> float:
        """Step-table multiplier for the employee count."""
        for upper, multiplier in self.rules.employee_steps:
            if employee_count <= upper:
                return multiplier
        for lower, multiplier in self.rules.employee_overflow_steps:
            if employee_count > lower:
                return multiplier
        return 1.0

    def _flat_deductions(self, profile: BusinessProfile) -> list[float]:
        """Revenue, enterprise and industry deductions in application order."""
        deductions: list[float] = []

        for threshold, amount, sizes in self.rules.revenue_deductions:
            if profile.size in sizes and profile.annual_revenue >= threshold:
                deductions.append(amount)

        for threshold, amount in self.rules.enterprise_deductions:
            if profile.employee_count > threshold:
                deductions.append(amount)

        industry = self.rules.industry_deductions.get(profile.industry)
        if industry is not None:
            small, other = industry
            deductions.append(small if profile.size == BusinessSize.SMALL else other)

        return deductions

    def score_floor(self, profile: BusinessProfile) -> float | None:
        """Minimum score for the profile, if any."""
        rules = self.rules
        if profile.size == BusinessSize.SMALL:
            if profile.employee_count <= rules.small_micro_max_employees:
                return rules.small_micro_floor
            return rules.small_floor
        if (
            profile.size == BusinessSize.MEDIUM
            and profile.employee_count <= rules.medium_floor_max_employees
        ):
            return rules.medium_floor
        return None

    # -------------------------------------------------------------------------
    # Risk, deadlines, recommendations
    # -------------------------------------------------------------------------

    def determine_risk_level(
        self,
        score: int,
        regulations: Sequence[Regulation] | None = None,
    ) -> RiskLevel:
        """Risk tier for a score. ``regulations`` is accepted but unused."""
        for minimum, level in self.rules.risk_thresholds:
            if score >= minimum:
                return level
        return RiskLevel.CRITICAL

    def next_deadlines(
        self,
        regulations: Sequence[Regulation],
        now: datetime | None = None,
    ) -> list[str]:
        """Strictly future compliance deadlines, ascending, as ISO dates."""
        today = (now or datetime.now(UTC)).date()
        upcoming = sorted(
            r.compliance_deadline
            for r in regulations
            if r.compliance_deadline is not None and r.compliance_deadline > today
        )
        return [d.isoformat() for d in upcoming[: self.rules.max_deadlines]]

    def generate_recommendations(
        self,
        profile: BusinessProfile,
        regulations: Sequence[Regulation],
    ) -> list[str]:
        """Recommendation strings in fixed rule order."""
        rules = self.rules
        recommendations: list[str] = []

        if profile.employee_count > rules.officer_min_employees:
            recommendations.append(RECOMMEND_OFFICER)

        if any(r.category in rules.critical_categories for r in regulations):
            recommendations.append(RECOMMEND_CRITICAL)

        if profile.location.county == rules.reference_county:
            recommendations.append(county_recommendation(rules.reference_county))

        if profile.location.city == rules.reference_city:
            recommendations.append(city_recommendation(rules.reference_city))

        recommendations.append(RECOMMEND_RECORDS)
        recommendations.append(RECOMMEND_REVIEWS)

        return recommendations


def _clamp_round(score: float) -> int:
    """Round half-up and clamp to [0, 100]."""
    return max(0, min(100, math.floor(score + 0.5)))
