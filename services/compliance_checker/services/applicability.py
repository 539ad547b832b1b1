"""
Regulation Applicability
========================

Selects the regulations from a corpus that apply to a business profile.

Selection:
1. Jurisdiction: Federal, the profile's state, county or city label
2. Category: the industry's mapped categories plus Business Licensing
3. Healthcare carve-out: healthcare-specific regulations only for Healthcare
4. Supplementary pass: family/medical leave at 50+ employees, core
   employment categories at Federal/State level for Medium and Large
5. Deduplicate by id, order by (category, title)

Version: 0.1.0
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from shared.logging import get_logger
from shared.models.business import BusinessProfile, BusinessSize
from shared.models.regulation import Regulation, RegulationCategory, RegulationFlag

from services.compliance_checker.services.jurisdictions import jurisdiction_labels


logger = get_logger(__name__)


# =============================================================================
# Applicability Configuration
# =============================================================================


def _default_industry_categories() -> Mapping[str, frozenset[RegulationCategory]]:
    return MappingProxyType(
        {
            "Agriculture": frozenset(
                {
                    RegulationCategory.ENVIRONMENTAL,
                    RegulationCategory.WORKPLACE_SAFETY,
                    RegulationCategory.BUSINESS_LICENSING,
                }
            ),
            "Automotive": frozenset(
                {
                    RegulationCategory.TRANSPORTATION,
                    RegulationCategory.ENVIRONMENTAL,
                    RegulationCategory.WORKPLACE_SAFETY,
                }
            ),
            "Construction": frozenset(
                {
                    RegulationCategory.WORKPLACE_SAFETY,
                    RegulationCategory.ENVIRONMENTAL,
                    RegulationCategory.BUSINESS_LICENSING,
                    RegulationCategory.LAND_USE,
                }
            ),
            "Food Service": frozenset(
                {
                    RegulationCategory.HEALTH_SAFETY,
                    RegulationCategory.BUSINESS_LICENSING,
                    RegulationCategory.LOCAL_ORDINANCES,
                }
            ),
            "Healthcare": frozenset(
                {
                    RegulationCategory.HEALTH_SAFETY,
                    RegulationCategory.PRIVACY_SECURITY,
                    RegulationCategory.PROFESSIONAL_LICENSING,
                    RegulationCategory.WORKPLACE_SAFETY,
                    RegulationCategory.LABOR_EMPLOYMENT,
                    RegulationCategory.CIVIL_RIGHTS,
                }
            ),
            "Manufacturing": frozenset(
                {
                    RegulationCategory.WORKPLACE_SAFETY,
                    RegulationCategory.ENVIRONMENTAL,
                    RegulationCategory.BUSINESS_LICENSING,
                }
            ),
            "Retail": frozenset(
                {
                    RegulationCategory.BUSINESS_LICENSING,
                    RegulationCategory.LOCAL_ORDINANCES,
                    RegulationCategory.TAXATION,
                }
            ),
            "Technology": frozenset(
                {
                    RegulationCategory.BUSINESS_LICENSING,
                    RegulationCategory.PRIVACY_SECURITY,
                    RegulationCategory.LABOR_EMPLOYMENT,
                    RegulationCategory.WORKPLACE_SAFETY,
                }
            ),
            "Transportation": frozenset(
                {
                    RegulationCategory.TRANSPORTATION,
                    RegulationCategory.ENVIRONMENTAL,
                    RegulationCategory.WORKPLACE_SAFETY,
                }
            ),
            "Other": frozenset(
                {
                    RegulationCategory.BUSINESS_LICENSING,
                    RegulationCategory.LOCAL_ORDINANCES,
                }
            ),
        }
    )


@dataclass(frozen=True)
class ApplicabilityRules:
    """Immutable lookup tables driving regulation selection."""

    industry_categories: Mapping[str, frozenset[RegulationCategory]] = field(
        default_factory=_default_industry_categories
    )

    # Used for industries missing from the map
    default_categories: frozenset[RegulationCategory] = frozenset(
        {RegulationCategory.BUSINESS_LICENSING}
    )

    # Always passes the category filter
    baseline_category: RegulationCategory = RegulationCategory.BUSINESS_LICENSING

    # Industry allowed to see healthcare-specific regulations
    healthcare_industry: str = "Healthcare"

    family_leave_min_employees: int = 50

    expanded_sizes: frozenset[BusinessSize] = frozenset(
        {BusinessSize.MEDIUM, BusinessSize.LARGE}
    )
    expanded_categories: frozenset[RegulationCategory] = frozenset(
        {
            RegulationCategory.LABOR_EMPLOYMENT,
            RegulationCategory.WORKPLACE_SAFETY,
            RegulationCategory.CIVIL_RIGHTS,
        }
    )

    def categories_for(self, industry: str) -> frozenset[RegulationCategory]:
        """Categories relevant to an industry."""
        return self.industry_categories.get(industry, self.default_categories)


DEFAULT_RULES = ApplicabilityRules()


# =============================================================================
# Selection
# =============================================================================


def select_candidate_regulations(
    profile: BusinessProfile,
    corpus: Iterable[Regulation],
    rules: ApplicabilityRules | None = None,
) -> list[Regulation]:
    """
    Select the regulations that apply to a business profile.

    Args:
        profile: Business profile snapshot
        corpus: Regulation records to choose from
        rules: Lookup tables (defaults to DEFAULT_RULES)

    Returns:
        Deduplicated regulations ordered by (category, title). An empty
        corpus or no matches yields an empty list.
    """
    rules = rules or DEFAULT_RULES
    labels = jurisdiction_labels(profile.location)
    eligible_jurisdictions = labels.as_set()
    categories = rules.categories_for(profile.industry)
    is_healthcare = profile.industry == rules.healthcare_industry

    selected: dict[int, Regulation] = {}
    rejected: list[Regulation] = []
    forced_ids: set[int] = set()

    for regulation in corpus:
        if regulation.jurisdiction not in eligible_jurisdictions:
            continue
        if regulation.id in selected:
            continue

        category_match = (
            regulation.category in categories
            or regulation.category == rules.baseline_category
        )
        carved_out = not is_healthcare and regulation.has_flag(
            RegulationFlag.HEALTHCARE_SPECIFIC
        )

        if category_match and not carved_out:
            selected[regulation.id] = regulation
        else:
            rejected.append(regulation)

    # Additive pass over what the filters rejected
    for regulation in rejected:
        if regulation.id in selected:
            continue
        if _force_include(regulation, profile, labels.is_federal_or_state, rules):
            selected[regulation.id] = regulation
            forced_ids.add(regulation.id)

    result = sorted(selected.values(), key=lambda r: (r.category.value, r.title))

    logger.debug(
        "regulations_selected",
        industry=profile.industry,
        size=profile.size.value,
        jurisdictions=sorted(eligible_jurisdictions),
        selected=len(result),
        forced=len(forced_ids),
    )

    return result


def _force_include(
    regulation: Regulation,
    profile: BusinessProfile,
    is_federal_or_state: Callable[[str], bool],
    rules: ApplicabilityRules,
) -> bool:
    """Check the supplementary inclusion rules for a rejected regulation."""
    if (
        profile.employee_count >= rules.family_leave_min_employees
        and regulation.has_flag(RegulationFlag.FAMILY_MEDICAL_LEAVE)
    ):
        return True

    return (
        profile.size in rules.expanded_sizes
        and regulation.category in rules.expanded_categories
        and is_federal_or_state(regulation.jurisdiction)
    )
