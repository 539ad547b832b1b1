"""
Applicability Tests
===================

Tests for jurisdiction labels and regulation selection.

Version: 0.1.0
"""

import pytest

from shared.models.business import BusinessProfile, BusinessSize, Location
from shared.models.regulation import RegulationCategory

from services.compliance_checker.services.applicability import (
    ApplicabilityRules,
    select_candidate_regulations,
)
from services.compliance_checker.services.jurisdictions import (
    county_label,
    jurisdiction_labels,
    state_label,
)


# =============================================================================
# Fixtures
# =============================================================================


def _profile(
    industry: str = "Retail",
    size: BusinessSize = BusinessSize.SMALL,
    employee_count: int = 10,
    state: str = "CA",
    county: str = "Kern",
    city: str = "Bakersfield",
) -> BusinessProfile:
    return BusinessProfile(
        name="Test Business",
        industry=industry,
        location=Location(state=state, county=county, city=city, zip_code="93301"),
        size=size,
        employee_count=employee_count,
        annual_revenue=500000,
        business_type="LLC",
    )


@pytest.fixture
def kern_corpus(make_regulation):
    """A small corpus spanning every jurisdiction tier."""
    return [
        make_regulation(
            title="OSHA Workplace Safety Standards",
            category="Workplace Safety",
            jurisdiction="Federal",
        ),
        make_regulation(
            title="Fair Labor Standards Act (FLSA)",
            category="Labor & Employment",
            jurisdiction="Federal",
        ),
        make_regulation(
            title="Family and Medical Leave Act (FMLA)",
            category="Labor & Employment",
            jurisdiction="Federal",
        ),
        make_regulation(
            title="Healthcare Privacy Standards (HIPAA)",
            category="Privacy & Security",
            jurisdiction="Federal",
        ),
        make_regulation(
            title="Retail Sales Tax Requirements",
            category="Taxation",
            jurisdiction="California",
        ),
        make_regulation(
            title="Kern County Business License Requirements",
            category="Business Licensing",
            jurisdiction="Kern County",
        ),
        make_regulation(
            title="Bakersfield Municipal Code Chapter 5.04",
            category="Local Ordinances",
            jurisdiction="Bakersfield",
        ),
        make_regulation(
            title="Texas Business Franchise Tax",
            category="Taxation",
            jurisdiction="Texas",
        ),
        make_regulation(
            title="Los Angeles County Business License",
            category="Business Licensing",
            jurisdiction="Los Angeles County",
        ),
    ]


def _titles(regulations) -> list[str]:
    return [r.title for r in regulations]


# =============================================================================
# Jurisdiction Tests
# =============================================================================


class TestJurisdictionLabels:
    """Tests for location to jurisdiction label mapping."""

    def test_state_code_to_name(self) -> None:
        """Test that state codes map to full names."""
        assert state_label("CA") == "California"
        assert state_label("dc") == "District of Columbia"

    def test_unknown_state_kept(self) -> None:
        """Test that unknown codes are used verbatim."""
        assert state_label("ZZ") == "ZZ"

    def test_county_suffix(self) -> None:
        """Test that county names gain a single County suffix."""
        assert county_label("Kern") == "Kern County"
        assert county_label("Kern County") == "Kern County"

    def test_labels_for_location(self) -> None:
        """Test the full label set for a Kern County location."""
        labels = jurisdiction_labels(_profile().location)

        assert labels.as_set() == frozenset(
            {"Federal", "California", "Kern County", "Bakersfield"}
        )
        assert labels.is_federal_or_state("California")
        assert not labels.is_federal_or_state("Kern County")


# =============================================================================
# Selection Tests
# =============================================================================


class TestSelectCandidateRegulations:
    """Tests for regulation selection."""

    def test_empty_corpus(self) -> None:
        """Test that an empty corpus selects nothing."""
        assert select_candidate_regulations(_profile(), []) == []

    def test_retail_selection(self, kern_corpus) -> None:
        """Test category and jurisdiction filtering for a small retailer."""
        selected = select_candidate_regulations(_profile(industry="Retail"), kern_corpus)

        assert _titles(selected) == [
            "Kern County Business License Requirements",
            "Bakersfield Municipal Code Chapter 5.04",
            "Retail Sales Tax Requirements",
        ]

    def test_other_jurisdictions_excluded(self, kern_corpus) -> None:
        """Test that regulations from other states and counties never apply."""
        selected = select_candidate_regulations(_profile(industry="Retail"), kern_corpus)

        assert "Texas Business Franchise Tax" not in _titles(selected)
        assert "Los Angeles County Business License" not in _titles(selected)

    def test_unknown_industry_gets_business_licensing(self, kern_corpus) -> None:
        """Test that unmapped industries fall back to Business Licensing."""
        selected = select_candidate_regulations(_profile(industry="Aerospace"), kern_corpus)

        assert {r.category for r in selected} == {RegulationCategory.BUSINESS_LICENSING}

    def test_hipaa_only_for_healthcare(self, kern_corpus) -> None:
        """Test the healthcare carve-out."""
        technology = select_candidate_regulations(_profile(industry="Technology"), kern_corpus)
        healthcare = select_candidate_regulations(_profile(industry="Healthcare"), kern_corpus)

        assert "Healthcare Privacy Standards (HIPAA)" not in _titles(technology)
        assert "Healthcare Privacy Standards (HIPAA)" in _titles(healthcare)

    def test_fmla_at_fifty_employees(self, kern_corpus) -> None:
        """Test that family leave is forced in at 50 or more employees."""
        below = select_candidate_regulations(
            _profile(industry="Retail", employee_count=49), kern_corpus
        )
        at = select_candidate_regulations(
            _profile(industry="Retail", employee_count=50), kern_corpus
        )

        assert "Family and Medical Leave Act (FMLA)" not in _titles(below)
        assert "Family and Medical Leave Act (FMLA)" in _titles(at)

    def test_fmla_carved_out_below_fifty_despite_category(self, kern_corpus) -> None:
        """Test that the medical title keeps FMLA out even when its category matches."""
        selected = select_candidate_regulations(
            _profile(industry="Technology", employee_count=49), kern_corpus
        )

        assert "Fair Labor Standards Act (FLSA)" in _titles(selected)
        assert "Family and Medical Leave Act (FMLA)" not in _titles(selected)

    def test_fmla_kept_for_small_healthcare(self, kern_corpus) -> None:
        """Test that healthcare businesses see FMLA at any headcount."""
        selected = select_candidate_regulations(
            _profile(industry="Healthcare", employee_count=12), kern_corpus
        )

        assert "Family and Medical Leave Act (FMLA)" in _titles(selected)

    def test_medium_business_gets_core_employment(self, kern_corpus) -> None:
        """Test the federal/state employment pass for Medium and Large."""
        selected = select_candidate_regulations(
            _profile(industry="Retail", size=BusinessSize.MEDIUM, employee_count=30),
            kern_corpus,
        )

        assert "Fair Labor Standards Act (FLSA)" in _titles(selected)
        assert "OSHA Workplace Safety Standards" in _titles(selected)

    def test_forced_inclusion_respects_jurisdiction(self, make_regulation) -> None:
        """Test that the supplementary pass never adds foreign regulations."""
        corpus = [
            make_regulation(
                title="Texas Family and Medical Leave (FMLA) Rules",
                category="Labor & Employment",
                jurisdiction="Texas",
            ),
        ]

        selected = select_candidate_regulations(
            _profile(size=BusinessSize.LARGE, employee_count=500), corpus
        )

        assert selected == []

    def test_duplicates_removed(self, make_regulation) -> None:
        """Test that a regulation appearing twice is returned once."""
        regulation = make_regulation(category="Business Licensing")

        selected = select_candidate_regulations(_profile(), [regulation, regulation])

        assert len(selected) == 1

    def test_ordered_by_category_then_title(self, make_regulation) -> None:
        """Test the deterministic output order."""
        corpus = [
            make_regulation(title="Zoning permit", category="Local Ordinances"),
            make_regulation(title="B license", category="Business Licensing"),
            make_regulation(title="A license", category="Business Licensing"),
        ]

        selected = select_candidate_regulations(_profile(industry="Retail"), corpus)

        assert _titles(selected) == ["A license", "B license", "Zoning permit"]

    def test_custom_rules(self, kern_corpus) -> None:
        """Test that selection follows injected rule tables."""
        rules = ApplicabilityRules(
            industry_categories={"Retail": frozenset({RegulationCategory.WORKPLACE_SAFETY})},
            family_leave_min_employees=5,
        )

        selected = select_candidate_regulations(
            _profile(industry="Retail", employee_count=10), kern_corpus, rules
        )

        assert "OSHA Workplace Safety Standards" in _titles(selected)
        assert "Family and Medical Leave Act (FMLA)" in _titles(selected)
        assert "Retail Sales Tax Requirements" not in _titles(selected)
