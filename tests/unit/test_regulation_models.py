"""
Unit tests for regulation models.
"""

from datetime import date

from shared.models.compliance import ComplianceResultSave, RiskLevel
from shared.models.regulation import (
    Regulation,
    RegulationCategory,
    RegulationFlag,
    derive_regulation_flags,
)


class TestRegulationFlags:
    """Tests for title-derived flags."""

    def test_hipaa_is_healthcare_specific(self) -> None:
        """Test that HIPAA titles are flagged healthcare specific."""
        flags = derive_regulation_flags("Healthcare Privacy Standards (HIPAA)")

        assert flags == frozenset({RegulationFlag.HEALTHCARE_SPECIFIC})

    def test_fmla_is_family_leave(self) -> None:
        """Test that FMLA titles carry the family leave flag."""
        flags = derive_regulation_flags("Family and Medical Leave Act (FMLA)")

        assert RegulationFlag.FAMILY_MEDICAL_LEAVE in flags

    def test_plain_title_has_no_flags(self) -> None:
        """Test that unrelated titles carry no flags."""
        assert derive_regulation_flags("Kern County Business License Requirements") == frozenset()

    def test_flags_derived_on_load(self) -> None:
        """Test that flags are filled in when a regulation is validated."""
        regulation = Regulation.model_validate(
            {
                "id": 1,
                "title": "Healthcare Privacy Standards (HIPAA)",
                "description": "Privacy rules",
                "category": "Privacy & Security",
                "jurisdiction": "Federal",
                "authority": "HHS",
                "effectiveDate": "1996-08-21",
            }
        )

        assert regulation.category == RegulationCategory.PRIVACY_SECURITY
        assert regulation.effective_date == date(1996, 8, 21)
        assert regulation.has_flag(RegulationFlag.HEALTHCARE_SPECIFIC)

    def test_flags_serialize_sorted(self, make_regulation) -> None:
        """Test that flags are emitted as a sorted list."""
        regulation = make_regulation(title="Medical Leave (FMLA) for Healthcare workers")
        data = regulation.model_dump(mode="json", by_alias=True)

        assert data["flags"] == ["family_medical_leave", "healthcare_specific"]
        assert data["effectiveDate"] == "2020-01-01"
        assert data["complianceDeadline"] is None

    def test_round_trip_keeps_flags(self, make_regulation) -> None:
        """Test that a serialized regulation validates back to an equal model."""
        regulation = make_regulation(title="Family and Medical Leave Act (FMLA)")

        restored = Regulation.model_validate(regulation.model_dump(mode="json", by_alias=True))

        assert restored == regulation


class TestComplianceResultSave:
    """Tests for the save request model."""

    def test_accepts_camel_case(self) -> None:
        """Test that the wire format is accepted."""
        request = ComplianceResultSave.model_validate(
            {
                "businessId": 3,
                "score": 82,
                "riskLevel": "Medium",
                "applicableRegulations": [{"id": 1}, {"id": 7}],
            }
        )

        assert request.business_id == 3
        assert request.risk_level == RiskLevel.MEDIUM
        assert [r.id for r in request.applicable_regulations] == [1, 7]
