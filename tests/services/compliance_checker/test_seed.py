"""
Seed Data Tests
===============

Tests for the bundled corpus and seed record conversion.

Version: 0.1.0
"""

from datetime import date

import pytest
from pydantic import ValidationError

from shared.models.regulation import RegulationCategory

from services.compliance_checker.seed import (
    BUSINESSES_FILE,
    REGULATIONS_FILE,
    business_model_from_record,
    load_records,
    regulation_model_from_record,
)


class TestBundledCorpus:
    """Tests for the shipped JSON records."""

    def test_every_regulation_converts(self) -> None:
        """Test that every bundled regulation builds a row."""
        records = load_records(REGULATIONS_FILE)

        models = [regulation_model_from_record(record) for record in records]

        assert len(models) == len(records) > 20
        assert all(model.requirements for model in models)

    def test_titles_unique_per_jurisdiction(self) -> None:
        """Test that the skip-existing key is unique across the corpus."""
        records = load_records(REGULATIONS_FILE)
        keys = [(r["title"], r["jurisdiction"]) for r in records]

        assert len(keys) == len(set(keys))

    def test_categories_known(self) -> None:
        """Test that every category is part of the taxonomy."""
        for record in load_records(REGULATIONS_FILE):
            RegulationCategory(record["category"])

    def test_family_leave_present(self) -> None:
        """Test that the corpus carries the federal family leave act."""
        titles = {
            r["title"] for r in load_records(REGULATIONS_FILE) if r["jurisdiction"] == "Federal"
        }

        assert "Family and Medical Leave Act (FMLA)" in titles

    def test_sample_businesses_valid(self) -> None:
        """Test that the sample businesses pass profile validation."""
        models = [business_model_from_record(r) for r in load_records(BUSINESSES_FILE)]

        assert {m.county for m in models} == {"Kern"}


class TestRecordConversion:
    """Tests for seed record conversion."""

    def test_nested_rows(self) -> None:
        """Test that child rows and dates are converted."""
        model = regulation_model_from_record(
            {
                "title": "Kern County Business License Requirements",
                "description": "County licensing",
                "category": "Business Licensing",
                "jurisdiction": "Kern County",
                "authority": "Kern County",
                "effectiveDate": "2020-01-01",
                "complianceDeadline": "2026-12-31",
                "penalties": [{"type": "Late Renewal", "amount": 100, "description": "Late fee"}],
                "requirements": [{"description": "Renew annually"}],
                "exemptions": ["Home-based businesses"],
                "appliesTo": ["All Industries"],
            }
        )

        assert model.effective_date == date(2020, 1, 1)
        assert model.compliance_deadline == date(2026, 12, 31)
        assert model.penalties[0].type == "Late Renewal"
        assert model.requirements[0].frequency is None
        assert model.exemptions[0].exemption_text == "Home-based businesses"
        assert model.applicability[0].applies_to == "All Industries"

    def test_unknown_category_rejected(self) -> None:
        """Test that records outside the taxonomy are refused."""
        with pytest.raises(ValueError):
            regulation_model_from_record(
                {
                    "title": "Unknown",
                    "description": "x",
                    "category": "Astrology",
                    "jurisdiction": "Federal",
                    "authority": "x",
                    "effectiveDate": "2020-01-01",
                }
            )

    def test_invalid_business_rejected(self) -> None:
        """Test that sample businesses go through profile validation."""
        with pytest.raises(ValidationError):
            business_model_from_record({"name": "Incomplete"})
