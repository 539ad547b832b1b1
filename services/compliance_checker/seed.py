"""
Corpus Seeding
==============

Load the bundled regulation corpus and sample businesses into PostgreSQL.

Regulations already present (same title and jurisdiction) are skipped, so
seeding can be re-run against a populated database. A record that fails to
insert is logged and counted; it does not abort the run.

Version: 0.1.0
"""

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.logging import get_logger
from shared.models.business import BusinessProfileInput
from shared.models.regulation import RegulationCategory

from services.compliance_checker.models import (
    BusinessModel,
    PenaltyModel,
    RegulationApplicabilityModel,
    RegulationExemptionModel,
    RegulationModel,
    RequirementModel,
)


logger = get_logger(__name__)

DATA_DIR = Path(__file__).parent / "data"
REGULATIONS_FILE = DATA_DIR / "regulations.json"
BUSINESSES_FILE = DATA_DIR / "businesses.json"

SEEDED_TABLES = (
    "business_regulations",
    "compliance_results",
    "penalties",
    "requirements",
    "regulation_exemptions",
    "regulation_applicability",
    "regulations",
    "businesses",
)


@dataclass
class SeedReport:
    """Outcome of a seeding run."""

    inserted: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of seed records."""
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{path.name}: expected a JSON array")
    return records


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def regulation_model_from_record(record: dict[str, Any]) -> RegulationModel:
    """
    Build a regulation row, with its child rows, from a seed record.

    Raises:
        ValueError: Unknown category or malformed date
        KeyError: A required field is missing
    """
    category = RegulationCategory(record["category"])

    model = RegulationModel(
        title=record["title"],
        description=record["description"],
        category=category.value,
        jurisdiction=record["jurisdiction"],
        authority=record["authority"],
        effective_date=_parse_date(record["effectiveDate"]),
        compliance_deadline=_parse_date(record.get("complianceDeadline")),
    )
    model.penalties = [
        PenaltyModel(
            type=penalty["type"],
            amount=penalty.get("amount"),
            description=penalty["description"],
        )
        for penalty in record.get("penalties", [])
    ]
    model.requirements = [
        RequirementModel(
            description=requirement["description"],
            frequency=requirement.get("frequency"),
            documentation=requirement.get("documentation"),
            deadline=requirement.get("deadline"),
        )
        for requirement in record.get("requirements", [])
    ]
    model.exemptions = [
        RegulationExemptionModel(exemption_text=exemption)
        for exemption in record.get("exemptions", [])
    ]
    model.applicability = [
        RegulationApplicabilityModel(applies_to=applies_to)
        for applies_to in record.get("appliesTo", [])
    ]
    return model


def business_model_from_record(record: dict[str, Any]) -> BusinessModel:
    """Validate a sample business through the API input model."""
    profile = BusinessProfileInput.model_validate(record)
    return BusinessModel(
        name=profile.name,
        industry=profile.industry,
        state=profile.state,
        county=profile.county,
        city=profile.city,
        zip_code=profile.zip_code,
        size=profile.size.value,
        employee_count=profile.employee_count,
        annual_revenue=profile.annual_revenue,
        business_type=profile.business_type,
    )


async def reset_tables(session: AsyncSession) -> None:
    """Empty every seeded table and restart its id sequence."""
    await session.execute(
        text(f"TRUNCATE TABLE {', '.join(SEEDED_TABLES)} RESTART IDENTITY CASCADE")
    )
    logger.warning("seed_tables_reset", tables=len(SEEDED_TABLES))


async def _regulation_exists(session: AsyncSession, title: str, jurisdiction: str) -> bool:
    result = await session.execute(
        select(RegulationModel.id).where(
            RegulationModel.title == title,
            RegulationModel.jurisdiction == jurisdiction,
        )
    )
    return result.first() is not None


async def seed_regulations(
    session: AsyncSession,
    records: list[dict[str, Any]] | None = None,
) -> SeedReport:
    """Insert regulation records that are not yet in the corpus."""
    if records is None:
        records = load_records(REGULATIONS_FILE)

    report = SeedReport()
    for record in records:
        title = record.get("title", "<untitled>")
        try:
            if await _regulation_exists(session, title, record.get("jurisdiction", "")):
                report.skipped += 1
                logger.debug("regulation_seed_skipped", title=title)
                continue

            model = regulation_model_from_record(record)
            async with session.begin_nested():
                session.add(model)
                await session.flush()
            report.inserted += 1
            logger.debug("regulation_seeded", title=title, regulation_id=model.id)
        except (KeyError, ValueError, SQLAlchemyError) as e:
            report.failed += 1
            logger.error("regulation_seed_failed", title=title, error=str(e))

    logger.info(
        "regulations_seeded",
        inserted=report.inserted,
        skipped=report.skipped,
        failed=report.failed,
    )
    return report


async def seed_businesses(
    session: AsyncSession,
    records: list[dict[str, Any]] | None = None,
) -> SeedReport:
    """Insert the sample businesses when the table is empty."""
    if records is None:
        records = load_records(BUSINESSES_FILE)

    report = SeedReport()
    existing = await session.execute(select(BusinessModel.id).limit(1))
    if existing.first() is not None:
        report.skipped = len(records)
        logger.info("business_seed_skipped", reason="table_not_empty")
        return report

    for record in records:
        try:
            model = business_model_from_record(record)
            async with session.begin_nested():
                session.add(model)
                await session.flush()
            report.inserted += 1
        except (ValueError, SQLAlchemyError) as e:
            report.failed += 1
            logger.error("business_seed_failed", name=record.get("name"), error=str(e))

    logger.info("businesses_seeded", inserted=report.inserted, failed=report.failed)
    return report
