"""
Compliance Service
==================

Orchestrates a compliance check and persists its results.

Workflow:
1. Validated profile -> cache lookup
2. Fetch jurisdiction-eligible corpus (retried reads)
3. Select applicable regulations
4. Evaluate score, risk, deadlines and recommendations
5. Cache write (best effort)

Version: 0.1.0
"""

from datetime import UTC, datetime

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.database.redis import RedisClient
from shared.errors import NotFoundError, StorageError
from shared.logging import get_logger
from shared.models.business import BusinessProfileInput
from shared.models.compliance import (
    ComplianceHistory,
    ComplianceResult,
    ComplianceResultSave,
    ComplianceStatus,
    SavedComplianceResult,
)

from services.compliance_checker.services.applicability import (
    ApplicabilityRules,
    select_candidate_regulations,
)
from services.compliance_checker.services.businesses import BusinessService
from services.compliance_checker.services.evaluator import (
    ComplianceEvaluator,
    ScoringRules,
)
from services.compliance_checker.services.jurisdictions import jurisdiction_labels
from services.compliance_checker.services.regulations import RegulationRepository


logger = get_logger(__name__)


def compliance_cache_key(profile: BusinessProfileInput) -> str:
    """Cache key for an evaluation of ``profile``."""
    return f"compliance:{profile.fingerprint()}"


class ComplianceService:
    """
    Service for running and recording compliance checks.

    The evaluator and selector are pure; this class owns every I/O step
    around them.
    """

    def __init__(
        self,
        regulations: RegulationRepository | None = None,
        businesses: BusinessService | None = None,
        evaluator: ComplianceEvaluator | None = None,
        rules: ApplicabilityRules | None = None,
    ) -> None:
        """
        Initialize the compliance service.

        Args:
            regulations: Regulation repository
            businesses: Business service, used to verify business ids
            evaluator: Compliance evaluator (defaults to settings-driven rules)
            rules: Applicability rules
        """
        self.regulations = regulations or RegulationRepository()
        self.businesses = businesses or BusinessService(self.regulations)
        self.evaluator = evaluator or ComplianceEvaluator(
            ScoringRules.from_settings(settings.compliance)
        )
        self.rules = rules or ApplicabilityRules()

    async def check(
        self,
        db: AsyncSession,
        profile_input: BusinessProfileInput,
        now: datetime | None = None,
    ) -> ComplianceResult:
        """
        Run a compliance check for a validated profile.

        Args:
            db: Database session
            profile_input: Validated business profile
            now: Reference time for deadline filtering

        Returns:
            ComplianceResult

        Raises:
            StorageError: The corpus could not be read after retries
        """
        cache_key = compliance_cache_key(profile_input)

        cached = await RedisClient.get_cached(cache_key)
        if cached is not None:
            try:
                result = ComplianceResult.model_validate(cached)
                logger.debug("compliance_cache_hit", cache_key=cache_key)
                return result
            except ValidationError as e:
                logger.warning("compliance_cache_invalid", cache_key=cache_key, error=str(e))

        profile = profile_input.to_profile()
        labels = jurisdiction_labels(profile.location)

        corpus = await self.regulations.fetch_corpus(db, labels.as_set())
        applicable = select_candidate_regulations(profile, corpus, self.rules)
        result = self.evaluator.evaluate(profile, applicable, now=now)

        await RedisClient.set_cached(
            cache_key,
            result.model_dump(mode="json", by_alias=True),
            ttl_seconds=settings.compliance.cache_ttl_seconds,
        )

        logger.info(
            "compliance_checked",
            business_name=profile.name,
            industry=profile.industry,
            regulations=len(applicable),
            score=result.compliance_score,
            risk_level=result.risk_level.value,
        )
        return result

    async def save_result(
        self,
        db: AsyncSession,
        request: ComplianceResultSave,
        timestamp: datetime | None = None,
    ) -> SavedComplianceResult:
        """
        Persist a computed result and link its regulations to the business.

        Individual link failures are logged and skipped; the result row is
        kept.

        Raises:
            NotFoundError: The business does not exist
            StorageError: The result row could not be written
        """
        if not await self.businesses.business_exists(db, request.business_id):
            raise NotFoundError("Business", request.business_id)

        created_at = timestamp or datetime.now(UTC)

        try:
            result = await db.execute(
                text("""
                    INSERT INTO compliance_results
                        (business_id, compliance_score, risk_level, created_at)
                    VALUES (:business_id, :score, :risk_level, :created_at)
                    RETURNING id, business_id, compliance_score, risk_level, created_at
                """),
                {
                    "business_id": request.business_id,
                    "score": request.score,
                    "risk_level": request.risk_level.value,
                    "created_at": created_at,
                },
            )
            row = result.fetchone()
        except SQLAlchemyError as e:
            logger.error(
                "compliance_result_save_failed",
                business_id=request.business_id,
                error=str(e),
            )
            raise StorageError("save_compliance_result", e) from e

        linked = 0
        for regulation in request.applicable_regulations:
            if await self._link_regulation(db, request.business_id, regulation.id, created_at):
                linked += 1

        logger.info(
            "compliance_result_saved",
            business_id=request.business_id,
            result_id=row.id,
            score=request.score,
            linked=linked,
            requested=len(request.applicable_regulations),
        )

        return SavedComplianceResult(
            id=row.id,
            business_id=row.business_id,
            compliance_score=float(row.compliance_score),
            risk_level=row.risk_level,
            created_at=row.created_at,
            linked_regulations=linked,
        )

    async def _link_regulation(
        self,
        db: AsyncSession,
        business_id: int,
        regulation_id: int,
        created_at: datetime,
    ) -> bool:
        """Upsert one business/regulation link inside a savepoint."""
        try:
            async with db.begin_nested():
                await db.execute(
                    text("""
                        INSERT INTO business_regulations
                            (business_id, regulation_id, is_applicable, compliance_status, created_at)
                        VALUES (:business_id, :regulation_id, true, :status, :created_at)
                        ON CONFLICT (business_id, regulation_id)
                        DO UPDATE SET
                            is_applicable = EXCLUDED.is_applicable,
                            compliance_status = EXCLUDED.compliance_status,
                            updated_at = NOW()
                    """),
                    {
                        "business_id": business_id,
                        "regulation_id": regulation_id,
                        "status": ComplianceStatus.PENDING.value,
                        "created_at": created_at,
                    },
                )
            return True
        except SQLAlchemyError as e:
            logger.warning(
                "regulation_link_failed",
                business_id=business_id,
                regulation_id=regulation_id,
                error=str(e),
            )
            return False

    async def get_history(self, db: AsyncSession, business_id: int) -> ComplianceHistory:
        """
        Latest saved result for a business plus its applicable regulations.

        Returns an empty history when nothing has been saved.
        """
        try:
            result = await db.execute(
                text("""
                    SELECT id, business_id, compliance_score, risk_level, created_at
                    FROM compliance_results
                    WHERE business_id = :business_id
                    ORDER BY created_at DESC, id DESC
                    LIMIT 1
                """),
                {"business_id": business_id},
            )
            latest = result.fetchone()
        except SQLAlchemyError as e:
            raise StorageError("compliance_history", e) from e

        if latest is None:
            return ComplianceHistory()

        regulations = await self.regulations.fetch_linked(db, business_id)

        return ComplianceHistory(
            compliance=SavedComplianceResult(
                id=latest.id,
                business_id=latest.business_id,
                compliance_score=float(latest.compliance_score),
                risk_level=latest.risk_level,
                created_at=latest.created_at,
                linked_regulations=len(regulations),
            ),
            regulations=regulations,
        )

