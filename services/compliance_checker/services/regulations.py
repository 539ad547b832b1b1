"""
Regulation Repository
=====================

Read access to the regulation corpus.

Features:
- Corpus fetch with nested penalties, requirements, exemptions, applicability
- Filtered, sorted and paginated listing
- Full-text search ranked by relevance
- Category, jurisdiction and overview statistics

Reads are idempotent and retried on StorageError.

Version: 0.1.0
"""

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any

from pydantic import ValidationError
from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shared.config import settings
from shared.database.redis import RedisClient
from shared.errors import NotFoundError, StorageError
from shared.logging import get_logger
from shared.models.common import PaginatedResponse, Pagination
from shared.models.regulation import (
    CategoryCount,
    JurisdictionCount,
    LinkedRegulation,
    Penalty,
    Regulation,
    RegulationSearchHit,
    RegulationStats,
    Requirement,
)


logger = get_logger(__name__)


SORT_FIELDS = ("title", "category", "jurisdiction", "effective_date", "compliance_deadline")
SORT_ORDERS = ("ASC", "DESC")

DEFAULT_FREQUENCY = "As needed"
DEFAULT_DOCUMENTATION = "Required documentation varies by regulation"
DEFAULT_DEADLINE = "Varies by requirement"

_REGULATION_COLUMNS = """
    r.id, r.title, r.description, r.category, r.jurisdiction, r.authority,
    r.effective_date, r.compliance_deadline
"""

_SEARCH_MATCH = """
    (
        to_tsvector('english', r.title || ' ' || r.description)
            @@ plainto_tsquery('english', :search)
        OR r.title ILIKE :search_like
        OR r.description ILIKE :search_like
    )
"""


def regulation_cache_key(regulation_id: int) -> str:
    return f"regulation:{regulation_id}"


def _retry_reads():
    """Retry policy for idempotent corpus reads."""
    return retry(
        retry=retry_if_exception_type(StorageError),
        stop=stop_after_attempt(settings.compliance.storage_retry_attempts),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            "regulation_read_retry",
            attempt=retry_state.attempt_number,
            wait=retry_state.next_action.sleep,  # type: ignore[union-attr]
        ),
    )


class RegulationRepository:
    """
    Repository for regulation records.

    All statements are parameterized ``text()`` queries; SQLAlchemy errors
    are wrapped in StorageError after rolling the session back.
    """

    # =========================================================================
    # Corpus
    # =========================================================================

    @_retry_reads()
    async def fetch_corpus(
        self,
        db: AsyncSession,
        jurisdictions: Iterable[str] | None = None,
    ) -> list[Regulation]:
        """
        Fetch full regulation records.

        Args:
            db: Database session
            jurisdictions: Only regulations issued by these jurisdictions
                (all regulations when None)

        Returns:
            Regulations ordered by (category, title)
        """
        params: dict[str, Any] = {}
        where = ""
        if jurisdictions is not None:
            params["jurisdictions"] = sorted(set(jurisdictions))
            where = "WHERE r.jurisdiction IN :jurisdictions"

        query = text(f"""
            SELECT {_REGULATION_COLUMNS}
            FROM regulations r
            {where}
            ORDER BY r.category, r.title
        """)
        if jurisdictions is not None:
            query = query.bindparams(bindparam("jurisdictions", expanding=True))

        rows = await self._fetch(db, "fetch_corpus", query, params)
        regulations = await self._hydrate(db, rows)

        logger.debug(
            "regulation_corpus_fetched",
            count=len(regulations),
            jurisdictions=params.get("jurisdictions"),
        )
        return regulations

    # =========================================================================
    # Catalogue
    # =========================================================================

    @_retry_reads()
    async def list_regulations(
        self,
        db: AsyncSession,
        pagination: Pagination,
        category: str | None = None,
        jurisdiction: str | None = None,
        industry: str | None = None,
        search: str | None = None,
        sort_by: str = "title",
        sort_order: str = "ASC",
    ) -> PaginatedResponse[Regulation]:
        """
        List regulations with filters, sorting and pagination.

        Unknown sort fields fall back to ``title`` and unknown orders to
        ``ASC``. ``industry`` matches applicability tags case-insensitively.
        """
        if sort_by not in SORT_FIELDS:
            sort_by = "title"
        sort_order = sort_order.upper() if sort_order else "ASC"
        if sort_order not in SORT_ORDERS:
            sort_order = "ASC"

        conditions = ["1=1"]
        params: dict[str, Any] = {}

        if category:
            conditions.append("r.category = :category")
            params["category"] = category
        if jurisdiction:
            conditions.append("r.jurisdiction = :jurisdiction")
            params["jurisdiction"] = jurisdiction
        if industry:
            conditions.append("""
                EXISTS (
                    SELECT 1 FROM regulation_applicability ra
                    WHERE ra.regulation_id = r.id AND ra.applies_to ILIKE :industry
                )
            """)
            params["industry"] = industry
        if search:
            conditions.append(_SEARCH_MATCH)
            params["search"] = search
            params["search_like"] = f"%{search}%"

        where = " AND ".join(conditions)
        order_by = f"r.{sort_by} {sort_order}"
        if sort_by == "title":
            order_by += ", r.category, r.jurisdiction"

        count_query = text(f"SELECT COUNT(*) FROM regulations r WHERE {where}")
        total = await self._scalar(db, "count_regulations", count_query, params)

        query = text(f"""
            SELECT {_REGULATION_COLUMNS}
            FROM regulations r
            WHERE {where}
            ORDER BY {order_by}
            LIMIT :limit OFFSET :offset
        """)
        rows = await self._fetch(
            db,
            "list_regulations",
            query,
            {**params, "limit": pagination.limit, "offset": pagination.offset},
        )
        items = await self._hydrate(db, rows)

        return PaginatedResponse[Regulation](
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            pages=pagination.pages_for(total),
        )

    async def get_regulation(self, db: AsyncSession, regulation_id: int) -> Regulation:
        """
        Get one regulation by id, through the cache.

        Raises:
            NotFoundError: No regulation with this id
        """
        cache_key = regulation_cache_key(regulation_id)
        cached = await RedisClient.get_cached(cache_key)
        if cached is not None:
            return Regulation.model_validate(cached)

        regulation = await self._load_regulation(db, regulation_id)

        await RedisClient.set_cached(
            cache_key,
            regulation.model_dump(mode="json", by_alias=True),
            ttl_seconds=settings.compliance.regulation_cache_ttl_seconds,
        )
        return regulation

    @_retry_reads()
    async def _load_regulation(self, db: AsyncSession, regulation_id: int) -> Regulation:
        query = text(f"""
            SELECT {_REGULATION_COLUMNS}
            FROM regulations r
            WHERE r.id = :id
        """)
        rows = await self._fetch(db, "get_regulation", query, {"id": regulation_id})
        hydrated = await self._hydrate(db, rows)
        if not hydrated:
            raise NotFoundError("Regulation", regulation_id)
        return hydrated[0]

    @_retry_reads()
    async def search(
        self,
        db: AsyncSession,
        query_text: str,
        pagination: Pagination,
        category: str | None = None,
        jurisdiction: str | None = None,
        effective_date_from: date | None = None,
        effective_date_to: date | None = None,
    ) -> PaginatedResponse[RegulationSearchHit]:
        """Full-text search ranked by ``ts_rank`` relevance, then title."""
        conditions = [_SEARCH_MATCH]
        params: dict[str, Any] = {"search": query_text, "search_like": f"%{query_text}%"}

        if category:
            conditions.append("r.category = :category")
            params["category"] = category
        if jurisdiction:
            conditions.append("r.jurisdiction = :jurisdiction")
            params["jurisdiction"] = jurisdiction
        if effective_date_from:
            conditions.append("r.effective_date >= :date_from")
            params["date_from"] = effective_date_from
        if effective_date_to:
            conditions.append("r.effective_date <= :date_to")
            params["date_to"] = effective_date_to

        where = " AND ".join(conditions)

        count_query = text(f"SELECT COUNT(*) FROM regulations r WHERE {where}")
        total = await self._scalar(db, "count_search", count_query, params)

        query = text(f"""
            SELECT {_REGULATION_COLUMNS},
                   ts_rank(
                       to_tsvector('english', r.title || ' ' || r.description),
                       plainto_tsquery('english', :search)
                   ) AS relevance_score
            FROM regulations r
            WHERE {where}
            ORDER BY relevance_score DESC, r.title
            LIMIT :limit OFFSET :offset
        """)
        rows = await self._fetch(
            db,
            "search_regulations",
            query,
            {**params, "limit": pagination.limit, "offset": pagination.offset},
        )

        hits = [
            RegulationSearchHit(
                id=row.id,
                title=row.title,
                description=row.description,
                category=row.category,
                jurisdiction=row.jurisdiction,
                authority=row.authority,
                effective_date=row.effective_date,
                compliance_deadline=row.compliance_deadline,
                relevance_score=float(row.relevance_score or 0.0),
            )
            for row in rows
        ]

        logger.info("regulations_searched", query=query_text, total=total)

        return PaginatedResponse[RegulationSearchHit](
            items=hits,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            pages=pagination.pages_for(total),
        )

    @_retry_reads()
    async def list_categories(self, db: AsyncSession) -> list[CategoryCount]:
        """Categories with their regulation counts, most common first."""
        query = text("""
            SELECT category, COUNT(*) AS count
            FROM regulations
            GROUP BY category
            ORDER BY count DESC, category
        """)
        rows = await self._fetch(db, "list_categories", query, {})
        return [CategoryCount(category=row.category, count=row.count) for row in rows]

    @_retry_reads()
    async def list_jurisdictions(self, db: AsyncSession) -> list[JurisdictionCount]:
        """Jurisdictions with their regulation counts, most common first."""
        query = text("""
            SELECT jurisdiction, COUNT(*) AS count
            FROM regulations
            GROUP BY jurisdiction
            ORDER BY count DESC, jurisdiction
        """)
        rows = await self._fetch(db, "list_jurisdictions", query, {})
        return [
            JurisdictionCount(jurisdiction=row.jurisdiction, count=row.count)
            for row in rows
        ]

    @_retry_reads()
    async def get_stats(self, db: AsyncSession) -> RegulationStats:
        """Corpus statistics overview."""
        query = text("""
            SELECT
                COUNT(*) AS total_regulations,
                COUNT(DISTINCT category) AS total_categories,
                COUNT(DISTINCT jurisdiction) AS total_jurisdictions,
                COUNT(DISTINCT authority) AS total_authorities,
                COUNT(*) FILTER (WHERE compliance_deadline IS NOT NULL)
                    AS regulations_with_deadlines,
                COUNT(*) FILTER (WHERE effective_date >= CURRENT_DATE - INTERVAL '1 year')
                    AS recent_regulations
            FROM regulations
        """)
        rows = await self._fetch(db, "regulation_stats", query, {})
        overview = rows[0]

        categories = await self.list_categories(db)
        jurisdictions = await self.list_jurisdictions(db)

        return RegulationStats(
            total_regulations=overview.total_regulations,
            total_categories=overview.total_categories,
            total_jurisdictions=overview.total_jurisdictions,
            total_authorities=overview.total_authorities,
            regulations_with_deadlines=overview.regulations_with_deadlines,
            recent_regulations=overview.recent_regulations,
            top_categories=categories[:10],
            jurisdictions=jurisdictions,
        )

    # =========================================================================
    # Business links
    # =========================================================================

    @_retry_reads()
    async def fetch_linked(
        self,
        db: AsyncSession,
        business_id: int,
        applicable_only: bool = True,
    ) -> list[LinkedRegulation]:
        """
        Regulations linked to a business by saved compliance results.

        Args:
            db: Database session
            business_id: Business id
            applicable_only: Skip links marked not applicable

        Returns:
            Linked regulations ordered by (category, title)
        """
        where = "br.business_id = :business_id"
        if applicable_only:
            where += " AND br.is_applicable = true"

        query = text(f"""
            SELECT {_REGULATION_COLUMNS},
                   br.compliance_status, br.is_applicable, br.created_at AS applied_date
            FROM business_regulations br
            JOIN regulations r ON br.regulation_id = r.id
            WHERE {where}
            ORDER BY r.category, r.title
        """)
        rows = await self._fetch(db, "fetch_linked", query, {"business_id": business_id})

        return await self._hydrate(
            db,
            rows,
            extra=lambda row: {
                "compliance_status": row.compliance_status or "pending",
                "is_applicable": bool(row.is_applicable),
                "applied_date": row.applied_date,
            },
            model=LinkedRegulation,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _fetch(
        self,
        db: AsyncSession,
        operation: str,
        query: Any,
        params: dict[str, Any],
    ) -> Sequence[Any]:
        try:
            result = await db.execute(query, params)
            return result.fetchall()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("regulation_query_failed", operation=operation, error=str(e))
            raise StorageError(operation, e) from e

    async def _scalar(
        self,
        db: AsyncSession,
        operation: str,
        query: Any,
        params: dict[str, Any],
    ) -> int:
        try:
            result = await db.execute(query, params)
            return int(result.scalar() or 0)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("regulation_query_failed", operation=operation, error=str(e))
            raise StorageError(operation, e) from e

    async def _hydrate(
        self,
        db: AsyncSession,
        rows: Sequence[Any],
        extra: Callable[[Any], dict[str, Any]] | None = None,
        model: type[Regulation] = Regulation,
    ) -> list[Any]:
        """Attach nested records to regulation rows, preserving row order."""
        if not rows:
            return []

        ids = [row.id for row in rows]
        id_param = bindparam("ids", expanding=True)

        penalties: dict[int, list[Penalty]] = defaultdict(list)
        penalty_rows = await self._fetch(
            db,
            "fetch_penalties",
            text("""
                SELECT regulation_id, type, amount, description
                FROM penalties WHERE regulation_id IN :ids
                ORDER BY regulation_id, id
            """).bindparams(id_param),
            {"ids": ids},
        )
        for row in penalty_rows:
            penalties[row.regulation_id].append(
                Penalty(
                    type=row.type,
                    amount=float(row.amount) if row.amount is not None else None,
                    description=row.description,
                )
            )

        requirements: dict[int, list[Requirement]] = defaultdict(list)
        requirement_rows = await self._fetch(
            db,
            "fetch_requirements",
            text("""
                SELECT regulation_id, description, frequency, documentation, deadline
                FROM requirements WHERE regulation_id IN :ids
                ORDER BY regulation_id, id
            """).bindparams(id_param),
            {"ids": ids},
        )
        for row in requirement_rows:
            requirements[row.regulation_id].append(
                Requirement(
                    description=row.description,
                    frequency=row.frequency or DEFAULT_FREQUENCY,
                    documentation=row.documentation or DEFAULT_DOCUMENTATION,
                    deadline=row.deadline or DEFAULT_DEADLINE,
                )
            )

        exemptions: dict[int, list[str]] = defaultdict(list)
        exemption_rows = await self._fetch(
            db,
            "fetch_exemptions",
            text("""
                SELECT regulation_id, exemption_text
                FROM regulation_exemptions WHERE regulation_id IN :ids
                ORDER BY regulation_id, id
            """).bindparams(id_param),
            {"ids": ids},
        )
        for row in exemption_rows:
            exemptions[row.regulation_id].append(row.exemption_text)

        applies_to: dict[int, list[str]] = defaultdict(list)
        applicability_rows = await self._fetch(
            db,
            "fetch_applicability",
            text("""
                SELECT regulation_id, applies_to
                FROM regulation_applicability WHERE regulation_id IN :ids
                ORDER BY regulation_id, id
            """).bindparams(id_param),
            {"ids": ids},
        )
        for row in applicability_rows:
            applies_to[row.regulation_id].append(row.applies_to)

        hydrated = []
        for row in rows:
            try:
                hydrated.append(
                    model(
                        id=row.id,
                        title=row.title,
                        description=row.description,
                        category=row.category,
                        jurisdiction=row.jurisdiction,
                        authority=row.authority,
                        effective_date=row.effective_date,
                        compliance_deadline=row.compliance_deadline,
                        penalties=penalties[row.id],
                        requirements=requirements[row.id],
                        exemptions=exemptions[row.id],
                        applies_to=applies_to[row.id],
                        **(extra(row) if extra else {}),
                    )
                )
            except ValidationError as e:
                logger.warning(
                    "regulation_row_skipped",
                    regulation_id=row.id,
                    category=row.category,
                    error=str(e),
                )
        return hydrated
