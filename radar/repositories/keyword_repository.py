"""SQL-backed keyword ledger."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from radar.core.clock import advance_timestamp, utc_now
from radar.core.database import get_session_context
from radar.models.keyword import Keyword
from radar.schemas.keyword import (
    BucketStat,
    IntentStat,
    KeywordFilters,
    KeywordIngestItem,
    KeywordResponse,
    KeywordStats,
)

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "strategic_score": Keyword.strategic_score,
    "difficulty": Keyword.difficulty,
    "monthly_volume": Keyword.monthly_volume,
    "term": Keyword.term,
    "last_seen": Keyword.last_seen,
}

_INGEST_FIELDS = (
    "bucket",
    "intent",
    "monthly_volume",
    "difficulty",
    "strategic_score",
    "matched_app",
    "matched_url",
)


def gap_filter():
    """Rows eligible for the gap queue."""
    return (Keyword.matched_app.is_(None), Keyword.page_exists.is_(False))


def _gap_query(limit: int) -> Select:
    return (
        select(Keyword)
        .where(*gap_filter())
        .order_by(Keyword.strategic_score.desc(), Keyword.id.asc())
        .limit(limit)
    )


class KeywordRepository:
    """Keyword reads and writes, one short-lived session per call."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_maker = session_maker

    def _session(self, *, commit_on_exit: bool = True):
        return get_session_context(commit_on_exit=commit_on_exit, session_maker=self._session_maker)

    async def get(self, keyword_id: int) -> KeywordResponse | None:
        async with self._session(commit_on_exit=False) as session:
            keyword = await session.get(Keyword, keyword_id)
            return KeywordResponse.model_validate(keyword) if keyword else None

    async def update_coverage(
        self, keyword_id: int, page_exists: bool
    ) -> KeywordResponse | None:
        async with self._session() as session:
            keyword = await session.get(Keyword, keyword_id, with_for_update=True)
            if keyword is None:
                return None
            keyword.page_exists = page_exists
            keyword.last_seen = advance_timestamp(keyword.last_seen)
            await session.flush()
            return KeywordResponse.model_validate(keyword)

    async def list_gaps(self, limit: int) -> list[KeywordResponse]:
        async with self._session(commit_on_exit=False) as session:
            result = await session.execute(_gap_query(limit))
            return [KeywordResponse.model_validate(row) for row in result.scalars().all()]

    async def list_keywords(self, filters: KeywordFilters) -> tuple[list[KeywordResponse], int]:
        query = select(Keyword)

        if filters.bucket:
            query = query.where(Keyword.bucket == filters.bucket)
        if filters.intent:
            query = query.where(Keyword.intent == filters.intent)
        if filters.covered is True:
            query = query.where(Keyword.matched_app.is_not(None))
        if filters.covered is False:
            query = query.where(Keyword.matched_app.is_(None))
        if filters.difficulty_min is not None:
            query = query.where(Keyword.difficulty >= filters.difficulty_min)
        if filters.difficulty_max is not None:
            query = query.where(Keyword.difficulty <= filters.difficulty_max)
        if filters.search:
            query = query.where(Keyword.term.ilike(f"%{filters.search}%"))

        sort_column = _SORT_COLUMNS[filters.sort]
        ordering = sort_column.asc() if filters.order == "asc" else sort_column.desc()

        async with self._session(commit_on_exit=False) as session:
            total = await session.scalar(select(func.count()).select_from(query.subquery())) or 0
            result = await session.execute(
                query.order_by(ordering, Keyword.id.asc())
                .offset(filters.offset)
                .limit(filters.limit)
            )
            rows = [KeywordResponse.model_validate(row) for row in result.scalars().all()]
        return rows, total

    async def stats(self, top_n: int) -> KeywordStats:
        async with self._session(commit_on_exit=False) as session:
            total = await session.scalar(select(func.count()).select_from(Keyword)) or 0
            matched = await session.scalar(
                select(func.count()).select_from(Keyword).where(Keyword.matched_app.is_not(None))
            ) or 0
            published = await session.scalar(
                select(func.count()).select_from(Keyword).where(Keyword.page_exists.is_(True))
            ) or 0
            gaps = await session.scalar(
                select(func.count()).select_from(Keyword).where(*gap_filter())
            ) or 0
            avg_difficulty = await session.scalar(select(func.avg(Keyword.difficulty)))

            bucket_rows = await session.execute(
                select(Keyword.bucket, func.count(), func.avg(Keyword.strategic_score))
                .group_by(Keyword.bucket)
                .order_by(Keyword.bucket)
            )
            intent_rows = await session.execute(
                select(Keyword.intent, func.count())
                .group_by(Keyword.intent)
                .order_by(Keyword.intent)
            )
            top = await session.execute(_gap_query(top_n))

            return KeywordStats(
                total=total,
                matched=matched,
                published=published,
                gaps=gaps,
                coverage_pct=round(matched / total * 100) if total else 0,
                avg_difficulty=round(avg_difficulty or 0),
                buckets=[
                    BucketStat(bucket=bucket, count=count, avg_score=float(avg or 0))
                    for bucket, count, avg in bucket_rows.all()
                ],
                intents=[IntentStat(intent=intent, count=count) for intent, count in intent_rows.all()],
                top_gaps=[KeywordResponse.model_validate(row) for row in top.scalars().all()],
            )

    async def upsert_many(self, items: Sequence[KeywordIngestItem]) -> tuple[int, int]:
        # Later duplicates of the same term win.
        by_term = {item.term: item for item in items}
        inserted = updated = 0

        async with self._session() as session:
            result = await session.execute(
                select(Keyword).where(Keyword.term.in_(list(by_term)))
            )
            existing = {row.term: row for row in result.scalars().all()}
            now = utc_now()

            for term, item in by_term.items():
                values = {field: getattr(item, field) for field in _INGEST_FIELDS}
                keyword = existing.get(term)
                if keyword is None:
                    session.add(Keyword(term=term, first_seen=now, last_seen=now, **values))
                    inserted += 1
                    continue
                for field, value in values.items():
                    setattr(keyword, field, value)
                keyword.last_seen = advance_timestamp(keyword.last_seen, now)
                updated += 1

        logger.info("Keywords ingested", extra={"inserted": inserted, "updated": updated})
        return inserted, updated
