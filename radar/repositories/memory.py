"""In-memory stores with the same contracts as the SQL repositories.

Used for local development without a database and throughout the unit
tests. Topic rows keep ``search_queries`` as the stored JSON text so reads go
through the same decoding as SQL rows.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from radar.core.clock import advance_timestamp, utc_now
from radar.models.base import encode_search_queries
from radar.models.pipeline import RunStatus
from radar.models.topic import TopicStatus
from radar.repositories.base import RadarStore
from radar.schemas.keyword import (
    BucketStat,
    IntentStat,
    KeywordFilters,
    KeywordIngestItem,
    KeywordResponse,
    KeywordStats,
)
from radar.schemas.pipeline import PipelineRunResponse
from radar.schemas.topic import TopicResponse, TopicSave

_TOPIC_CONFIG_FIELDS = (
    "category_label",
    "topic_label",
    "content_type",
    "max_spots",
    "body_system_prompt",
    "faq_system_prompt",
    "enabled",
)


def _is_gap(row: dict[str, Any]) -> bool:
    return row["matched_app"] is None and not row["page_exists"]


def _gap_sort_key(row: dict[str, Any]) -> tuple[float, int]:
    return (-row["strategic_score"], row["id"])


class InMemoryKeywordStore:
    def __init__(self) -> None:
        self._rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def insert_raw(self, **values: Any) -> int:
        """Seed a row directly, bypassing ingest rules."""
        now = utc_now()
        keyword_id = values.pop("id", None) or self._next_id
        self._next_id = max(self._next_id, keyword_id + 1)
        row = {
            "id": keyword_id,
            "term": f"keyword-{keyword_id}",
            "bucket": "",
            "intent": "informational",
            "monthly_volume": 0,
            "difficulty": 50,
            "strategic_score": 0.0,
            "matched_app": None,
            "matched_url": None,
            "page_exists": False,
            "first_seen": now,
            "last_seen": now,
        }
        row.update(values)
        self._rows[keyword_id] = row
        return keyword_id

    async def get(self, keyword_id: int) -> KeywordResponse | None:
        row = self._rows.get(keyword_id)
        return KeywordResponse.model_validate(row) if row else None

    async def update_coverage(
        self, keyword_id: int, page_exists: bool
    ) -> KeywordResponse | None:
        async with self._lock:
            row = self._rows.get(keyword_id)
            if row is None:
                return None
            row["page_exists"] = page_exists
            row["last_seen"] = advance_timestamp(row["last_seen"])
            return KeywordResponse.model_validate(row)

    async def list_gaps(self, limit: int) -> list[KeywordResponse]:
        async with self._lock:
            rows = sorted((r for r in self._rows.values() if _is_gap(r)), key=_gap_sort_key)
            return [KeywordResponse.model_validate(r) for r in rows[:limit]]

    async def list_keywords(self, filters: KeywordFilters) -> tuple[list[KeywordResponse], int]:
        async with self._lock:
            rows = list(self._rows.values())

        if filters.bucket:
            rows = [r for r in rows if r["bucket"] == filters.bucket]
        if filters.intent:
            rows = [r for r in rows if r["intent"] == filters.intent]
        if filters.covered is not None:
            rows = [r for r in rows if (r["matched_app"] is not None) is filters.covered]
        if filters.difficulty_min is not None:
            rows = [r for r in rows if r["difficulty"] >= filters.difficulty_min]
        if filters.difficulty_max is not None:
            rows = [r for r in rows if r["difficulty"] <= filters.difficulty_max]
        if filters.search:
            needle = filters.search.lower()
            rows = [r for r in rows if needle in r["term"].lower()]

        # Two stable passes: id ascending, then the requested column.
        rows.sort(key=lambda r: r["id"])
        rows.sort(key=lambda r: r[filters.sort], reverse=filters.order == "desc")

        page = rows[filters.offset : filters.offset + filters.limit]
        return [KeywordResponse.model_validate(r) for r in page], len(rows)

    async def stats(self, top_n: int) -> KeywordStats:
        async with self._lock:
            rows = list(self._rows.values())

        total = len(rows)
        if not total:
            return KeywordStats()

        matched = sum(1 for r in rows if r["matched_app"] is not None)
        buckets: dict[str, list[float]] = {}
        intents: dict[str, int] = {}
        for row in rows:
            buckets.setdefault(row["bucket"], []).append(row["strategic_score"])
            intents[row["intent"]] = intents.get(row["intent"], 0) + 1

        gaps = sorted((r for r in rows if _is_gap(r)), key=_gap_sort_key)
        return KeywordStats(
            total=total,
            matched=matched,
            published=sum(1 for r in rows if r["page_exists"]),
            gaps=len(gaps),
            coverage_pct=round(matched / total * 100),
            avg_difficulty=round(sum(r["difficulty"] for r in rows) / total),
            buckets=[
                BucketStat(bucket=name, count=len(scores), avg_score=sum(scores) / len(scores))
                for name, scores in sorted(buckets.items())
            ],
            intents=[IntentStat(intent=name, count=count) for name, count in sorted(intents.items())],
            top_gaps=[KeywordResponse.model_validate(r) for r in gaps[:top_n]],
        )

    async def upsert_many(self, items: Sequence[KeywordIngestItem]) -> tuple[int, int]:
        by_term = {item.term: item for item in items}
        inserted = updated = 0
        async with self._lock:
            existing = {row["term"]: row for row in self._rows.values()}
            now = utc_now()
            for term, item in by_term.items():
                values = item.model_dump(exclude={"term"})
                row = existing.get(term)
                if row is None:
                    self.insert_raw(term=term, first_seen=now, last_seen=now, **values)
                    inserted += 1
                    continue
                row.update(values)
                row["last_seen"] = advance_timestamp(row["last_seen"], now)
                updated += 1
        return inserted, updated


class InMemoryTopicStore:
    def __init__(self) -> None:
        self._rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def insert_raw(self, **values: Any) -> int:
        """Seed a row as stored; ``search_queries`` may be any text, valid or not."""
        now = utc_now()
        topic_id = values.pop("id", None) or self._next_id
        self._next_id = max(self._next_id, topic_id + 1)
        row = {
            "id": topic_id,
            "category_slug": "general",
            "category_label": "General",
            "topic_key": f"topic-{topic_id}",
            "topic_label": f"Topic {topic_id}",
            "content_type": "article",
            "max_spots": 10,
            "search_queries": "[]",
            "body_system_prompt": None,
            "faq_system_prompt": None,
            "enabled": True,
            "description": None,
            "status": "planned",
            "standalone_url": None,
            "created_at": now,
            "updated_at": now,
        }
        row.update(values)
        self._rows[topic_id] = row
        return topic_id

    async def list_all(self) -> list[TopicResponse]:
        async with self._lock:
            return [TopicResponse.model_validate(self._rows[i]) for i in sorted(self._rows)]

    async def get(self, topic_id: int) -> TopicResponse | None:
        row = self._rows.get(topic_id)
        return TopicResponse.model_validate(row) if row else None

    async def delete(self, topic_id: int) -> bool:
        async with self._lock:
            return self._rows.pop(topic_id, None) is not None

    async def upsert(self, payload: TopicSave) -> tuple[int, bool]:
        async with self._lock:
            row = next(
                (
                    r
                    for r in self._rows.values()
                    if r["category_slug"] == payload.category_slug
                    and r["topic_key"] == payload.topic_key
                ),
                None,
            )
            values = {field: getattr(payload, field) for field in _TOPIC_CONFIG_FIELDS}
            values["search_queries"] = encode_search_queries(payload.search_queries)

            if row is None:
                topic_id = self.insert_raw(
                    category_slug=payload.category_slug,
                    topic_key=payload.topic_key,
                    description=payload.description,
                    standalone_url=payload.standalone_url,
                    **values,
                )
                return topic_id, True

            row.update(values)
            if payload.description is not None:
                row["description"] = payload.description
            if payload.standalone_url is not None:
                row["standalone_url"] = payload.standalone_url
            row["updated_at"] = utc_now()
            return row["id"], False

    async def update_status(
        self,
        topic_id: int,
        *,
        expected: TopicStatus,
        status: TopicStatus,
        standalone_url: str | None = None,
    ) -> TopicResponse | None:
        async with self._lock:
            row = self._rows.get(topic_id)
            if row is None or row["status"] != expected:
                return None
            row["status"] = status
            if standalone_url is not None:
                row["standalone_url"] = standalone_url
            row["updated_at"] = utc_now()
            return TopicResponse.model_validate(row)


class InMemoryPipelineRunStore:
    def __init__(self) -> None:
        self._rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def insert_raw(self, **values: Any) -> int:
        run_id = values.pop("id", None) or self._next_id
        self._next_id = max(self._next_id, run_id + 1)
        row = {
            "id": run_id,
            "topic_id": 1,
            "category_slug": "",
            "topic_key": None,
            "status": "started",
            "started_at": utc_now(),
            "completed_at": None,
            "items_generated": 0,
            "tokens_used": 0,
            "output_preview": None,
            "error_message": None,
        }
        row.update(values)
        self._rows[run_id] = row
        return run_id

    async def get(self, run_id: int) -> PipelineRunResponse | None:
        row = self._rows.get(run_id)
        return PipelineRunResponse.model_validate(row) if row else None

    async def list_recent(self, limit: int) -> list[PipelineRunResponse]:
        async with self._lock:
            rows = sorted(
                self._rows.values(),
                key=lambda r: (r["started_at"], r["id"]),
                reverse=True,
            )
            return [PipelineRunResponse.model_validate(r) for r in rows[:limit]]

    async def create(
        self, *, topic_id: int, category_slug: str, topic_key: str | None
    ) -> PipelineRunResponse:
        async with self._lock:
            run_id = self.insert_raw(
                topic_id=topic_id,
                category_slug=category_slug,
                topic_key=topic_key,
            )
            return PipelineRunResponse.model_validate(self._rows[run_id])

    async def complete(
        self,
        run_id: int,
        *,
        status: RunStatus,
        completed_at: datetime,
        items_generated: int = 0,
        tokens_used: int = 0,
        output_preview: str | None = None,
        error_message: str | None = None,
    ) -> PipelineRunResponse | None:
        async with self._lock:
            row = self._rows.get(run_id)
            if row is None or row["status"] != "started":
                return None
            row.update(
                status=status,
                completed_at=completed_at,
                items_generated=items_generated,
                tokens_used=tokens_used,
                output_preview=output_preview,
                error_message=error_message,
            )
            return PipelineRunResponse.model_validate(row)


def build_memory_store() -> RadarStore:
    return RadarStore(
        keywords=InMemoryKeywordStore(),
        topics=InMemoryTopicStore(),
        runs=InMemoryPipelineRunStore(),
    )
