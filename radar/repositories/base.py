"""Store contracts shared by the SQL and in-memory backends.

Every method is one self-contained read or write. Nothing here holds a lock
or a transaction across calls, so callers can treat each call as atomic for
a single row and nothing more.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from radar.models.pipeline import RunStatus
from radar.models.topic import TopicStatus
from radar.schemas.keyword import KeywordFilters, KeywordIngestItem, KeywordResponse, KeywordStats
from radar.schemas.pipeline import PipelineRunResponse
from radar.schemas.topic import TopicResponse, TopicSave


class KeywordStore(Protocol):
    async def get(self, keyword_id: int) -> KeywordResponse | None: ...

    async def update_coverage(
        self, keyword_id: int, page_exists: bool
    ) -> KeywordResponse | None:
        """Set ``page_exists`` and advance ``last_seen``; ``None`` when missing."""
        ...

    async def list_gaps(self, limit: int) -> list[KeywordResponse]:
        """Unmatched, unpublished keywords by score desc, id asc."""
        ...

    async def list_keywords(self, filters: KeywordFilters) -> tuple[list[KeywordResponse], int]: ...

    async def stats(self, top_n: int) -> KeywordStats: ...

    async def upsert_many(self, items: Sequence[KeywordIngestItem]) -> tuple[int, int]:
        """Insert or refresh keywords by term; returns ``(inserted, updated)``."""
        ...


class TopicStore(Protocol):
    async def list_all(self) -> list[TopicResponse]: ...

    async def get(self, topic_id: int) -> TopicResponse | None: ...

    async def delete(self, topic_id: int) -> bool:
        """Delete unconditionally; returns whether a row existed."""
        ...

    async def upsert(self, payload: TopicSave) -> tuple[int, bool]:
        """Create or update by ``(category_slug, topic_key)``; returns ``(id, created)``."""
        ...

    async def update_status(
        self,
        topic_id: int,
        *,
        expected: TopicStatus,
        status: TopicStatus,
        standalone_url: str | None = None,
    ) -> TopicResponse | None:
        """Compare-and-set the status; ``None`` if missing or no longer ``expected``."""
        ...


class PipelineRunStore(Protocol):
    async def get(self, run_id: int) -> PipelineRunResponse | None: ...

    async def list_recent(self, limit: int) -> list[PipelineRunResponse]:
        """Newest first by ``started_at``, then id."""
        ...

    async def create(
        self, *, topic_id: int, category_slug: str, topic_key: str | None
    ) -> PipelineRunResponse: ...

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
        """Move a ``started`` run to a terminal status; ``None`` if not ``started``."""
        ...


@dataclass
class RadarStore:
    """The three stores a request works against."""

    keywords: KeywordStore
    topics: TopicStore
    runs: PipelineRunStore
