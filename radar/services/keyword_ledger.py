"""Keyword ledger: coverage updates, ingest, listing and dashboard stats."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from radar.config import settings
from radar.core.exceptions import KeywordNotFoundError, ValidationError
from radar.core.store_failures import run_store_operation
from radar.repositories.base import KeywordStore
from radar.schemas.keyword import (
    KeywordFilters,
    KeywordIngestItem,
    KeywordIngestResponse,
    KeywordResponse,
    KeywordStats,
)

logger = logging.getLogger(__name__)

TOP_GAPS_IN_STATS = 10


class KeywordLedger:
    """Owns writes to keyword coverage and reads over the ledger."""

    def __init__(self, store: KeywordStore) -> None:
        self.store = store

    async def update_coverage(self, keyword_id: int, page_exists: bool) -> KeywordResponse:
        """Record whether a page now exists for the keyword.

        Only ``page_exists`` and ``last_seen`` change. Repeating the call with
        the same value leaves everything but ``last_seen`` untouched.
        """
        keyword = await run_store_operation(
            lambda: self.store.update_coverage(keyword_id, page_exists),
            operation_name="update_coverage",
            policy=settings.get_store_failure_policy("update_coverage"),
            log_context={"keyword_id": keyword_id},
        )
        if keyword is None:
            raise KeywordNotFoundError(keyword_id)

        logger.info(
            "Keyword coverage updated",
            extra={"keyword_id": keyword_id, "page_exists": page_exists},
        )
        return keyword

    async def get_keyword(self, keyword_id: int) -> KeywordResponse:
        keyword = await run_store_operation(
            lambda: self.store.get(keyword_id),
            operation_name="get_keyword",
            policy=settings.get_store_failure_policy("get_keyword"),
            log_context={"keyword_id": keyword_id},
        )
        if keyword is None:
            raise KeywordNotFoundError(keyword_id)
        return keyword

    async def ingest(self, items: Sequence[KeywordIngestItem]) -> KeywordIngestResponse:
        if not items:
            raise ValidationError("At least one keyword is required")

        inserted, updated = await run_store_operation(
            lambda: self.store.upsert_many(items),
            operation_name="ingest_keywords",
            policy=settings.get_store_failure_policy("ingest_keywords"),
            log_context={"count": len(items)},
        )
        return KeywordIngestResponse(inserted=inserted, updated=updated)

    async def list_keywords(self, filters: KeywordFilters) -> tuple[list[KeywordResponse], int]:
        if not 1 <= filters.limit <= settings.keyword_list_max_limit:
            raise ValidationError(
                f"limit must be between 1 and {settings.keyword_list_max_limit}",
                {"limit": filters.limit},
            )
        if (
            filters.difficulty_min is not None
            and filters.difficulty_max is not None
            and filters.difficulty_min > filters.difficulty_max
        ):
            raise ValidationError("difficulty_min cannot exceed difficulty_max")

        return await run_store_operation(
            lambda: self.store.list_keywords(filters),
            operation_name="list_keywords",
            policy=settings.get_store_failure_policy("list_keywords"),
            default=lambda: ([], 0),
        )

    async def stats(self) -> KeywordStats:
        return await run_store_operation(
            lambda: self.store.stats(TOP_GAPS_IN_STATS),
            operation_name="keyword_stats",
            policy=settings.get_store_failure_policy("keyword_stats"),
            default=KeywordStats,
        )
