"""Gap queue: uncovered keywords ranked by strategic score."""

from __future__ import annotations

from radar.config import settings
from radar.core.store_failures import run_store_operation
from radar.repositories.base import KeywordStore
from radar.schemas.keyword import KeywordResponse


def clamp_limit(limit: int | None) -> int:
    """Missing means the default; anything else is pinned into [1, max]."""
    if limit is None:
        return settings.gap_queue_default_limit
    return max(1, min(limit, settings.gap_queue_max_limit))


class GapQueue:
    """Read-only view of keywords with no app match and no published page.

    Results are a snapshot. Nothing is claimed, so two callers may receive
    the same keyword.
    """

    def __init__(self, store: KeywordStore) -> None:
        self.store = store

    async def next_candidates(self, limit: int | None = None) -> list[KeywordResponse]:
        effective = clamp_limit(limit)
        return await run_store_operation(
            lambda: self.store.list_gaps(effective),
            operation_name="gap_queue",
            policy=settings.get_store_failure_policy("gap_queue"),
            default=list,
            log_context={"limit": effective},
        )
