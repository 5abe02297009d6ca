"""Pipeline run tracker."""

from __future__ import annotations

import logging

from radar.config import settings
from radar.core.clock import utc_now
from radar.core.db_retry import run_with_transient_db_retry
from radar.core.exceptions import (
    InvalidRunTransitionError,
    PipelineRunNotFoundError,
    ValidationError,
)
from radar.core.store_failures import run_store_operation
from radar.models.pipeline import RunStatus
from radar.repositories.base import PipelineRunStore
from radar.schemas.pipeline import PipelineRunResponse
from radar.schemas.topic import TopicResponse

logger = logging.getLogger(__name__)

TERMINAL_RUN_STATUSES: frozenset[str] = frozenset({"succeeded", "failed"})


class PipelineRunTracker:
    """Records pipeline runs: started once, finished at most once."""

    def __init__(self, store: PipelineRunStore) -> None:
        self.store = store

    async def list_recent(self, limit: int | None = None) -> list[PipelineRunResponse]:
        """Newest runs first. Out-of-range limits are rejected, not clamped."""
        if limit is None:
            limit = settings.run_list_default_limit
        if not 1 <= limit <= settings.run_list_max_limit:
            raise ValidationError(
                f"limit must be between 1 and {settings.run_list_max_limit}",
                {"limit": limit},
            )
        return await run_store_operation(
            lambda: self.store.list_recent(limit),
            operation_name="list_runs",
            policy=settings.get_store_failure_policy("list_runs"),
            default=list,
            log_context={"limit": limit},
        )

    async def start_run(self, topic: TopicResponse) -> PipelineRunResponse:
        run = await run_store_operation(
            lambda: self.store.create(
                topic_id=topic.id,
                category_slug=topic.category_slug,
                topic_key=topic.topic_key,
            ),
            operation_name="start_run",
            policy=settings.get_store_failure_policy("start_run"),
            log_context={"topic_id": topic.id},
        )
        logger.info("Pipeline run started", extra={"run_id": run.id, "topic_id": topic.id})
        return run

    async def finish_run(
        self,
        run_id: int,
        status: RunStatus,
        *,
        items_generated: int = 0,
        tokens_used: int = 0,
        output_preview: str | None = None,
        error_message: str | None = None,
    ) -> PipelineRunResponse:
        if status not in TERMINAL_RUN_STATUSES:
            raise ValidationError(f"Run status must be terminal, got {status}")

        completed_at = utc_now()

        async def complete() -> PipelineRunResponse | None:
            return await self.store.complete(
                run_id,
                status=status,
                completed_at=completed_at,
                items_generated=items_generated,
                tokens_used=tokens_used,
                output_preview=output_preview,
                error_message=error_message,
            )

        # Safe to retry: the write only applies while the run is still started.
        run = await run_store_operation(
            lambda: run_with_transient_db_retry(
                complete,
                operation_name="finish_run",
                log_context={"run_id": run_id},
            ),
            operation_name="finish_run",
            policy=settings.get_store_failure_policy("finish_run"),
            log_context={"run_id": run_id, "status": status},
        )
        if run is None:
            existing = await self.store.get(run_id)
            if existing is None:
                raise PipelineRunNotFoundError(run_id)
            raise InvalidRunTransitionError(run_id, existing.status, status)

        logger.info("Pipeline run finished", extra={"run_id": run_id, "status": status})
        return run
