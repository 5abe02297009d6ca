"""SQL-backed pipeline run log."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from radar.core.clock import utc_now
from radar.core.database import get_session_context
from radar.models.pipeline import PipelineRun, RunStatus
from radar.schemas.pipeline import PipelineRunResponse


class PipelineRunRepository:
    """Handles PipelineRun reads and writes via short-lived sessions."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_maker = session_maker

    def _session(self, *, commit_on_exit: bool = True):
        return get_session_context(commit_on_exit=commit_on_exit, session_maker=self._session_maker)

    async def get(self, run_id: int) -> PipelineRunResponse | None:
        async with self._session(commit_on_exit=False) as session:
            run = await session.get(PipelineRun, run_id)
            return PipelineRunResponse.model_validate(run) if run else None

    async def list_recent(self, limit: int) -> list[PipelineRunResponse]:
        async with self._session(commit_on_exit=False) as session:
            result = await session.execute(
                select(PipelineRun)
                .order_by(PipelineRun.started_at.desc(), PipelineRun.id.desc())
                .limit(limit)
            )
            return [PipelineRunResponse.model_validate(row) for row in result.scalars().all()]

    async def create(
        self, *, topic_id: int, category_slug: str, topic_key: str | None
    ) -> PipelineRunResponse:
        async with self._session() as session:
            run = PipelineRun(
                topic_id=topic_id,
                category_slug=category_slug,
                topic_key=topic_key,
                status="started",
                started_at=utc_now(),
            )
            session.add(run)
            await session.flush()
            return PipelineRunResponse.model_validate(run)

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
        async with self._session() as session:
            # Conditional on the current state so a late or repeated write is a no-op.
            result = await session.execute(
                update(PipelineRun)
                .where(PipelineRun.id == run_id, PipelineRun.status == "started")
                .values(
                    status=status,
                    completed_at=completed_at,
                    items_generated=items_generated,
                    tokens_used=tokens_used,
                    output_preview=output_preview,
                    error_message=error_message,
                )
                .execution_options(synchronize_session=False)
            )
            if not result.rowcount:
                return None
            run = await session.get(PipelineRun, run_id, populate_existing=True)
            return PipelineRunResponse.model_validate(run)
