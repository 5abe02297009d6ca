"""Content dispatcher: runs one topic through the generation engine.

Every step is its own store write. A crash between steps leaves a run in
``started`` and the topic ``in_progress``; both are visible in the run log
and the topic can be moved back by hand. A failed run returns the topic to
the status it had before the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from radar.core.exceptions import PipelineExecutionError, TopicNotRunnableError
from radar.integrations.generation_engine import GenerationEngine, GenerationOutcome
from radar.models.topic import TopicStatus
from radar.repositories.base import RadarStore
from radar.schemas.keyword import KeywordResponse
from radar.schemas.pipeline import PipelineRunResponse
from radar.schemas.topic import TopicResponse
from radar.services.keyword_ledger import KeywordLedger
from radar.services.run_tracker import PipelineRunTracker
from radar.services.topic_registry import TopicRegistry

logger = logging.getLogger(__name__)

NO_SEARCH_QUERIES_ERROR = "Topic has no search queries"


@dataclass
class DispatchResult:
    run: PipelineRunResponse
    topic: TopicResponse
    keyword: KeywordResponse | None = None


class ContentDispatcher:
    """Orchestrates topic status, the run log and keyword coverage around one engine call."""

    def __init__(self, store: RadarStore, engine: GenerationEngine) -> None:
        self.engine = engine
        self.topics = TopicRegistry(store.topics)
        self.runs = PipelineRunTracker(store.runs)
        self.keywords = KeywordLedger(store.keywords)

    async def dispatch(self, topic_id: int, keyword_id: int | None = None) -> DispatchResult:
        topic = await self.topics.get_topic(topic_id)
        if not topic.enabled:
            raise TopicNotRunnableError(topic_id, "topic is disabled")
        if topic.status == "archived":
            raise TopicNotRunnableError(topic_id, "topic is archived")

        keyword = await self.keywords.get_keyword(keyword_id) if keyword_id is not None else None

        previous_status = topic.status
        topic = await self.topics.set_status(topic_id, "in_progress")
        run = await self.runs.start_run(topic)

        if not topic.search_queries:
            await self._fail(run, topic, previous_status, NO_SEARCH_QUERIES_ERROR)
            raise PipelineExecutionError(run.id, NO_SEARCH_QUERIES_ERROR)

        try:
            outcome = await self.engine.generate(topic, keyword)
        except Exception as e:
            logger.warning(
                "Generation failed",
                extra={"run_id": run.id, "topic_id": topic_id, "error": str(e)},
            )
            await self._fail(run, topic, previous_status, str(e) or e.__class__.__name__)
            raise PipelineExecutionError(run.id, str(e)) from e

        return await self._succeed(run, topic, keyword, outcome)

    async def _succeed(
        self,
        run: PipelineRunResponse,
        topic: TopicResponse,
        keyword: KeywordResponse | None,
        outcome: GenerationOutcome,
    ) -> DispatchResult:
        finished = await self.runs.finish_run(
            run.id,
            "succeeded",
            items_generated=outcome.items_generated,
            tokens_used=outcome.tokens_used,
            output_preview=outcome.output_preview,
        )
        published = await self.topics.set_status(
            topic.id, "published", standalone_url=outcome.published_url
        )
        if keyword is not None:
            keyword = await self.keywords.update_coverage(keyword.id, True)

        logger.info(
            "Topic dispatched",
            extra={
                "run_id": run.id,
                "topic_id": topic.id,
                "keyword_id": keyword.id if keyword else None,
                "items_generated": outcome.items_generated,
            },
        )
        return DispatchResult(run=finished, topic=published, keyword=keyword)

    async def _fail(
        self,
        run: PipelineRunResponse,
        topic: TopicResponse,
        previous_status: TopicStatus,
        error: str,
    ) -> None:
        """Record the failed run and put the topic back where it was.

        A failed re-run of a published topic leaves it published; its page is
        still live.
        """
        await self.runs.finish_run(run.id, "failed", error_message=error)
        await self.topics.set_status(topic.id, previous_status)
