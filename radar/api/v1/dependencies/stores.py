"""Store, service and engine providers for route handlers."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from radar.config import settings
from radar.core.exceptions import GenerationEngineNotConfiguredError
from radar.integrations.generation_engine import GenerationEngine, HTTPGenerationEngine
from radar.repositories import RadarStore, build_memory_store, build_sql_store
from radar.services import (
    ContentDispatcher,
    GapQueue,
    KeywordLedger,
    PipelineRunTracker,
    TopicRegistry,
)

ENGINE_NOT_CONFIGURED_DETAIL = "Generation engine is not configured"


@lru_cache
def _shared_memory_store() -> RadarStore:
    return build_memory_store()


def get_store() -> RadarStore:
    """The configured store backend; overridden in tests."""
    if settings.store_backend == "memory":
        return _shared_memory_store()
    return build_sql_store()


Store = Annotated[RadarStore, Depends(get_store)]


async def get_generation_engine() -> AsyncGenerator[GenerationEngine, None]:
    try:
        engine = HTTPGenerationEngine()
    except GenerationEngineNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ENGINE_NOT_CONFIGURED_DETAIL,
        ) from e
    async with engine:
        yield engine


def get_keyword_ledger(store: Store) -> KeywordLedger:
    return KeywordLedger(store.keywords)


def get_gap_queue(store: Store) -> GapQueue:
    return GapQueue(store.keywords)


def get_topic_registry(store: Store) -> TopicRegistry:
    return TopicRegistry(store.topics)


def get_run_tracker(store: Store) -> PipelineRunTracker:
    return PipelineRunTracker(store.runs)


def get_dispatcher(
    store: Store,
    engine: Annotated[GenerationEngine, Depends(get_generation_engine)],
) -> ContentDispatcher:
    return ContentDispatcher(store, engine)


Ledger = Annotated[KeywordLedger, Depends(get_keyword_ledger)]
Queue = Annotated[GapQueue, Depends(get_gap_queue)]
Registry = Annotated[TopicRegistry, Depends(get_topic_registry)]
Tracker = Annotated[PipelineRunTracker, Depends(get_run_tracker)]
Dispatcher = Annotated[ContentDispatcher, Depends(get_dispatcher)]
