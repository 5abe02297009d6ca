"""Store interfaces and their SQL and in-memory implementations."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from radar.repositories.base import KeywordStore, PipelineRunStore, RadarStore, TopicStore
from radar.repositories.keyword_repository import KeywordRepository
from radar.repositories.memory import build_memory_store
from radar.repositories.pipeline_run_repository import PipelineRunRepository
from radar.repositories.topic_repository import TopicRepository


def build_sql_store(session_maker: async_sessionmaker[AsyncSession] | None = None) -> RadarStore:
    """SQL stores sharing one session factory (the app's by default)."""
    return RadarStore(
        keywords=KeywordRepository(session_maker),
        topics=TopicRepository(session_maker),
        runs=PipelineRunRepository(session_maker),
    )


__all__ = [
    "KeywordRepository",
    "KeywordStore",
    "PipelineRunRepository",
    "PipelineRunStore",
    "RadarStore",
    "TopicRepository",
    "TopicStore",
    "build_memory_store",
    "build_sql_store",
]
