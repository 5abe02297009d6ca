"""SQL-backed topic registry."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from radar.core.clock import utc_now
from radar.core.database import get_session_context
from radar.models.topic import ContentTopic, TopicStatus
from radar.schemas.topic import TopicResponse, TopicSave

_CONFIG_FIELDS = (
    "category_label",
    "topic_label",
    "content_type",
    "max_spots",
    "search_queries",
    "body_system_prompt",
    "faq_system_prompt",
    "enabled",
)


class TopicRepository:
    """Topic configuration reads and writes, one short-lived session per call."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_maker = session_maker

    def _session(self, *, commit_on_exit: bool = True):
        return get_session_context(commit_on_exit=commit_on_exit, session_maker=self._session_maker)

    async def list_all(self) -> list[TopicResponse]:
        async with self._session(commit_on_exit=False) as session:
            result = await session.execute(select(ContentTopic).order_by(ContentTopic.id.asc()))
            return [TopicResponse.model_validate(row) for row in result.scalars().all()]

    async def get(self, topic_id: int) -> TopicResponse | None:
        async with self._session(commit_on_exit=False) as session:
            topic = await session.get(ContentTopic, topic_id)
            return TopicResponse.model_validate(topic) if topic else None

    async def delete(self, topic_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(delete(ContentTopic).where(ContentTopic.id == topic_id))
            return bool(result.rowcount)

    async def upsert(self, payload: TopicSave) -> tuple[int, bool]:
        async with self._session() as session:
            result = await session.execute(
                select(ContentTopic).where(
                    ContentTopic.category_slug == payload.category_slug,
                    ContentTopic.topic_key == payload.topic_key,
                )
            )
            topic = result.scalar_one_or_none()
            values = {field: getattr(payload, field) for field in _CONFIG_FIELDS}

            if topic is None:
                topic = ContentTopic(
                    category_slug=payload.category_slug,
                    topic_key=payload.topic_key,
                    description=payload.description,
                    standalone_url=payload.standalone_url,
                    **values,
                )
                session.add(topic)
                await session.flush()
                return topic.id, True

            for field, value in values.items():
                setattr(topic, field, value)
            if payload.description is not None:
                topic.description = payload.description
            if payload.standalone_url is not None:
                topic.standalone_url = payload.standalone_url
            topic.updated_at = utc_now()
            await session.flush()
            return topic.id, False

    async def update_status(
        self,
        topic_id: int,
        *,
        expected: TopicStatus,
        status: TopicStatus,
        standalone_url: str | None = None,
    ) -> TopicResponse | None:
        async with self._session() as session:
            topic = await session.get(ContentTopic, topic_id, with_for_update=True)
            if topic is None or topic.status != expected:
                return None
            topic.status = status
            if standalone_url is not None:
                topic.standalone_url = standalone_url
            topic.updated_at = utc_now()
            await session.flush()
            return TopicResponse.model_validate(topic)
