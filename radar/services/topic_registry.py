"""Topic registry: configuration and lifecycle of generation topics."""

from __future__ import annotations

import logging
from typing import Literal

from radar.config import settings
from radar.core.exceptions import InvalidTopicTransitionError, TopicNotFoundError
from radar.core.store_failures import run_store_operation
from radar.models.topic import TopicStatus
from radar.repositories.base import TopicStore
from radar.schemas.topic import TopicResponse, TopicSave

logger = logging.getLogger(__name__)

TOPIC_TRANSITIONS: dict[str, frozenset[str]] = {
    "planned": frozenset({"in_progress", "archived"}),
    "in_progress": frozenset({"published", "planned", "archived"}),
    "published": frozenset({"in_progress", "archived"}),
    "archived": frozenset({"planned"}),
}


def can_transition(current: str, target: str) -> bool:
    return current == target or target in TOPIC_TRANSITIONS.get(current, frozenset())


class TopicRegistry:
    def __init__(self, store: TopicStore) -> None:
        self.store = store

    async def list_topics(self) -> list[TopicResponse]:
        """All topics by id. Malformed ``search_queries`` read back as ``[]``."""
        return await run_store_operation(
            self.store.list_all,
            operation_name="list_topics",
            policy=settings.get_store_failure_policy("list_topics"),
            default=list,
        )

    async def get_topic(self, topic_id: int) -> TopicResponse:
        topic = await run_store_operation(
            lambda: self.store.get(topic_id),
            operation_name="get_topic",
            policy=settings.get_store_failure_policy("get_topic"),
            log_context={"topic_id": topic_id},
        )
        if topic is None:
            raise TopicNotFoundError(topic_id)
        return topic

    async def delete_topic(self, topic_id: int) -> int:
        """Delete a topic. Deleting a missing id succeeds the same way."""
        existed = await run_store_operation(
            lambda: self.store.delete(topic_id),
            operation_name="delete_topic",
            policy=settings.get_store_failure_policy("delete_topic"),
            log_context={"topic_id": topic_id},
        )
        logger.info("Topic deleted", extra={"topic_id": topic_id, "existed": existed})
        return topic_id

    async def save_topic(self, payload: TopicSave) -> tuple[Literal["created", "updated"], int]:
        topic_id, created = await run_store_operation(
            lambda: self.store.upsert(payload),
            operation_name="save_topic",
            policy=settings.get_store_failure_policy("save_topic"),
            log_context={"category_slug": payload.category_slug, "topic_key": payload.topic_key},
        )
        action: Literal["created", "updated"] = "created" if created else "updated"
        logger.info("Topic saved", extra={"topic_id": topic_id, "action": action})
        return action, topic_id

    async def set_status(
        self,
        topic_id: int,
        status: TopicStatus,
        standalone_url: str | None = None,
    ) -> TopicResponse:
        """Move a topic through its lifecycle.

        The write is conditional on the status read here; a concurrent change
        in between surfaces as an invalid transition rather than being
        overwritten.
        """
        topic = await self.get_topic(topic_id)
        if not can_transition(topic.status, status):
            raise InvalidTopicTransitionError(topic_id, topic.status, status)
        if topic.status == status and standalone_url is None:
            return topic

        updated = await run_store_operation(
            lambda: self.store.update_status(
                topic_id,
                expected=topic.status,
                status=status,
                standalone_url=standalone_url,
            ),
            operation_name="set_topic_status",
            policy=settings.get_store_failure_policy("set_topic_status"),
            log_context={"topic_id": topic_id, "status": status},
        )
        if updated is None:
            current = await self.store.get(topic_id)
            if current is None:
                raise TopicNotFoundError(topic_id)
            raise InvalidTopicTransitionError(topic_id, current.status, status)

        logger.info(
            "Topic status changed",
            extra={"topic_id": topic_id, "from": topic.status, "to": status},
        )
        return updated
