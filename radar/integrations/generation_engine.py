"""Content generation engine client.

The engine researches a topic's search queries and writes the content. The
radar only sends it a topic and records what comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from radar.config import settings
from radar.core.exceptions import GenerationEngineError, GenerationEngineNotConfiguredError
from radar.schemas.keyword import KeywordResponse
from radar.schemas.topic import TopicResponse

logger = logging.getLogger(__name__)

OUTPUT_PREVIEW_MAX_CHARS = 500


@dataclass
class GenerationOutcome:
    """What one generation call produced."""

    items_generated: int = 0
    tokens_used: int = 0
    output_preview: str | None = None
    published_url: str | None = None


class GenerationEngine(Protocol):
    async def generate(
        self, topic: TopicResponse, keyword: KeywordResponse | None = None
    ) -> GenerationOutcome: ...


def build_generation_payload(
    topic: TopicResponse, keyword: KeywordResponse | None = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "topicId": topic.id,
        "categorySlug": topic.category_slug,
        "categoryLabel": topic.category_label,
        "topicKey": topic.topic_key,
        "topicLabel": topic.topic_label,
        "contentType": topic.content_type,
        "maxSpots": topic.max_spots,
        "searchQueries": list(topic.search_queries),
        "bodySystemPrompt": topic.body_system_prompt,
        "faqSystemPrompt": topic.faq_system_prompt,
    }
    if keyword is not None:
        payload["keyword"] = {"id": keyword.id, "term": keyword.term, "intent": keyword.intent}
    return payload


def parse_generation_outcome(data: Any) -> GenerationOutcome:
    if not isinstance(data, dict):
        raise GenerationEngineError("Response body is not a JSON object")
    try:
        items = int(data.get("itemsGenerated", 0) or 0)
        tokens = int(data.get("tokensUsed", 0) or 0)
    except (TypeError, ValueError) as e:
        raise GenerationEngineError(f"Malformed counters: {e}") from e

    preview = data.get("outputPreview")
    if preview is not None:
        preview = str(preview)[:OUTPUT_PREVIEW_MAX_CHARS]
    published_url = data.get("publishedUrl") or None

    return GenerationOutcome(
        items_generated=max(items, 0),
        tokens_used=max(tokens, 0),
        output_preview=preview,
        published_url=str(published_url) if published_url else None,
    )


class HTTPGenerationEngine:
    """Generation engine reached over HTTP.

    Use as an async context manager, or pass an ``httpx.AsyncClient`` to
    share a connection pool (and to inject a mock transport in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.generation_engine_url or "").rstrip("/")
        self.api_key = api_key or settings.generation_engine_api_key
        self.timeout = timeout or settings.generation_engine_timeout
        self._client = client
        self._owns_client = client is None

        if not self.base_url:
            raise GenerationEngineNotConfiguredError()

    async def __aenter__(self) -> "HTTPGenerationEngine":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=self._headers())
            self._owns_client = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client must be used as async context manager")
        return self._client

    async def generate(
        self, topic: TopicResponse, keyword: KeywordResponse | None = None
    ) -> GenerationOutcome:
        url = f"{self.base_url}/generate"
        logger.info(
            "Generation engine request",
            extra={"topic_id": topic.id, "queries": len(topic.search_queries)},
        )
        try:
            response = await self.client.post(
                url,
                json=build_generation_payload(topic, keyword),
                headers=self._headers(),
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Generation engine returned an error status",
                extra={"topic_id": topic.id, "status_code": e.response.status_code},
            )
            raise GenerationEngineError(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning(
                "Generation engine HTTP error",
                extra={"topic_id": topic.id, "error": str(e)},
            )
            raise GenerationEngineError(str(e)) from e
        except ValueError as e:
            raise GenerationEngineError("Response body is not valid JSON") from e

        return parse_generation_outcome(data)
