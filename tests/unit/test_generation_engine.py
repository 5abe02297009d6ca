"""Unit tests for the HTTP generation engine client."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from radar.config import settings
from radar.core.exceptions import GenerationEngineError, GenerationEngineNotConfiguredError
from radar.integrations.generation_engine import (
    OUTPUT_PREVIEW_MAX_CHARS,
    HTTPGenerationEngine,
    parse_generation_outcome,
)
from radar.schemas.topic import TopicResponse


def _topic() -> TopicResponse:
    now = datetime(2026, 4, 1, tzinfo=timezone.utc)
    return TopicResponse(
        id=9,
        category_slug="beaches",
        category_label="Beaches",
        topic_key="quiet",
        topic_label="Quiet beaches",
        content_type="listicle",
        max_spots=10,
        search_queries=["quiet beach"],
        created_at=now,
        updated_at=now,
    )


@pytest.mark.asyncio
async def test_generate_posts_topic_and_parses_outcome() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "itemsGenerated": 7,
                "tokensUsed": 3100,
                "outputPreview": "x" * 2000,
                "publishedUrl": "https://example.com/quiet-beaches",
            },
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        engine = HTTPGenerationEngine(
            base_url="https://engine.test/", api_key="secret", client=client
        )
        async with engine:
            outcome = await engine.generate(_topic())

    assert seen["url"] == "https://engine.test/generate"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"]["searchQueries"] == ["quiet beach"]
    assert seen["body"]["topicKey"] == "quiet"
    assert outcome.items_generated == 7
    assert outcome.tokens_used == 3100
    assert len(outcome.output_preview or "") == OUTPUT_PREVIEW_MAX_CHARS
    assert outcome.published_url == "https://example.com/quiet-beaches"


@pytest.mark.asyncio
async def test_generate_maps_error_status_to_engine_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))

    async with httpx.AsyncClient(transport=transport) as client:
        engine = HTTPGenerationEngine(base_url="https://engine.test", client=client)
        with pytest.raises(GenerationEngineError, match="HTTP 500"):
            await engine.generate(_topic())


@pytest.mark.asyncio
async def test_generate_rejects_non_json_body() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

    async with httpx.AsyncClient(transport=transport) as client:
        engine = HTTPGenerationEngine(base_url="https://engine.test", client=client)
        with pytest.raises(GenerationEngineError):
            await engine.generate(_topic())


def test_engine_requires_a_url() -> None:
    original_url = settings.generation_engine_url
    settings.generation_engine_url = None
    try:
        with pytest.raises(GenerationEngineNotConfiguredError):
            HTTPGenerationEngine()
    finally:
        settings.generation_engine_url = original_url


def test_parse_outcome_tolerates_missing_fields() -> None:
    outcome = parse_generation_outcome({})

    assert outcome.items_generated == 0
    assert outcome.published_url is None

    with pytest.raises(GenerationEngineError):
        parse_generation_outcome(["not", "an", "object"])
