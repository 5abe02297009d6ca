"""Unit tests for gap queue ordering, exclusion and limit clamping."""

from __future__ import annotations

import pytest

from radar.config import settings
from radar.repositories import build_memory_store
from radar.services.gap_queue import GapQueue, clamp_limit


def test_clamp_limit_defaults_and_pins_into_range() -> None:
    assert clamp_limit(None) == 20
    assert clamp_limit(0) == 1
    assert clamp_limit(-7) == 1
    assert clamp_limit(35) == 35
    assert clamp_limit(500) == 50


def test_clamp_limit_follows_configured_bounds() -> None:
    original_default = settings.gap_queue_default_limit
    original_max = settings.gap_queue_max_limit
    settings.gap_queue_default_limit = 5
    settings.gap_queue_max_limit = 8
    try:
        assert clamp_limit(None) == 5
        assert clamp_limit(100) == 8
    finally:
        settings.gap_queue_default_limit = original_default
        settings.gap_queue_max_limit = original_max


@pytest.mark.asyncio
async def test_queue_orders_by_score_then_id() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="a", strategic_score=0.9)
    store.keywords.insert_raw(id=2, term="b", strategic_score=0.9)
    store.keywords.insert_raw(id=3, term="c", strategic_score=0.5)

    result = await GapQueue(store.keywords).next_candidates(10)

    assert [k.id for k in result] == [1, 2, 3]


@pytest.mark.asyncio
async def test_queue_excludes_matched_and_published_keywords() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="matched", strategic_score=0.99, matched_app="tides")
    store.keywords.insert_raw(id=2, term="published", strategic_score=0.98, page_exists=True)
    store.keywords.insert_raw(id=3, term="open", strategic_score=0.1)

    result = await GapQueue(store.keywords).next_candidates()

    assert [k.term for k in result] == ["open"]


@pytest.mark.asyncio
async def test_queue_clamps_large_limit_instead_of_rejecting() -> None:
    store = build_memory_store()
    for i in range(1, 61):
        store.keywords.insert_raw(id=i, term=f"kw-{i}", strategic_score=i / 100)

    queue = GapQueue(store.keywords)

    assert len(await queue.next_candidates(500)) == 50
    assert len(await queue.next_candidates()) == 20
    assert len(await queue.next_candidates(0)) == 1


@pytest.mark.asyncio
async def test_empty_queue_is_a_valid_result() -> None:
    store = build_memory_store()
    assert await GapQueue(store.keywords).next_candidates() == []
