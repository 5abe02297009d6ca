"""Unit tests for keyword ledger writes and reads."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from radar.config import settings
from radar.core.clock import utc_now
from radar.core.exceptions import KeywordNotFoundError, ValidationError
from radar.repositories import build_memory_store
from radar.schemas.keyword import KeywordFilters, KeywordIngestItem
from radar.services.gap_queue import GapQueue
from radar.services.keyword_ledger import KeywordLedger


@pytest.mark.asyncio
async def test_update_coverage_is_idempotent_apart_from_last_seen() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=7, term="kayak rental", strategic_score=0.4)
    ledger = KeywordLedger(store.keywords)

    first = await ledger.update_coverage(7, True)
    second = await ledger.update_coverage(7, True)

    assert first.page_exists is True
    assert second.page_exists is True
    assert second.last_seen > first.last_seen
    assert first.model_dump(exclude={"last_seen"}) == second.model_dump(exclude={"last_seen"})


@pytest.mark.asyncio
async def test_update_coverage_advances_last_seen_even_if_clock_is_behind() -> None:
    store = build_memory_store()
    future = utc_now() + timedelta(hours=1)
    store.keywords.insert_raw(id=1, term="ahead", last_seen=future)

    updated = await KeywordLedger(store.keywords).update_coverage(1, False)

    assert updated.last_seen > future


@pytest.mark.asyncio
async def test_update_coverage_leaves_score_and_match_alone() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(
        id=3, term="surf report", strategic_score=0.7, matched_app="surf", bucket="water"
    )

    updated = await KeywordLedger(store.keywords).update_coverage(3, True)

    assert updated.term == "surf report"
    assert updated.strategic_score == 0.7
    assert updated.matched_app == "surf"
    assert updated.bucket == "water"


@pytest.mark.asyncio
async def test_update_coverage_unknown_id_raises_and_mutates_nothing() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="only")
    before = await store.keywords.get(1)

    with pytest.raises(KeywordNotFoundError):
        await KeywordLedger(store.keywords).update_coverage(999, True)

    assert await store.keywords.get(1) == before


@pytest.mark.asyncio
async def test_coverage_update_removes_keyword_from_queue() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="x", strategic_score=0.5)
    queue = GapQueue(store.keywords)
    assert [k.id for k in await queue.next_candidates()] == [1]

    await KeywordLedger(store.keywords).update_coverage(1, True)

    assert await queue.next_candidates() == []


@pytest.mark.asyncio
async def test_ingest_inserts_then_updates_without_touching_page_exists() -> None:
    store = build_memory_store()
    ledger = KeywordLedger(store.keywords)
    first = await ledger.ingest(
        [
            KeywordIngestItem(term="tide times", strategic_score=0.3),
            KeywordIngestItem(term="wave height", strategic_score=0.2),
        ]
    )
    assert (first.inserted, first.updated) == (2, 0)

    keywords, _ = await ledger.list_keywords(KeywordFilters(search="tide"))
    await ledger.update_coverage(keywords[0].id, True)

    second = await ledger.ingest(
        [KeywordIngestItem(term="tide times", strategic_score=0.9, monthly_volume=1200)]
    )
    assert (second.inserted, second.updated) == (0, 1)

    refreshed = await store.keywords.get(keywords[0].id)
    assert refreshed is not None
    assert refreshed.strategic_score == 0.9
    assert refreshed.monthly_volume == 1200
    assert refreshed.page_exists is True
    assert refreshed.first_seen == keywords[0].first_seen


@pytest.mark.asyncio
async def test_ingest_requires_at_least_one_keyword() -> None:
    store = build_memory_store()
    with pytest.raises(ValidationError):
        await KeywordLedger(store.keywords).ingest([])


def test_ingest_item_rejects_blank_term() -> None:
    with pytest.raises(PydanticValidationError):
        KeywordIngestItem(term="   ")


@pytest.mark.asyncio
async def test_ingest_matches_terms_after_trimming() -> None:
    store = build_memory_store()
    ledger = KeywordLedger(store.keywords)

    first = await ledger.ingest([KeywordIngestItem(term="  sea kayak ")])
    second = await ledger.ingest([KeywordIngestItem(term="sea kayak", strategic_score=0.5)])

    assert (first.inserted, second.updated) == (1, 1)
    keywords, total = await ledger.list_keywords(KeywordFilters())
    assert total == 1
    assert keywords[0].term == "sea kayak"
    assert keywords[0].strategic_score == 0.5


@pytest.mark.asyncio
async def test_list_keywords_filters_sorts_and_pages() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="beach weather", bucket="weather", difficulty=20)
    store.keywords.insert_raw(id=2, term="beach parking", bucket="travel", difficulty=40)
    store.keywords.insert_raw(id=3, term="rain radar", bucket="weather", difficulty=60)
    store.keywords.insert_raw(id=4, term="storm warning", bucket="weather", matched_app="alerts")
    ledger = KeywordLedger(store.keywords)

    weather, total = await ledger.list_keywords(
        KeywordFilters(bucket="weather", covered=False, sort="difficulty", order="asc")
    )
    assert total == 2
    assert [k.id for k in weather] == [1, 3]

    page, total = await ledger.list_keywords(
        KeywordFilters(search="BEACH", sort="term", order="asc", limit=1, offset=1)
    )
    assert total == 2
    assert [k.term for k in page] == ["beach weather"]


@pytest.mark.asyncio
async def test_list_keywords_rejects_inverted_difficulty_range() -> None:
    store = build_memory_store()
    with pytest.raises(ValidationError):
        await KeywordLedger(store.keywords).list_keywords(
            KeywordFilters(difficulty_min=80, difficulty_max=10)
        )


@pytest.mark.asyncio
async def test_list_keywords_limit_follows_settings() -> None:
    store = build_memory_store()
    for keyword_id in range(1, 6):
        store.keywords.insert_raw(id=keyword_id, term=f"term {keyword_id}")
    ledger = KeywordLedger(store.keywords)
    original_default = settings.keyword_list_default_limit
    original_max = settings.keyword_list_max_limit
    settings.keyword_list_default_limit = 2
    settings.keyword_list_max_limit = 3
    try:
        filters = KeywordFilters()
        keywords, total = await ledger.list_keywords(filters)
        assert filters.limit == 2
        assert (len(keywords), total) == (2, 5)

        with pytest.raises(ValidationError):
            await ledger.list_keywords(KeywordFilters(limit=4))
        with pytest.raises(ValidationError):
            await ledger.list_keywords(KeywordFilters(limit=0))
    finally:
        settings.keyword_list_default_limit = original_default
        settings.keyword_list_max_limit = original_max


@pytest.mark.asyncio
async def test_stats_summarize_coverage() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="a", bucket="x", difficulty=10, strategic_score=0.2)
    store.keywords.insert_raw(id=2, term="b", bucket="x", difficulty=30, matched_app="app")
    store.keywords.insert_raw(id=3, term="c", bucket="y", difficulty=50, page_exists=True)
    store.keywords.insert_raw(id=4, term="d", bucket="y", difficulty=70, strategic_score=0.8)

    stats = await KeywordLedger(store.keywords).stats()

    assert stats.total == 4
    assert stats.matched == 1
    assert stats.published == 1
    assert stats.gaps == 2
    assert stats.coverage_pct == 25
    assert stats.avg_difficulty == 40
    assert [b.bucket for b in stats.buckets] == ["x", "y"]
    assert [k.id for k in stats.top_gaps] == [4, 1]


@pytest.mark.asyncio
async def test_stats_on_empty_ledger() -> None:
    store = build_memory_store()
    stats = await KeywordLedger(store.keywords).stats()

    assert stats.total == 0
    assert stats.coverage_pct == 0
    assert stats.top_gaps == []
