"""Keyword radar API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from radar.api.v1.dependencies import Ledger, Queue
from radar.api.v1.radar.constants import KEYWORD_NOT_FOUND_DETAIL
from radar.core.exceptions import KeywordNotFoundError, ValidationError
from radar.schemas.keyword import (
    CoverageUpdate,
    CoverageUpdateResponse,
    GapQueueResponse,
    KeywordFilters,
    KeywordIngestRequest,
    KeywordIngestResponse,
    KeywordListResponse,
    KeywordSortField,
    KeywordStats,
    SortOrder,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def keyword_filters(
    bucket: str | None = None,
    intent: str | None = None,
    covered: bool | None = None,
    difficulty_min: Annotated[int | None, Query(alias="difficultyMin", ge=0, le=100)] = None,
    difficulty_max: Annotated[int | None, Query(alias="difficultyMax", ge=0, le=100)] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    sort: KeywordSortField = "strategic_score",
    order: SortOrder = "desc",
    limit: int | None = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> KeywordFilters:
    filters = KeywordFilters(
        bucket=bucket,
        intent=intent,
        covered=covered,
        difficulty_min=difficulty_min,
        difficulty_max=difficulty_max,
        search=search,
        sort=sort,
        order=order,
        offset=offset,
    )
    if limit is not None:
        filters = filters.model_copy(update={"limit": limit})
    return filters


@router.get(
    "/queue",
    response_model=GapQueueResponse,
    summary="Gap queue",
    description=(
        "Keywords with no matched app and no published page, highest strategic score "
        "first. The limit is clamped into [1, 50]; omitted means 20."
    ),
)
async def get_gap_queue(
    queue: Queue,
    limit: int | None = None,
) -> GapQueueResponse:
    keywords = await queue.next_candidates(limit)
    return GapQueueResponse(data=keywords, total=len(keywords))


@router.patch(
    "/keywords/{keyword_id}",
    response_model=CoverageUpdateResponse,
    summary="Update keyword coverage",
)
async def update_keyword_coverage(
    keyword_id: Annotated[int, Path(gt=0)],
    body: CoverageUpdate,
    ledger: Ledger,
) -> CoverageUpdateResponse:
    """Mark whether a page exists for a keyword."""
    try:
        keyword = await ledger.update_coverage(keyword_id, body.page_exists)
    except KeywordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=KEYWORD_NOT_FOUND_DETAIL,
        ) from e
    return CoverageUpdateResponse(data=keyword)


@router.get("/keywords", response_model=KeywordListResponse, summary="List keywords")
async def list_keywords(
    ledger: Ledger,
    filters: Annotated[KeywordFilters, Depends(keyword_filters)],
) -> KeywordListResponse:
    try:
        keywords, total = await ledger.list_keywords(filters)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return KeywordListResponse(
        data=keywords,
        total=total,
        limit=filters.limit,
        offset=filters.offset,
    )


@router.get("/stats", response_model=KeywordStats, summary="Keyword coverage stats")
async def get_keyword_stats(ledger: Ledger) -> KeywordStats:
    return await ledger.stats()


@router.post(
    "/keywords/ingest",
    response_model=KeywordIngestResponse,
    summary="Ingest keywords",
    description="Bulk upsert by term, written by the crawler and classifier jobs.",
)
async def ingest_keywords(
    body: KeywordIngestRequest,
    ledger: Ledger,
) -> KeywordIngestResponse:
    try:
        result = await ledger.ingest(body.keywords)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    logger.info(
        "Keyword ingest completed",
        extra={"inserted": result.inserted, "updated": result.updated},
    )
    return result
