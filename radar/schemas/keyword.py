"""Keyword schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field, StrictBool, field_validator

from radar.config import settings
from radar.schemas.base import RadarSchema

KeywordSortField = Literal["strategic_score", "difficulty", "monthly_volume", "term", "last_seen"]
SortOrder = Literal["asc", "desc"]


class KeywordResponse(RadarSchema):
    """Schema for keyword response."""

    id: int
    term: str
    bucket: str
    intent: str
    monthly_volume: int
    difficulty: int
    strategic_score: float
    matched_app: str | None
    matched_url: str | None
    page_exists: bool
    first_seen: datetime
    last_seen: datetime


class GapQueueResponse(RadarSchema):
    """Uncovered keywords, highest strategic score first."""

    data: list[KeywordResponse]
    total: int


class CoverageUpdate(RadarSchema):
    """Body for the coverage patch."""

    page_exists: StrictBool


class CoverageUpdateResponse(RadarSchema):
    success: bool = True
    data: KeywordResponse


class KeywordFilters(RadarSchema):
    """Filters for the keyword listing."""

    bucket: str | None = None
    intent: str | None = None
    covered: bool | None = None
    difficulty_min: int | None = None
    difficulty_max: int | None = None
    search: str | None = None
    sort: KeywordSortField = "strategic_score"
    order: SortOrder = "desc"
    limit: int = Field(default_factory=lambda: settings.keyword_list_default_limit)
    offset: int = Field(default=0, ge=0)


class KeywordListResponse(RadarSchema):
    data: list[KeywordResponse]
    total: int
    limit: int
    offset: int


class KeywordIngestItem(RadarSchema):
    """One keyword as written by the crawler/classifier."""

    term: str = Field(min_length=1, max_length=500)
    bucket: str = ""
    intent: str = "informational"
    monthly_volume: int = Field(default=0, ge=0)
    difficulty: int = Field(default=50, ge=0, le=100)
    strategic_score: float = 0.0
    matched_app: str | None = None
    matched_url: str | None = None

    @field_validator("term", mode="before")
    @classmethod
    def _strip_term(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class KeywordIngestRequest(RadarSchema):
    keywords: list[KeywordIngestItem] = Field(min_length=1)


class KeywordIngestResponse(RadarSchema):
    inserted: int
    updated: int


class BucketStat(RadarSchema):
    bucket: str
    count: int
    avg_score: float


class IntentStat(RadarSchema):
    intent: str
    count: int


class KeywordStats(RadarSchema):
    """Dashboard KPIs over the keyword ledger."""

    total: int = 0
    matched: int = 0
    published: int = 0
    gaps: int = 0
    coverage_pct: int = 0
    avg_difficulty: int = 0
    buckets: list[BucketStat] = Field(default_factory=list)
    intents: list[IntentStat] = Field(default_factory=list)
    top_gaps: list[KeywordResponse] = Field(default_factory=list)
