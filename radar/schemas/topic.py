"""Topic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from radar.models.base import decode_search_queries
from radar.models.topic import TopicStatus
from radar.schemas.base import RadarSchema


class TopicResponse(RadarSchema):
    """Schema for topic response; ``search_queries`` is always a list."""

    id: int
    category_slug: str
    category_label: str
    topic_key: str
    topic_label: str
    content_type: str
    max_spots: int
    search_queries: list[str] = Field(default_factory=list)
    body_system_prompt: str | None = None
    faq_system_prompt: str | None = None
    enabled: bool = True
    description: str = ""
    # Read side accepts any stored value; writes go through TopicStatusUpdate.
    status: str = "planned"
    standalone_url: str = ""
    created_at: datetime
    updated_at: datetime

    @field_validator("search_queries", mode="before")
    @classmethod
    def _decode_queries(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return decode_search_queries(value)
        return value

    @field_validator("description", "standalone_url", mode="before")
    @classmethod
    def _empty_when_missing(cls, value: object) -> object:
        return "" if value is None else value


class TopicListResponse(RadarSchema):
    topics: list[TopicResponse]


class TopicSave(RadarSchema):
    """Create or update a topic keyed by category slug and topic key."""

    category_slug: str = Field(min_length=1, max_length=100)
    category_label: str = Field(min_length=1, max_length=200)
    topic_key: str = Field(min_length=1, max_length=100)
    topic_label: str = Field(min_length=1, max_length=300)
    content_type: str = Field(min_length=1, max_length=50)
    max_spots: int = Field(default=10, ge=1, le=50)
    search_queries: list[str] = Field(default_factory=list)
    body_system_prompt: str | None = None
    faq_system_prompt: str | None = None
    enabled: bool = True
    description: str | None = None
    standalone_url: str | None = None


class TopicSaveResponse(RadarSchema):
    ok: bool = True
    action: Literal["created", "updated"]
    id: int


class TopicDeleteRequest(RadarSchema):
    id: int = Field(gt=0, strict=True)


class TopicDeleteResponse(RadarSchema):
    ok: bool = True
    deleted: int


class TopicStatusUpdate(RadarSchema):
    status: TopicStatus
    standalone_url: str | None = None


class TopicStatusResponse(RadarSchema):
    ok: bool = True
    topic: TopicResponse
