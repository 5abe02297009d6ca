"""Pipeline run schemas."""

from datetime import datetime

from pydantic import Field

from radar.models.pipeline import RunStatus
from radar.schemas.base import RadarSchema
from radar.schemas.keyword import KeywordResponse
from radar.schemas.topic import TopicResponse


class PipelineRunResponse(RadarSchema):
    """Schema for pipeline run response."""

    id: int
    topic_id: int
    category_slug: str
    topic_key: str | None
    status: RunStatus
    started_at: datetime
    completed_at: datetime | None
    items_generated: int = 0
    tokens_used: int = 0
    output_preview: str | None = None
    error_message: str | None = None


class PipelineRunListResponse(RadarSchema):
    runs: list[PipelineRunResponse]


class DispatchRequest(RadarSchema):
    """Run one topic through the generation engine."""

    topic_id: int = Field(gt=0)
    keyword_id: int | None = Field(default=None, gt=0)


class DispatchResponse(RadarSchema):
    ok: bool = True
    run: PipelineRunResponse
    topic: TopicResponse
    keyword: KeywordResponse | None = None
