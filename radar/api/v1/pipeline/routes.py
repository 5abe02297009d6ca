"""Content pipeline API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from radar.api.v1.dependencies import AdminUser, Dispatcher, Registry, Tracker
from radar.api.v1.pipeline.constants import (
    KEYWORD_NOT_FOUND_DETAIL,
    PIPELINE_RUN_FAILED_DETAIL,
    TOPIC_NOT_FOUND_DETAIL,
)
from radar.core.exceptions import (
    InvalidTopicTransitionError,
    KeywordNotFoundError,
    PipelineExecutionError,
    TopicNotFoundError,
    TopicNotRunnableError,
    ValidationError,
)
from radar.schemas.pipeline import (
    DispatchRequest,
    DispatchResponse,
    PipelineRunListResponse,
)
from radar.schemas.topic import (
    TopicDeleteRequest,
    TopicDeleteResponse,
    TopicListResponse,
    TopicSave,
    TopicSaveResponse,
    TopicStatusResponse,
    TopicStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/topics", response_model=TopicListResponse, summary="List topics")
async def list_topics(registry: Registry) -> TopicListResponse:
    return TopicListResponse(topics=await registry.list_topics())


@router.post("/topics", response_model=TopicSaveResponse, summary="Create or update topic")
async def save_topic(body: TopicSave, registry: Registry) -> TopicSaveResponse:
    action, topic_id = await registry.save_topic(body)
    return TopicSaveResponse(action=action, id=topic_id)


@router.delete(
    "/topics",
    response_model=TopicDeleteResponse,
    summary="Delete topic",
    description="Deleting an id that does not exist succeeds with the same response.",
)
async def delete_topic(
    body: TopicDeleteRequest,
    registry: Registry,
    admin: AdminUser,
) -> TopicDeleteResponse:
    deleted = await registry.delete_topic(body.id)
    logger.info("Topic delete requested", extra={"topic_id": body.id, "by": admin.subject})
    return TopicDeleteResponse(deleted=deleted)


@router.patch(
    "/topics/{topic_id}/status",
    response_model=TopicStatusResponse,
    summary="Change topic status",
)
async def set_topic_status(
    topic_id: Annotated[int, Path(gt=0)],
    body: TopicStatusUpdate,
    registry: Registry,
) -> TopicStatusResponse:
    try:
        topic = await registry.set_status(topic_id, body.status, body.standalone_url)
    except TopicNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TOPIC_NOT_FOUND_DETAIL,
        ) from e
    except InvalidTopicTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return TopicStatusResponse(topic=topic)


@router.get(
    "/runs",
    response_model=PipelineRunListResponse,
    summary="List pipeline runs",
    description="Most recent runs first. Limits outside [1, RUN_LIST_MAX_LIMIT] are rejected.",
)
async def list_runs(
    tracker: Tracker,
    limit: int | None = None,
) -> PipelineRunListResponse:
    try:
        runs = await tracker.list_recent(limit)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return PipelineRunListResponse(runs=runs)


@router.post(
    "/runs",
    response_model=DispatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Run a topic",
    description=(
        "Generate content for one topic. On success the topic is published and, when a "
        "keyword id is given, that keyword is marked as covered."
    ),
)
async def dispatch_run(
    body: DispatchRequest,
    dispatcher: Dispatcher,
    admin: AdminUser,
) -> DispatchResponse:
    logger.info(
        "Pipeline run requested",
        extra={"topic_id": body.topic_id, "keyword_id": body.keyword_id, "by": admin.subject},
    )
    try:
        result = await dispatcher.dispatch(body.topic_id, body.keyword_id)
    except TopicNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TOPIC_NOT_FOUND_DETAIL,
        ) from e
    except KeywordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=KEYWORD_NOT_FOUND_DETAIL,
        ) from e
    except (TopicNotRunnableError, InvalidTopicTransitionError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except PipelineExecutionError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": PIPELINE_RUN_FAILED_DETAIL, "runId": e.run_id},
        ) from e

    return DispatchResponse(run=result.run, topic=result.topic, keyword=result.keyword)
