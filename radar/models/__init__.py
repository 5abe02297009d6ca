"""SQLAlchemy database models."""
from radar.models.base import Base
from radar.models.keyword import Keyword
from radar.models.pipeline import PipelineRun
from radar.models.topic import ContentTopic

__all__ = [
    "Base",
    "Keyword",
    "ContentTopic",
    "PipelineRun",
]
