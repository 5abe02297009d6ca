"""Domain services over the radar stores."""

from radar.services.dispatcher import ContentDispatcher, DispatchResult
from radar.services.gap_queue import GapQueue
from radar.services.keyword_ledger import KeywordLedger
from radar.services.run_tracker import PipelineRunTracker
from radar.services.topic_registry import TopicRegistry

__all__ = [
    "ContentDispatcher",
    "DispatchResult",
    "GapQueue",
    "KeywordLedger",
    "PipelineRunTracker",
    "TopicRegistry",
]
