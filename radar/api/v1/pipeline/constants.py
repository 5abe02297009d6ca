"""Constants for pipeline routes."""

TOPIC_NOT_FOUND_DETAIL = "Topic not found"
KEYWORD_NOT_FOUND_DETAIL = "Keyword not found"
PIPELINE_RUN_FAILED_DETAIL = "Content generation failed"
