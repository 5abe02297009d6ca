"""Custom exception classes for the application."""

from typing import Any


class RadarError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(RadarError):
    """Authentication failed."""

    pass


class InvalidTokenError(AuthenticationError):
    """Invalid or expired token."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


# Validation Errors
class ValidationError(RadarError):
    """Data validation failed."""

    pass


# Data Errors
class KeywordNotFoundError(RadarError):
    """Keyword not found."""

    def __init__(self, keyword_id: int) -> None:
        self.keyword_id = keyword_id
        super().__init__(f"Keyword not found: {keyword_id}")


class TopicNotFoundError(RadarError):
    """Topic not found."""

    def __init__(self, topic_id: int) -> None:
        self.topic_id = topic_id
        super().__init__(f"Topic not found: {topic_id}")


class InvalidTopicTransitionError(RadarError):
    """Topic status change is not an allowed lifecycle transition."""

    def __init__(self, topic_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Topic {topic_id} cannot move from {current} to {target}",
            {"topic_id": topic_id, "current": current, "target": target},
        )


class TopicNotRunnableError(RadarError):
    """Topic is disabled or archived and cannot be dispatched."""

    def __init__(self, topic_id: int, reason: str) -> None:
        super().__init__(f"Topic {topic_id} cannot be run: {reason}", {"topic_id": topic_id})


# Pipeline Errors
class PipelineError(RadarError):
    """Base class for pipeline errors."""

    pass


class PipelineRunNotFoundError(PipelineError):
    """Pipeline run not found."""

    def __init__(self, run_id: int) -> None:
        self.run_id = run_id
        super().__init__(f"Pipeline run not found: {run_id}")


class InvalidRunTransitionError(PipelineError):
    """Pipeline run already reached a terminal status."""

    def __init__(self, run_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Pipeline run {run_id} is already {current}; cannot set {target}",
            {"run_id": run_id, "current": current, "target": target},
        )


class PipelineExecutionError(PipelineError):
    """Generation failed for a dispatched run."""

    def __init__(self, run_id: int, message: str) -> None:
        self.run_id = run_id
        super().__init__(f"Pipeline run {run_id} failed: {message}", {"run_id": run_id})


# Store Errors
class StoreUnavailableError(RadarError):
    """Underlying persistence failed for a fail-loud operation."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Store operation {operation} failed: {message}")


# External API Errors
class ExternalAPIError(RadarError):
    """Error calling external API."""

    def __init__(self, api_name: str, message: str) -> None:
        super().__init__(f"{api_name} API error: {message}")


class GenerationEngineError(ExternalAPIError):
    """Generation engine call failed or returned an unusable payload."""

    def __init__(self, message: str) -> None:
        super().__init__("Generation engine", message)


class GenerationEngineNotConfiguredError(ExternalAPIError):
    """No generation engine URL is configured."""

    def __init__(self) -> None:
        super().__init__("Generation engine", "Engine URL not configured")
