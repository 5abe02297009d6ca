"""Content pipeline topic configuration model."""

from __future__ import annotations

from typing import Literal

from sqlalchemy import Boolean, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from radar.models.base import Base, SearchQueryList, TimestampMixin

TopicStatus = Literal["planned", "in_progress", "published", "archived"]


class ContentTopic(Base, TimestampMixin):
    """What should be generated for a cluster of search queries."""

    __tablename__ = "content_pipeline_topics"
    __table_args__ = (
        UniqueConstraint("category_slug", "topic_key", name="uq_content_topic_category_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_slug: Mapped[str] = mapped_column(String(100), nullable=False)
    category_label: Mapped[str] = mapped_column(String(200), nullable=False)
    topic_key: Mapped[str] = mapped_column(String(100), nullable=False)
    topic_label: Mapped[str] = mapped_column(String(300), nullable=False)
    content_type: Mapped[str] = mapped_column(String(50), nullable=False)
    max_spots: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    search_queries: Mapped[list[str]] = mapped_column(SearchQueryList(), default=lambda: [], nullable=False)

    # Prompt overrides for the generation engine
    body_system_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    faq_system_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="planned", nullable=False)
    standalone_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return f"<ContentTopic {self.category_slug}/{self.topic_key} ({self.status})>"
