"""Pipeline run tracking model."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from radar.core.clock import utc_now
from radar.models.base import Base

RunStatus = Literal["started", "succeeded", "failed"]


class PipelineRun(Base):
    """One attempt to turn a topic into published content."""

    __tablename__ = "content_pipeline_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # No foreign key: runs outlive deleted topics.
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    category_slug: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    topic_key: Mapped[str | None] = mapped_column(String(100), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default="started", nullable=False)

    # Timing
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Outcome metadata
    items_generated: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tokens_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    output_preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<PipelineRun {self.id} ({self.status})>"
