"""Keyword ledger model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from radar.core.clock import utc_now
from radar.models.base import Base


class Keyword(Base):
    """A candidate search phrase with its externally supplied score and coverage."""

    __tablename__ = "keywords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    term: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    bucket: Mapped[str] = mapped_column(String(100), default="", nullable=False, index=True)
    intent: Mapped[str] = mapped_column(String(30), default="informational", nullable=False)

    # Metrics (crawler-owned)
    monthly_volume: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    difficulty: Mapped[int] = mapped_column(Integer, default=50, nullable=False)
    strategic_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, index=True)

    # Coverage (classifier-owned match, ledger-owned page flag)
    matched_app: Mapped[str | None] = mapped_column(String(200), nullable=True)
    matched_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    page_exists: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    first_seen: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    last_seen: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Keyword {self.term}>"
