"""Base model, mixins and column types for SQLAlchemy models."""

import json
import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import Text, TypeDecorator

from radar.core.clock import utc_now

logger = logging.getLogger(__name__)


def encode_search_queries(queries: Iterable[str] | None) -> str:
    """Serialize an ordered list of search phrases for storage."""
    return json.dumps([str(query) for query in (queries or [])], ensure_ascii=False)


def decode_search_queries(raw: str | None) -> list[str]:
    """Decode a stored search-query blob, yielding ``[]`` for anything malformed."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Malformed search_queries blob", extra={"raw": raw[:200]})
        return []
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        logger.warning("Unexpected search_queries shape", extra={"raw": raw[:200]})
        return []
    return parsed


class SearchQueryList(TypeDecorator):
    """Ordered list of strings stored as a JSON text blob."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encode_search_queries(value)

    def process_result_value(self, value, dialect):
        return decode_search_queries(value)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
