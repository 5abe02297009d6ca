"""Explicit per-operation policy for persistence failures."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from radar.core.db_retry import is_transient_connection_error
from radar.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

_ResultT = TypeVar("_ResultT")


class StoreFailurePolicy(str, Enum):
    """What an operation does when the store fails."""

    FAIL = "fail"
    EMPTY_DEFAULT = "empty_default"


async def run_store_operation(
    operation: Callable[[], Awaitable[_ResultT]],
    *,
    operation_name: str,
    policy: StoreFailurePolicy,
    default: Callable[[], _ResultT] | None = None,
    log_context: dict[str, Any] | None = None,
) -> _ResultT:
    """Run a store call and apply the configured failure policy.

    ``FAIL`` re-raises as :class:`StoreUnavailableError`. ``EMPTY_DEFAULT``
    logs the failure and returns ``default()``. Domain errors raised by the
    operation (not found, invalid transition) always propagate untouched.
    """
    try:
        return await operation()
    except (SQLAlchemyError, OSError) as exc:
        context = {
            **(log_context or {}),
            "operation": operation_name,
            "policy": policy.value,
            "transient": is_transient_connection_error(exc),
            "error": repr(exc),
        }
        if policy is StoreFailurePolicy.EMPTY_DEFAULT and default is not None:
            logger.warning("Store read failed; returning empty result", extra=context)
            return default()
        logger.error("Store operation failed", extra=context)
        raise StoreUnavailableError(operation_name, str(exc)) from exc
