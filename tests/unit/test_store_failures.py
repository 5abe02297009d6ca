"""Unit tests for per-operation store failure policies."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from radar.api.v1.dependencies import get_store
from radar.config import settings
from radar.core import store_failures
from radar.core.exceptions import KeywordNotFoundError, StoreUnavailableError
from radar.core.security import create_access_token
from radar.core.store_failures import StoreFailurePolicy, run_store_operation
from radar.main import create_app
from radar.repositories import build_memory_store


class _FakeLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def warning(self, message: str, *, extra: dict[str, Any] | None = None) -> None:
        self.records.append(("warning", message, extra or {}))

    def error(self, message: str, *, extra: dict[str, Any] | None = None) -> None:
        self.records.append(("error", message, extra or {}))


def _db_down() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_empty_default_policy_returns_default_and_logs(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    fake_logger = _FakeLogger()
    monkeypatch.setattr(store_failures, "logger", fake_logger)

    async def failing() -> list[int]:
        raise _db_down()

    result = await run_store_operation(
        failing,
        operation_name="gap_queue",
        policy=StoreFailurePolicy.EMPTY_DEFAULT,
        default=list,
    )

    assert result == []
    level, _, extra = fake_logger.records[0]
    assert level == "warning"
    assert extra["operation"] == "gap_queue"
    assert extra["transient"] is True


@pytest.mark.asyncio
async def test_fail_policy_raises_store_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_logger = _FakeLogger()
    monkeypatch.setattr(store_failures, "logger", fake_logger)

    async def failing() -> None:
        raise _db_down()

    with pytest.raises(StoreUnavailableError) as exc_info:
        await run_store_operation(
            failing,
            operation_name="update_coverage",
            policy=StoreFailurePolicy.FAIL,
            default=lambda: None,
        )

    assert exc_info.value.operation == "update_coverage"
    assert fake_logger.records[0][0] == "error"


@pytest.mark.asyncio
async def test_domain_errors_pass_through_untouched() -> None:
    async def missing() -> None:
        raise KeywordNotFoundError(3)

    with pytest.raises(KeywordNotFoundError):
        await run_store_operation(
            missing,
            operation_name="gap_queue",
            policy=StoreFailurePolicy.EMPTY_DEFAULT,
            default=list,
        )


def test_policy_lookup_uses_configured_overrides() -> None:
    original = settings.store_failure_policies
    settings.store_failure_policies = {"gap_queue": StoreFailurePolicy.FAIL}
    try:
        assert settings.get_store_failure_policy("gap_queue") is StoreFailurePolicy.FAIL
        assert (
            settings.get_store_failure_policy("list_runs")
            is StoreFailurePolicy.EMPTY_DEFAULT
        )
        assert settings.get_store_failure_policy("unknown_op") is StoreFailurePolicy.FAIL
    finally:
        settings.store_failure_policies = original


def test_reads_fail_soft_and_writes_fail_loud_over_http(monkeypatch: pytest.MonkeyPatch) -> None:
    store = build_memory_store()
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    client = TestClient(app)
    token = create_access_token("admin@example.com", is_admin=True)
    admin_headers = {"Authorization": f"Bearer {token}"}

    async def broken(*args: Any, **kwargs: Any) -> Any:
        raise _db_down()

    monkeypatch.setattr(store_failures, "logger", _FakeLogger())
    monkeypatch.setattr(store.keywords, "list_gaps", broken)
    monkeypatch.setattr(store.keywords, "update_coverage", broken)
    monkeypatch.setattr(store.runs, "list_recent", broken)

    queue = client.get("/api/v1/radar/queue", headers=admin_headers)
    runs = client.get("/api/v1/pipeline/runs", headers=admin_headers)
    patch = client.patch(
        "/api/v1/radar/keywords/1", json={"pageExists": True}, headers=admin_headers
    )

    assert queue.status_code == 200
    assert queue.json() == {"data": [], "total": 0}
    assert runs.status_code == 200
    assert runs.json() == {"runs": []}
    assert patch.status_code == 503
