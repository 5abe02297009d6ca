"""Unit tests for radar API routes."""

from __future__ import annotations

from fastapi.testclient import TestClient

from radar.api.v1.dependencies import get_store
from radar.config import settings
from radar.core.security import create_access_token
from radar.main import create_app
from radar.repositories import RadarStore, build_memory_store


def _client(store: RadarStore) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    # No context manager: skip the lifespan so no database is initialized.
    return TestClient(app)


def _admin_headers() -> dict[str, str]:
    token = create_access_token("admin@example.com", is_admin=True)
    return {"Authorization": f"Bearer {token}"}


def _user_headers() -> dict[str, str]:
    token = create_access_token("user@example.com", is_admin=False)
    return {"Authorization": f"Bearer {token}"}


def test_queue_requires_authentication() -> None:
    response = _client(build_memory_store()).get("/api/v1/radar/queue")

    assert response.status_code == 401


def test_queue_rejects_non_admin() -> None:
    client = _client(build_memory_store())

    response = client.get("/api/v1/radar/queue", headers=_user_headers())

    assert response.status_code == 403


def test_queue_returns_camel_case_keywords_and_clamps_limit() -> None:
    store = build_memory_store()
    for i in range(1, 56):
        store.keywords.insert_raw(id=i, term=f"kw-{i}", strategic_score=i)

    response = _client(store).get("/api/v1/radar/queue?limit=500", headers=_admin_headers())

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 50
    assert payload["data"][0]["id"] == 55
    assert payload["data"][0]["strategicScore"] == 55
    assert payload["data"][0]["pageExists"] is False
    assert "matchedApp" in payload["data"][0]


def test_patch_coverage_updates_keyword() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=4, term="harbour cam")

    response = _client(store).patch(
        "/api/v1/radar/keywords/4", json={"pageExists": True}, headers=_admin_headers()
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["pageExists"] is True


def test_patch_coverage_unknown_keyword_is_404() -> None:
    response = _client(build_memory_store()).patch(
        "/api/v1/radar/keywords/999", json={"pageExists": True}, headers=_admin_headers()
    )

    assert response.status_code == 404


def test_patch_coverage_validates_id_and_body() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="x")
    client = _client(store)
    headers = _admin_headers()

    non_numeric = client.patch(
        "/api/v1/radar/keywords/abc", json={"pageExists": True}, headers=headers
    )
    not_bool = client.patch("/api/v1/radar/keywords/1", json={"pageExists": "yes"}, headers=headers)

    assert non_numeric.status_code == 422
    assert not_bool.status_code == 422


def test_list_keywords_with_filters() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="sea temperature", bucket="water", difficulty=15)
    store.keywords.insert_raw(id=2, term="sea kayaking", bucket="water", difficulty=55)
    store.keywords.insert_raw(id=3, term="pollen count", bucket="air", difficulty=35)

    response = _client(store).get(
        "/api/v1/radar/keywords",
        params={"bucket": "water", "difficultyMax": 30, "limit": 10},
        headers=_admin_headers(),
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 1
    assert payload["limit"] == 10
    assert payload["offset"] == 0
    assert [k["term"] for k in payload["data"]] == ["sea temperature"]


def test_list_keywords_limit_out_of_range_is_400() -> None:
    client = _client(build_memory_store())
    headers = _admin_headers()

    too_big = client.get("/api/v1/radar/keywords?limit=501", headers=headers)
    too_small = client.get("/api/v1/radar/keywords?limit=0", headers=headers)

    assert too_big.status_code == 400
    assert too_small.status_code == 400


def test_list_keywords_limits_come_from_settings() -> None:
    store = build_memory_store()
    for i in range(1, 6):
        store.keywords.insert_raw(id=i, term=f"kw-{i}")
    client = _client(store)
    headers = _admin_headers()
    original_default = settings.keyword_list_default_limit
    original_max = settings.keyword_list_max_limit
    settings.keyword_list_default_limit = 3
    settings.keyword_list_max_limit = 4
    try:
        default = client.get("/api/v1/radar/keywords", headers=headers)
        at_max = client.get("/api/v1/radar/keywords?limit=4", headers=headers)
        over_max = client.get("/api/v1/radar/keywords?limit=5", headers=headers)
    finally:
        settings.keyword_list_default_limit = original_default
        settings.keyword_list_max_limit = original_max

    assert default.status_code == 200
    assert default.json()["limit"] == 3
    assert len(default.json()["data"]) == 3
    assert at_max.status_code == 200
    assert len(at_max.json()["data"]) == 4
    assert over_max.status_code == 400


def test_stats_endpoint() -> None:
    store = build_memory_store()
    store.keywords.insert_raw(id=1, term="a", matched_app="app")
    store.keywords.insert_raw(id=2, term="b")

    response = _client(store).get("/api/v1/radar/stats", headers=_admin_headers())

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 2
    assert payload["coveragePct"] == 50
    assert payload["gaps"] == 1
    assert [k["term"] for k in payload["topGaps"]] == ["b"]


def test_ingest_with_cron_api_key() -> None:
    client = _client(build_memory_store())
    original_keys = settings.admin_api_keys
    settings.admin_api_keys = "radar_cron"
    try:
        response = client.post(
            "/api/v1/radar/keywords/ingest",
            json={
                "keywords": [
                    {"term": "rip currents", "strategicScore": 0.8, "monthlyVolume": 300},
                    {"term": "lifeguard hours", "matchedApp": "beach-status"},
                ]
            },
            headers={"X-API-Key": "radar_cron"},
        )
    finally:
        settings.admin_api_keys = original_keys

    assert response.status_code == 200
    assert response.json() == {"inserted": 2, "updated": 0}


def test_ingest_rejects_empty_batch() -> None:
    response = _client(build_memory_store()).post(
        "/api/v1/radar/keywords/ingest", json={"keywords": []}, headers=_admin_headers()
    )

    assert response.status_code == 422


def test_ingest_rejects_blank_term_without_writing() -> None:
    store = build_memory_store()
    client = _client(store)
    headers = _admin_headers()

    response = client.post(
        "/api/v1/radar/keywords/ingest",
        json={"keywords": [{"term": "   "}]},
        headers=headers,
    )

    assert response.status_code == 422
    assert client.get("/api/v1/radar/keywords", headers=headers).json()["total"] == 0


def test_health_needs_no_auth() -> None:
    response = _client(build_memory_store()).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
