"""Tests for the access-key, cache and health endpoints."""

from unittest.mock import patch

from starlette.testclient import TestClient

from travel_gate import CacheRegistry, GateSettings, __version__
from travel_gate import key_builder as keys

from .conftest import ACCESS_KEY


class TestVerifyAccess:
    def test_correct_key_sets_cookie(
        self, client: TestClient, settings: GateSettings
    ) -> None:
        response = client.post(
            "/api/admin/verify-access", json={"accessKey": ACCESS_KEY}
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.access_cookie}={ACCESS_KEY}")
        assert f"Max-Age={settings.access_cookie_max_age}" in set_cookie
        assert "HttpOnly" in set_cookie

    def test_cookie_opens_the_secret_stage(self, client: TestClient) -> None:
        assert client.get("/admin/login").status_code == 307

        client.post("/api/admin/verify-access", json={"accessKey": ACCESS_KEY})

        assert client.get("/admin/login").status_code == 200

    def test_wrong_key(self, client: TestClient) -> None:
        response = client.post("/api/admin/verify-access", json={"accessKey": "nope"})

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert "set-cookie" not in response.headers

    def test_missing_key(self, client: TestClient) -> None:
        response = client.post("/api/admin/verify-access", json={})

        assert response.status_code == 401


class TestCacheEndpoints:
    def test_status(self, client: TestClient, registry: CacheRegistry) -> None:
        registry.store(keys.FLIGHTS).set(keys.flights_key(), [])
        registry.store(keys.FLIGHTS).set(keys.flights_key(2), [])

        response = client.get("/api/cache/clear")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "cacheSize": 2,
            "namespaces": {keys.FLIGHTS: 2},
        }

    def test_clear(self, client: TestClient, registry: CacheRegistry) -> None:
        registry.store(keys.FLIGHTS).set(keys.flights_key(), [])
        registry.store(keys.FLIGHT_STATS).set(keys.flight_stats_key(), {})

        response = client.post("/api/cache/clear")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert "timestamp" in response.json()
        assert registry.size() == 0


class TestHealth:
    def test_healthy(self, client: TestClient, registry: CacheRegistry) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["cache"]["status"] == "pass"
        assert "responseTime" in body["checks"]["cache"]
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert registry.size() == 0

    def test_leaves_registry_untouched(
        self, client: TestClient, registry: CacheRegistry
    ) -> None:
        client.get("/api/health")

        assert registry.namespaces == []
        assert client.get("/api/cache/clear").json()["namespaces"] == {}

    def test_reports_package_version(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.json()["version"] == __version__

    def test_unhealthy_when_cache_read_fails(self, client: TestClient) -> None:
        with patch("travel_gate.storages.InMemoryStore.get", return_value=None):
            response = client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["checks"]["cache"]["status"] == "fail"
