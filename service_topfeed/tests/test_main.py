"""
Unit tests for the Top-Feed service routes.
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from feed_shared.config import get_config
from feed_shared.errors import ExternalServiceError
from feed_shared.retry import RetryConfig
from service_topfeed.app.adapters.origin_client import OriginFeedClient
from service_topfeed.app.main import TopFeedService, create_app


ORIGIN_URL = "https://feed.test/v0"


@pytest.fixture
def service():
    """Create TopFeedService instance pointed at a fake origin."""
    return TopFeedService(get_config("topfeed", 8000, origin_base_url=ORIGIN_URL))


@pytest.fixture
def client(service):
    """Create test client."""
    return TestClient(service.app)


class TestTopFeedService:
    """Test cases for TopFeedService."""

    def test_create_app_exposes_service(self):
        app = create_app(get_config("topfeed", 8000, origin_base_url=ORIGIN_URL))

        assert isinstance(app.state.topfeed_service, TopFeedService)

    def test_shutdown_closes_origin_client(self, service):
        service.origin_client.close = AsyncMock()

        with TestClient(service.app):
            pass

        service.origin_client.close.assert_awaited_once()

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "topfeed"
        assert data["origin"] == ORIGIN_URL

    def test_health_endpoint(self, client, service):
        service.origin_client.ping = AsyncMock(return_value=True)

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "topfeed"
        assert data["status"] == "ok"
        assert data["dependencies"] == {"origin": "ok"}

    def test_health_reports_unreachable_origin(self, client, service):
        service.origin_client.ping = AsyncMock(return_value=False)

        response = client.get("/health")

        assert response.json()["dependencies"] == {"origin": "error"}

    def test_metrics_endpoint(self, client):
        client.get("/")
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    def test_request_id_is_echoed(self, client):
        response = client.get("/", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_cors_allows_configured_front_end(self, client):
        response = client.options(
            "/api/hackernews/top-stories",
            headers={
                "Origin": "http://localhost:4200",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:4200"


class TestTopStoriesEndpoint:
    """Test cases for the paged top stories route."""

    @pytest.fixture
    def stories(self, item_factory):
        return [item_factory(item_id) for item_id in range(1, 26)]

    def test_default_page(self, client, service, stories):
        service.aggregator.get_top_items = AsyncMock(return_value=stories)

        response = client.get("/api/hackernews/top-stories")

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["items"]] == list(range(1, 11))
        assert body["totalCount"] == 25

    def test_requested_page(self, client, service, stories):
        service.aggregator.get_top_items = AsyncMock(return_value=stories)

        response = client.get("/api/hackernews/top-stories", params={"page": 1, "pageSize": 10})

        body = response.json()
        assert [item["id"] for item in body["items"]] == list(range(11, 21))
        assert body["totalCount"] == 25
        assert body["items"][0] == {"id": 11, "title": "Story 11", "url": "http://example.com"}

    def test_page_past_end(self, client, service, stories):
        service.aggregator.get_top_items = AsyncMock(return_value=stories)

        response = client.get("/api/hackernews/top-stories", params={"page": 9, "pageSize": 10})

        assert response.status_code == 200
        assert response.json() == {"items": [], "totalCount": 25}

    def test_empty_aggregation_is_not_an_error(self, client, service):
        service.aggregator.get_top_items = AsyncMock(return_value=[])

        response = client.get("/api/hackernews/top-stories")

        assert response.status_code == 200
        assert response.json() == {"items": [], "totalCount": 0}

    @pytest.mark.parametrize("params", [{"page": -1}, {"pageSize": 0}, {"page": "abc"}])
    def test_invalid_query_rejected(self, client, service, params):
        service.aggregator.get_top_items = AsyncMock(return_value=[])

        response = client.get("/api/hackernews/top-stories", params=params)

        assert response.status_code == 422
        service.aggregator.get_top_items.assert_not_awaited()

    def test_page_size_larger_than_feed_returns_everything(self, client, service, stories):
        service.aggregator.get_top_items = AsyncMock(return_value=stories)

        response = client.get("/api/hackernews/top-stories", params={"pageSize": 500})

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["items"]] == list(range(1, 26))
        assert body["totalCount"] == 25


class TestErrorHandlers:
    """Test cases for the shared exception handlers."""

    def test_feed_service_error_uses_error_envelope(self, client, service):
        @service.app.get("/failing")
        async def failing():
            raise ExternalServiceError("origin", "unavailable", details={"status_code": 503})

        response = client.get("/failing", headers={"X-Request-ID": "req-9"})

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "EXTERNAL_SERVICE_ERROR"
        assert body["message"] == "origin: unavailable"
        assert body["details"] == {"status_code": 503}
        assert body["request_id"] == "req-9"

    def test_unexpected_failure_returns_500(self, service):
        @service.app.get("/broken")
        async def broken():
            raise RuntimeError("boom")

        client = TestClient(service.app, raise_server_exceptions=False)

        response = client.get("/broken")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"


class TestCacheRoutes:
    """Test cases for the cache diagnostics routes."""

    def test_cache_stats(self, client, service, item_factory):
        service.store.set(1, item_factory(1), 60)

        response = client.get("/cache/stats")

        assert response.status_code == 200
        assert response.json() == {"entries": 1, "live_entries": 1}

    def test_cache_purge(self, client, service, item_factory):
        service.store.set(1, item_factory(1), 60)

        response = client.post("/cache/purge")

        assert response.status_code == 200
        assert response.json() == {"removed": 0, "entries": 1, "live_entries": 1}


class TestEndToEnd:
    """Route → aggregator → origin client with a fake origin transport."""

    def test_top_stories_served_from_origin_then_cache(self, client, service):
        calls = []
        items = {
            1: {"id": 1, "title": "Story 1", "url": "http://example.com/1", "score": 10},
            3: {"id": 3, "title": "Story 3", "score": 7},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            if request.url.path.endswith("/topstories.json"):
                return httpx.Response(200, content=json.dumps([1, 2, 3]))
            item_id = int(request.url.path.rsplit("/", 1)[-1].split(".")[0])
            return httpx.Response(200, content=json.dumps(items.get(item_id)))

        origin = OriginFeedClient(
            ORIGIN_URL,
            retry_config=RetryConfig(max_attempts=1),
            transport=httpx.MockTransport(handler),
        )
        service.origin_client = origin
        service.aggregator.origin = origin

        first = client.get("/api/hackernews/top-stories")
        second = client.get("/api/hackernews/top-stories")

        assert first.status_code == 200
        assert first.json() == {
            "items": [
                {"id": 1, "title": "Story 1", "url": "http://example.com/1", "score": 10},
                {"id": 3, "title": "Story 3", "score": 7},
            ],
            "totalCount": 2,
        }
        assert second.json() == first.json()
        # Item 2 is absent upstream and is not cached, so it is requested again.
        assert sorted(calls) == sorted([
            "/v0/topstories.json",
            "/v0/item/1.json",
            "/v0/item/2.json",
            "/v0/item/3.json",
            "/v0/item/2.json",
        ])
