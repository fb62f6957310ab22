"""
Blog API Backend — Application Surface Tests
=============================================

What:  Tests for everything around the blog routes: API index, health,
       unmatched routes, the last-resort 500 handler, request ids, and the
       lifespan wiring of both storage backends.
"""

import logging
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from blog_api.config import Settings
from blog_api.main import create_app, lifespan
from blog_api.routes.dependencies import get_post_gateway


class TestApiIndexAndHealth:

    @pytest.mark.asyncio
    async def test_api_index_lists_endpoints(self, test_client):
        response = await test_client.get("/api")
        assert response.status_code == 200
        payload = response.json()
        assert "POST /api/blogs" in payload["endpoints"]
        assert "PUT /api/blogs/:id" in payload["documentation"]

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "healthy"
        assert payload["database"] == "connected"
        assert payload["storageBackend"] == "memory"
        assert payload["environment"] == "test"

    @pytest.mark.asyncio
    async def test_health_disconnected(self, test_app, test_client):
        gateway = AsyncMock()
        gateway.ping = AsyncMock(return_value=False)
        test_app.dependency_overrides[get_post_gateway] = lambda: gateway

        payload = (await test_client.get("/api/health")).json()

        assert payload["status"] == "unhealthy"
        assert payload["database"] == "disconnected"


class TestErrorBoundaries:

    @pytest.mark.asyncio
    async def test_unknown_route_lists_endpoints(self, test_client):
        response = await test_client.get("/api/unknown")
        assert response.status_code == 404
        payload = response.json()
        assert payload["success"] is False
        assert payload["error"] == "API endpoint not found"
        assert payload["path"] == "/api/unknown"
        assert payload["method"] == "GET"
        assert "DELETE /api/blogs/:id" in payload["availableEndpoints"]

    @pytest.mark.asyncio
    async def test_method_not_allowed_uses_envelope(self, test_client):
        response = await test_client.patch("/api/blogs", json={})
        assert response.status_code == 405
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "environment, expected_message",
        [("development", "boom"), ("production", "Something went wrong")],
    )
    async def test_unexpected_error_redaction(self, memory_gateway, environment, expected_message):
        app = create_app(Settings(storage_backend="memory", environment=environment))
        broken = AsyncMock()
        broken.find_all = AsyncMock(side_effect=RuntimeError("boom"))
        app.dependency_overrides[get_post_gateway] = lambda: broken

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(
                "/api/blogs",
                headers={"X-Request-ID": "req-500", "Origin": "http://example.com"},
            )

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "req-500"
        assert response.headers["access-control-allow-origin"] == "*"
        payload = response.json()
        assert payload["success"] is False
        assert payload["error"] == "Internal server error"
        assert payload["message"] == expected_message
        assert "timestamp" in payload


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_request_id(self, test_client):
        response = await test_client.get("/api/blogs")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/blogs", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_memory_backend_wiring(self):
        app = create_app(Settings(storage_backend="memory", environment="test"))

        async with lifespan(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                created = await client.post(
                    "/api/blogs", json={"title": "Valid Title", "body": "This is long enough."}
                )
                listed = await client.get("/api/blogs")

        assert created.status_code == 201
        assert listed.json()["count"] == 1

    @pytest.mark.asyncio
    async def test_sql_backend_wiring(self, tmp_path):
        app = create_app(
            Settings(
                storage_backend="sql",
                environment="test",
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
            )
        )

        async with lifespan(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                created = (await client.post(
                    "/api/blogs", json={"title": "Valid Title", "body": "This is long enough."}
                )).json()["data"]
                updated = await client.put(
                    f"/api/blogs/{created['id']}", json={"author": "Jane"}
                )
                fetched = await client.get(f"/api/blogs/{created['id']}")
                health = await client.get("/api/health")

        assert updated.status_code == 200
        assert fetched.json()["data"]["author"] == "Jane"
        assert fetched.json()["data"]["title"] == "Valid Title"
        assert fetched.json()["data"]["createdAt"] == created["createdAt"]
        assert health.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_custom_prefix(self, memory_gateway):
        app = create_app(Settings(storage_backend="memory", api_prefix="v1/"))
        app.dependency_overrides[get_post_gateway] = lambda: memory_gateway

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            listed = await client.get("/v1/blogs")
            index = await client.get("/v1")
            old = await client.get("/api/blogs")

        assert listed.status_code == 200
        assert listed.json() == {"success": True, "count": 0, "data": []}
        assert "GET /v1/blogs" in index.json()["endpoints"]
        assert old.status_code == 404


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_requests_are_logged_with_status(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="blog_api.access")

        await test_client.get("/api/blogs", headers={"X-Request-ID": "log-1"})

        records = [r for r in caplog.records if r.name == "blog_api.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert "GET /api/blogs 200" in records[0].getMessage()
        assert records[0].request_id == "log-1"

    @pytest.mark.asyncio
    async def test_health_route_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="blog_api.access")

        await test_client.get("/api/health")

        assert not [r for r in caplog.records if r.name == "blog_api.access"]

    @pytest.mark.asyncio
    async def test_blog_path_ending_in_health_is_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="blog_api.access")

        response = await test_client.get("/api/blogs/health")

        assert response.status_code == 400
        records = [r for r in caplog.records if r.name == "blog_api.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert "/api/blogs/health 400" in records[0].getMessage()
