"""Integration tests for shortlink."""

import pytest
from httpx import AsyncClient, ASGITransport

from app import build_app, lifespan
from config import Config


@pytest.mark.asyncio
class TestIntegration:
    """End-to-end integration tests."""

    async def test_shorten_redirect_count(self, client):
        """Shorten, follow once, see one click."""
        create_response = await client.post("/shorten", json={"url": "https://example.com/a/b"})
        assert create_response.status_code == 201
        code = create_response.json()["code"]

        redirect_response = await client.get(f"/{code}")
        assert redirect_response.status_code == 302
        assert redirect_response.headers["location"] == "https://example.com/a/b"

        stats_response = await client.get(f"/stats/{code}")
        assert stats_response.status_code == 200
        assert stats_response.json()["totalClicks"] == 1

    async def test_full_url_lifecycle(self, client):
        """Test complete URL shortening lifecycle."""
        # 1. Create short URL with a custom code
        create_response = await client.post(
            "/shorten",
            json={"url": "https://example.com/test", "customCode": "lifecycle"},
        )
        assert create_response.status_code == 201

        # 2. Info before any click
        info_response = await client.get("/api/urls/lifecycle")
        assert info_response.status_code == 200
        assert info_response.json()["clickCount"] == 0

        # 3. Follow it twice
        for _ in range(2):
            redirect_response = await client.get("/lifecycle")
            assert redirect_response.status_code == 302

        info_response = await client.get("/api/urls/lifecycle")
        assert info_response.json()["clickCount"] == 2

        # 4. Appears in the recent list
        list_response = await client.get("/api/urls")
        assert "lifecycle" in [link["code"] for link in list_response.json()["links"]]

        # 5. Delete and confirm it is gone
        delete_response = await client.delete("/api/urls/lifecycle")
        assert delete_response.status_code == 204

        assert (await client.get("/lifecycle")).status_code == 404
        assert (await client.get("/stats/lifecycle")).status_code == 404

        # 6. Code stays retired
        recreate = await client.post(
            "/shorten",
            json={"url": "https://example.com/other", "customCode": "lifecycle"},
        )
        assert recreate.status_code == 409

    async def test_app_lifespan_builds_service(self):
        """Test build_app wires store and service on startup."""
        app = build_app(Config(database_url="memory://", base_url="http://testserver", log_level="WARNING"))

        async with lifespan(app):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
                create_response = await client.post("/shorten", json={"url": "https://example.com/"})
                assert create_response.status_code == 201

                code = create_response.json()["code"]
                assert (await client.get(f"/{code}")).status_code == 302

                health = await client.get("/api/health")
                assert health.json()["status"] == "healthy"
