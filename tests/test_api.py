"""Tests for API endpoints."""

import pytest


@pytest.mark.asyncio
class TestPublicEndpoints:
    """Test shorten, redirect and per-code stats."""

    async def test_shorten_url(self, client, sample_urls):
        """Test POST /shorten."""
        response = await client.post("/shorten", json={"url": sample_urls[0]})

        assert response.status_code == 201
        data = response.json()
        assert len(data["code"]) == 6
        assert data["originalUrl"] == sample_urls[0]
        assert data["shortUrl"] == f"http://testserver/{data['code']}"
        assert "createdAt" in data

    async def test_shorten_with_custom_code(self, client, sample_urls):
        """Test POST /shorten with custom code."""
        response = await client.post(
            "/shorten",
            json={"url": sample_urls[0], "customCode": "test123"},
        )

        assert response.status_code == 201
        assert response.json()["code"] == "test123"

    async def test_shorten_accepts_snake_case(self, client, sample_urls):
        """Test request fields also accept their Python names."""
        response = await client.post(
            "/shorten",
            json={"url": sample_urls[0], "custom_code": "snake12"},
        )

        assert response.status_code == 201
        assert response.json()["code"] == "snake12"

    async def test_shorten_invalid_url(self, client):
        """Test POST /shorten with invalid URL."""
        response = await client.post("/shorten", json={"url": "not-a-url"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"].startswith("Invalid URL")
        assert data["detail"] == {"url": "not-a-url"}

    async def test_shorten_duplicate_custom_code(self, client, sample_urls):
        """Test duplicate custom code gives 409."""
        await client.post("/shorten", json={"url": sample_urls[0], "customCode": "taken1"})

        response = await client.post("/shorten", json={"url": sample_urls[1], "customCode": "taken1"})

        assert response.status_code == 409
        assert "already exists" in response.json()["error"]

    async def test_shorten_reserved_custom_code(self, client, sample_urls):
        """Test reserved custom code gives 400."""
        response = await client.post("/shorten", json={"url": sample_urls[0], "customCode": "health"})

        assert response.status_code == 400

    async def test_short_url_honours_forwarded_headers(self, client, sample_urls):
        """Test short URL built from proxy headers."""
        response = await client.post(
            "/shorten",
            json={"url": sample_urls[0], "customCode": "proxied"},
            headers={
                "X-Forwarded-Proto": "https",
                "X-Forwarded-Host": "sho.rt",
                "X-Forwarded-Prefix": "/s",
            },
        )

        assert response.json()["shortUrl"] == "https://sho.rt/s/proxied"

    async def test_redirect(self, client, sample_urls):
        """Test GET /{code} redirects."""
        create = await client.post("/shorten", json={"url": sample_urls[0]})
        code = create.json()["code"]

        response = await client.get(f"/{code}")

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]

    async def test_redirect_not_found(self, client):
        """Test GET /{code} for unknown code."""
        response = await client.get("/nonexistent")

        assert response.status_code == 404
        assert response.json()["error"] == "Short code 'nonexistent' not found"

    async def test_stats(self, client, sample_urls):
        """Test GET /stats/{code} counts redirects with labels."""
        await client.post("/shorten", json={"url": sample_urls[0], "customCode": "counted"})

        await client.get("/counted", headers={"Referer": "https://www.facebook.com/post"})
        await client.get("/counted?utm_source=newsletter", headers={"CF-IPCountry": "DE"})

        response = await client.get("/stats/counted")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == "counted"
        assert data["originalUrl"] == sample_urls[0]
        assert data["totalClicks"] == 2

        newest, oldest = data["clicks"]
        assert newest["source"] == "newsletter"
        assert newest["location"] == "DE"
        assert oldest["source"] == "facebook"

    async def test_stats_not_found(self, client):
        """Test GET /stats/{code} for unknown code."""
        response = await client.get("/stats/nonexistent")

        assert response.status_code == 404

    async def test_failed_redirect_not_counted(self, client, service, sample_urls):
        """Test a 404 redirect records nothing."""
        await client.post("/shorten", json={"url": sample_urls[0]})
        await client.get("/missing1")

        stats = await service.get_statistics()
        assert stats["total_clicks"] == 0

    async def test_health(self, client):
        """Test GET /health."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_health_unhealthy(self, client, test_db, monkeypatch):
        """Test GET /health reports a down store in the error shape."""
        async def store_down():
            return False

        monkeypatch.setattr(test_db, "health_check", store_down)

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json() == {
            "error": "Service unhealthy",
            "detail": {"database": False, "cache": True, "overall": False},
        }


@pytest.mark.asyncio
class TestManagementEndpoints:
    """Test endpoints under /api."""

    async def test_batch_shorten(self, client, sample_urls):
        """Test POST /api/shorten/batch."""
        response = await client.post("/api/shorten/batch", json={"urls": sample_urls})

        assert response.status_code == 201
        links = response.json()["links"]
        assert [link["originalUrl"] for link in links] == sample_urls

    async def test_batch_too_large(self, client):
        """Test batch limit gives 400."""
        urls = [f"https://example.com/{i}" for i in range(6)]

        response = await client.post("/api/shorten/batch", json={"urls": urls})

        assert response.status_code == 400
        assert response.json()["detail"] == {"received": 6}

    async def test_get_url_info(self, client, sample_urls):
        """Test GET /api/urls/{code}."""
        await client.post("/shorten", json={"url": sample_urls[0], "customCode": "info123"})
        await client.get("/info123")

        response = await client.get("/api/urls/info123")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == "info123"
        assert data["originalUrl"] == sample_urls[0]
        assert data["shortUrl"] == "http://testserver/info123"
        assert data["clickCount"] == 1

    async def test_get_url_info_not_found(self, client):
        """Test GET /api/urls/{code} for unknown code."""
        response = await client.get("/api/urls/nonexistent")

        assert response.status_code == 404

    async def test_list_urls(self, client, sample_urls):
        """Test GET /api/urls."""
        for url in sample_urls:
            await client.post("/shorten", json={"url": url})

        response = await client.get("/api/urls", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert len(data["links"]) == 2

    async def test_delete_url(self, client, sample_urls):
        """Test DELETE /api/urls/{code}."""
        await client.post("/shorten", json={"url": sample_urls[0], "customCode": "gone123"})

        response = await client.delete("/api/urls/gone123")
        assert response.status_code == 204

        assert (await client.get("/gone123")).status_code == 404

        reuse = await client.post("/shorten", json={"url": sample_urls[1], "customCode": "gone123"})
        assert reuse.status_code == 409

    async def test_delete_not_found(self, client):
        """Test DELETE for unknown code."""
        response = await client.delete("/api/urls/nonexistent")

        assert response.status_code == 404

    async def test_statistics(self, client, sample_urls):
        """Test GET /api/stats."""
        await client.post("/shorten", json={"url": sample_urls[0]})

        response = await client.get("/api/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["totalUrls"] == 1
        assert data["totalClicks"] == 0
        assert data["database"] == "memory"
        assert data["cacheEnabled"] is False

    async def test_health_check(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["cache"] == "healthy"

    async def test_docs_served_under_api(self, client):
        """Test OpenAPI schema path."""
        response = await client.get("/api/openapi.json")

        assert response.status_code == 200
        assert "/shorten" in response.json()["paths"]
