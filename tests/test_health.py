"""Tests for health check endpoints."""
from unittest.mock import MagicMock

import redis

from app.api.dependencies import get_cache
from app.main import app
from app.utils.cache import RedisCache


def test_health_check(client):
    """Test basic health check."""
    response = client.get("/api/v1/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_check(client):
    """Test readiness reports database and cache."""
    response = client.get("/api/v1/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"] == {"database": True, "cache": True}


def test_cache_stats(client):
    """Test cache statistics count cached reads."""
    client.get("/api/v1/products/")

    response = client.get("/api/v1/health/cache/stats")

    assert response.status_code == 200
    assert response.json() == {"backend": "memory", "total_keys": 1}


def test_exchanges_are_recorded(client):
    """Test recent requests are listed newest first."""
    client.get("/api/v1/products/9999")
    client.get("/api/v1/products/")

    response = client.get("/api/v1/health/exchanges")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert data["exchanges"][0]["path"] == "/api/v1/products/"
    assert data["exchanges"][0]["status"] == 200
    assert data["exchanges"][1]["status"] == 404
    assert data["exchanges"][1]["method"] == "GET"


def test_root_endpoint(client):
    """Test root endpoint returns API info."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "version" in data
    assert "docs" in data


def test_cache_stats_when_backend_is_down(client):
    """Test cache statistics report an unreachable Redis instead of failing."""
    redis_client = MagicMock()
    redis_client.info.side_effect = redis.ConnectionError("Connection refused")
    app.dependency_overrides[get_cache] = lambda: RedisCache(redis_client, prefix="products", ttl=60)

    response = client.get("/api/v1/health/cache/stats")

    assert response.status_code == 200
    assert response.json() == {"error": "Connection refused"}
