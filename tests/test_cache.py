"""Tests for the read cache backends."""
import json
from unittest.mock import MagicMock

import pytest
import redis

from app.config import Settings
from app.utils.cache import InMemoryCache, RedisCache, build_cache


def test_in_memory_cache_get_put_evict():
    cache = InMemoryCache()

    assert cache.get("all") is None
    cache.put("all", [{"id": 1}])
    cache.put(1, {"id": 1})

    assert cache.get("all") == [{"id": 1}]
    assert cache.get("1") == {"id": 1}

    cache.evict_all()

    assert cache.get("all") is None
    assert cache.stats()["total_keys"] == 0


def test_redis_cache_namespaces_keys():
    client = MagicMock()
    cache = RedisCache(client, prefix="products", ttl=60)

    cache.put("7", {"id": 7, "name": "Lamp"})

    client.setex.assert_called_once_with("products:7", 60, json.dumps({"id": 7, "name": "Lamp"}))


def test_redis_cache_get_decodes_json():
    client = MagicMock()
    client.get.return_value = json.dumps([{"id": 1}])
    cache = RedisCache(client, prefix="products", ttl=60)

    assert cache.get("all") == [{"id": 1}]
    client.get.assert_called_once_with("products:all")


def test_redis_cache_read_failure_is_a_miss():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    cache = RedisCache(client, prefix="products", ttl=60)

    assert cache.get("all") is None


def test_redis_cache_write_failure_returns_false():
    client = MagicMock()
    client.setex.side_effect = redis.ConnectionError("down")
    cache = RedisCache(client, prefix="products", ttl=60)

    assert cache.put("all", []) is False


def test_redis_cache_evict_all_deletes_namespace():
    client = MagicMock()
    client.keys.return_value = ["products:all", "products:3"]
    cache = RedisCache(client, prefix="products", ttl=60)

    cache.evict_all()

    client.keys.assert_called_once_with("products:*")
    client.delete.assert_called_once_with("products:all", "products:3")


def test_redis_cache_evict_failure_propagates():
    client = MagicMock()
    client.keys.side_effect = redis.ConnectionError("down")
    cache = RedisCache(client, prefix="products", ttl=60)

    with pytest.raises(redis.ConnectionError):
        cache.evict_all()


def test_build_cache_selects_backend():
    assert isinstance(build_cache(Settings(CACHE_BACKEND="memory")), InMemoryCache)
    assert isinstance(build_cache(Settings(CACHE_BACKEND="redis")), RedisCache)

    with pytest.raises(ValueError):
        build_cache(Settings(CACHE_BACKEND="memcached"))
