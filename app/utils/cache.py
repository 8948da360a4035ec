import json
import logging
import threading
import redis
from abc import ABC, abstractmethod
from typing import Optional, Any

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ReadCache(ABC):
    """
    Key-value cache for service read results.

    Values must be JSON-compatible so every backend can hold them.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None on a miss."""

    @abstractmethod
    def put(self, key: str, value: Any) -> bool:
        """Store a value. Returns True if it was stored."""

    @abstractmethod
    def evict_all(self) -> None:
        """Drop every entry held by this cache."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend is reachable."""

    @abstractmethod
    def stats(self) -> dict:
        """Return backend statistics."""


class InMemoryCache(ReadCache):
    """Process-local cache guarded by a lock."""

    def __init__(self):
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(str(key))

    def put(self, key: str, value: Any) -> bool:
        with self._lock:
            self._entries[str(key)] = value
        return True

    def evict_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def ping(self) -> bool:
        return True

    def stats(self) -> dict:
        with self._lock:
            return {"backend": "memory", "total_keys": len(self._entries)}


class RedisCache(ReadCache):
    """
    Redis cache service for caching product reads.

    Keys are namespaced as ``<prefix>:<key>`` and expire after the TTL.
    Read and write failures degrade to a cache miss; a failed eviction is
    raised, since keeping stale entries would serve outdated products.
    """

    def __init__(self, client: redis.Redis, prefix: str, ttl: int):
        self.client = client
        self.prefix = prefix
        self.ttl = ttl

    def _make_key(self, key: str) -> str:
        """Create a namespaced cache key."""
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[Any]:
        cache_key = self._make_key(key)
        try:
            value = self.client.get(cache_key)
            if value is not None:
                return json.loads(value)
            return None
        except (redis.RedisError, json.JSONDecodeError) as e:
            logger.warning(f"Cache read failed for {cache_key}: {e}")
            return None

    def put(self, key: str, value: Any) -> bool:
        cache_key = self._make_key(key)
        try:
            serialized = json.dumps(value, default=str)
            self.client.setex(cache_key, self.ttl, serialized)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.warning(f"Cache write failed for {cache_key}: {e}")
            return False

    def evict_all(self) -> None:
        keys = self.client.keys(f"{self.prefix}:*")
        if keys:
            self.client.delete(*keys)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False

    def stats(self) -> dict:
        info = self.client.info()
        return {
            "backend": "redis",
            "connected_clients": info.get("connected_clients"),
            "used_memory": info.get("used_memory_human"),
            "total_keys": self.client.dbsize(),
            "uptime_seconds": info.get("uptime_in_seconds"),
        }


def build_cache(settings: Settings) -> ReadCache:
    """Create the cache backend selected by CACHE_BACKEND."""
    if settings.CACHE_BACKEND == "redis":
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return RedisCache(client, prefix=settings.CACHE_PREFIX, ttl=settings.CACHE_TTL)
    if settings.CACHE_BACKEND == "memory":
        return InMemoryCache()
    raise ValueError(f"Unknown cache backend: {settings.CACHE_BACKEND}")


# Singleton cache instance shared by all requests
read_cache = build_cache(get_settings())
