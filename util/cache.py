"""Response caches for upstream API calls."""

import hashlib
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

import redis
from redis.exceptions import RedisError

from util.config import CacheSettings

logger = logging.getLogger(__name__)

DEFAULT_TTL = 600


def make_cache_key(namespace: str, payload: dict[str, Any]) -> str:
    """
    Build a stable cache key from a namespace and request parameters.

    Parameter order does not matter: {"a": 1, "b": 2} and {"b": 2, "a": 1}
    map to the same key.
    """
    normalized = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    return f"{namespace}:{hashlib.md5(normalized.encode('utf-8')).hexdigest()}"


class CacheClient(ABC):
    """Key/value store for decoded JSON responses."""

    @abstractmethod
    def get(self, key: str) -> dict[str, Any] | None:
        """Return the cached value, or None on a miss or backend failure."""

    @abstractmethod
    def set(self, key: str, value: dict[str, Any], ttl: int = DEFAULT_TTL) -> bool:
        """Store a value for ttl seconds; False if it could not be stored."""

    def get_or_fetch(
        self,
        namespace: str,
        params: dict[str, Any],
        fetch: Callable[[], dict[str, Any]],
        ttl: int = DEFAULT_TTL,
    ) -> dict[str, Any]:
        """
        Return the cached response for (namespace, params), calling fetch on a miss.

        Exceptions raised by fetch propagate and nothing is stored.
        """
        key = make_cache_key(namespace, params)
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", namespace)
            return cached

        value = fetch()
        self.set(key, value, ttl=ttl)
        return value


class MemoryCache(CacheClient):
    """Process-local cache for single-user stdio sessions."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: dict[str, Any], ttl: int = DEFAULT_TTL) -> bool:
        now = self._clock()
        self._purge(now)
        self._entries[key] = (now + ttl, value)
        return True

    def _purge(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

    def __len__(self) -> int:
        return len(self._entries)


class RedisCache(CacheClient):
    """
    Redis cache shared by server replicas.

    The connection is opened on first use. A server that cannot be reached
    turns the cache into a no-op for the rest of the process instead of
    failing tool calls.
    """

    def __init__(self, settings: CacheSettings):
        self.settings = settings
        self._client = None
        self._disabled = False

    def _connection(self):
        if self._client is not None or self._disabled:
            return self._client

        try:
            client = redis.Redis(
                host=self.settings.host,
                port=self.settings.port,
                password=self.settings.password,
                ssl=self.settings.ssl,
                ssl_cert_reqs=None,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            client.ping()
        except (RedisError, OSError) as e:
            logger.warning(
                "Failed to connect to Redis at %s:%s: %s. Caching will be disabled.",
                self.settings.host,
                self.settings.port,
                e,
            )
            self._disabled = True
            return None

        logger.info("Connected to Redis at %s:%s", self.settings.host, self.settings.port)
        self._client = client
        return client

    def get(self, key: str) -> dict[str, Any] | None:
        client = self._connection()
        if client is None:
            return None

        try:
            cached_data = client.get(key)
            return json.loads(cached_data) if cached_data else None
        except (RedisError, json.JSONDecodeError, TypeError) as e:
            logger.warning("Cache read error for key '%s': %s", key, e)
            return None

    def set(self, key: str, value: dict[str, Any], ttl: int = DEFAULT_TTL) -> bool:
        client = self._connection()
        if client is None:
            return False

        try:
            client.setex(key, ttl, json.dumps(value, ensure_ascii=False))
            return True
        except (RedisError, TypeError, ValueError) as e:
            logger.warning("Cache write error for key '%s': %s", key, e)
            return False


def create_cache(settings: CacheSettings) -> CacheClient | None:
    """Build the configured cache backend; None when caching is off."""
    if settings.backend == "redis":
        return RedisCache(settings)
    if settings.backend == "memory":
        return MemoryCache()
    logger.info("Response caching is disabled")
    return None


_cache_client = None
_configured = False


def get_cache_client() -> CacheClient | None:
    """Get the cache client chosen by CACHE_BACKEND (lazy initialization, shared by all tools)."""
    global _cache_client, _configured
    if not _configured:
        _cache_client = create_cache(CacheSettings.from_env())
        _configured = True
    return _cache_client


__all__ = [
    "CacheClient",
    "MemoryCache",
    "RedisCache",
    "create_cache",
    "get_cache_client",
    "make_cache_key",
]
