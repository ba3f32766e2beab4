"""Redis-based cache service for resolved tenant credentials.

Provides async Redis caching with TTL and store-if-absent support. When
Redis is not reachable every read is a miss and every write is a no-op,
so callers fall back to computing the value.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from bbb_tenancy.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _decode(key: str, value: str) -> Any | None:
    """JSON-decode a cached value; undecodable entries read as a miss."""
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("Cache entry for key %s is not valid JSON; ignoring", key)
        return None


class CacheService:
    """Async Redis cache service with TTL support.

    Uses bbb_tenancy.core.config for connection settings. Call connect()
    at startup and disconnect() at shutdown.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI. A client
                passed here is treated as already connected.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Redis cache connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning(
                    "Redis connection failed: %s. Credential cache disabled.",
                    e,
                )
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after disconnect. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError:
            logger.debug("Ignoring error while closing stale Redis connection")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable.

        Args:
            key: Cache key (use bbb_tenancy.infrastructure.cache.keys builders).

        Returns:
            Cached value or None.
        """
        if not self.is_available() or self.redis is None:
            return None
        try:
            value = await self.redis.get(key)
            if value is not None:
                logger.debug("Cache HIT: %s", key)
                return _decode(key, value)
            logger.debug("Cache MISS: %s", key)
            return None
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    value = await self.redis.get(key)
                    if value is not None:
                        return _decode(key, value)
                    return None
                except redis.RedisError:
                    logger.exception("Cache get error for key %s after reconnect", key)
                    return None
            logger.warning("Cache get unavailable for key %s (Redis disconnected)", key)
            return None
        except redis.RedisError:
            logger.exception("Cache get error for key %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL, overwriting any existing entry.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable).
            ttl: Time-to-live in seconds (default 300).

        Returns:
            True if stored, False otherwise.
        """
        return await self._store(key, value, ttl, only_if_absent=False)

    async def add(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL only if the key does not exist (SET NX EX).

        Returns:
            True if this call stored the value, False if the key already
            existed or the cache is unavailable.
        """
        return await self._store(key, value, ttl, only_if_absent=True)

    async def _store(
        self, key: str, value: Any, ttl: int, *, only_if_absent: bool
    ) -> bool:
        if not self.is_available() or self.redis is None:
            return False
        serialized = json.dumps(value)
        try:
            stored = await self.redis.set(key, serialized, ex=ttl, nx=only_if_absent)
            logger.debug(
                "Cache %s: %s (TTL: %ss, stored=%s)",
                "ADD" if only_if_absent else "SET",
                key,
                ttl,
                bool(stored),
            )
            return bool(stored)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    stored = await self.redis.set(
                        key, serialized, ex=ttl, nx=only_if_absent
                    )
                    return bool(stored)
                except redis.RedisError:
                    logger.exception("Cache set error for key %s after reconnect", key)
            logger.warning("Cache set unavailable for key %s (Redis disconnected)", key)
            return False
        except redis.RedisError:
            logger.exception("Cache set error for key %s", key)
            return False

    async def get_or_compute(
        self,
        key: str,
        ttl: int,
        compute: Callable[[], Awaitable[Any]],
        is_valid: Callable[[Any], bool] | None = None,
    ) -> Any:
        """Return the cached value for key, computing and storing it on a miss.

        compute is not awaited when a live entry exists. Exceptions from
        compute propagate and nothing is stored. Concurrent callers may all
        compute; the first to store wins and later callers return the
        stored value instead of their own.

        An entry rejected by is_valid (corrupt or written by another
        application) counts as a miss and is overwritten with the computed
        value.

        Args:
            key: Cache key.
            ttl: Time-to-live in seconds for a newly stored value.
            compute: Zero-argument coroutine function producing a
                JSON-serializable value.
            is_valid: Optional predicate applied to cached values.

        Returns:
            The cached or newly computed value.
        """
        accept = is_valid or (lambda _value: True)
        cached_value = await self.get(key)
        if cached_value is not None:
            if accept(cached_value):
                return cached_value
            logger.warning("Cache INVALID: %s; recomputing", key)
            value = await compute()
            await self.set(key, value, ttl=ttl)
            return value
        value = await compute()
        if await self.add(key, value, ttl=ttl):
            return value
        if self.is_available():
            winner = await self.get(key)
            if winner is not None and accept(winner):
                return winner
            # Key holds an unreadable entry; replace it.
            await self.set(key, value, ttl=ttl)
        return value
