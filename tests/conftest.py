"""Pytest configuration and fixtures for bbb_tenancy.

Provides an in-memory Redis stand-in for CacheService, a Settings
factory that ignores the developer's .env, and helpers to build httpx
clients over MockTransport.
"""

import time
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from bbb_tenancy.core.config import Settings
from bbb_tenancy.infrastructure.cache.redis_cache import CacheService


class InMemoryRedis:
    """Subset of redis.asyncio.Redis used by CacheService (get/set NX EX)."""

    def __init__(self) -> None:
        self.data: dict[str, tuple[str, float | None]] = {}
        self.get_calls = 0
        self.set_calls = 0

    def _live(self, key: str) -> str | None:
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self.data[key]
            return None
        return value

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        self.get_calls += 1
        return self._live(key)

    async def set(
        self,
        key: str,
        value: str,
        ex: int | None = None,
        nx: bool = False,
    ) -> bool | None:
        self.set_calls += 1
        if nx and self._live(key) is not None:
            return None
        expires_at = time.monotonic() + ex if ex else None
        self.data[key] = (value, expires_at)
        return True

    async def aclose(self) -> None:
        return None


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings from keyword overrides, ignoring any .env file."""

    def _make(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def cache(fake_redis: InMemoryRedis, make_settings: Callable[..., Settings]) -> CacheService:
    """CacheService backed by the in-memory Redis."""
    return CacheService(redis_client=fake_redis, settings=make_settings())


def mock_http_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient with a mock transport handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def xml_response(body: str, status_code: int = 200) -> httpx.Response:
    """Build a mock httpx.Response with an XML body."""
    return httpx.Response(
        status_code=status_code,
        content=body.encode(),
        headers={"content-type": "text/xml"},
    )
