"""Cache protocol used by the credential resolver (DIP)."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends (e.g. Redis)."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds, overwriting any existing entry."""
        ...

    async def add(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value only if key is absent. Returns True if stored."""
        ...

    async def get_or_compute(
        self,
        key: str,
        ttl: int,
        compute: Callable[[], Awaitable[Any]],
        is_valid: Callable[[Any], bool] | None = None,
    ) -> Any:
        """Return the live entry for key, or compute, store-if-absent and return.

        Entries rejected by is_valid are treated as misses and overwritten.
        """
        ...
