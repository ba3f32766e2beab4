"""Cache: Redis service and cache key utilities.

Used by the credential resolver to keep resolved tenant credentials for
CACHE_EXPIRES_IN_MINUTES. Key format is in keys.py (DRY).
"""

from bbb_tenancy.infrastructure.cache.cache_protocol import CacheProtocol
from bbb_tenancy.infrastructure.cache.keys import tenant_credentials_key
from bbb_tenancy.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "tenant_credentials_key",
]
