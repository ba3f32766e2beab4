"""Cache key builders. Single place for key format (DRY).

The tenant id is the last key component, so it may contain the
separator without making keys ambiguous. The empty tenant id (single
tenant install) maps to "tenant:".
"""

from bbb_tenancy.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_TENANT


def tenant_credentials_key(tenant_id: str) -> str:
    """Cache key for resolved credentials of a tenant."""
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}{tenant_id}"
