"""Domain layer: credential value types and exceptions.

No infrastructure imports here.
"""

from bbb_tenancy.domain.credentials import (
    ForwardAction,
    ResolvedCredentials,
    normalize_endpoint,
)
from bbb_tenancy.domain.exceptions import (
    BBBTenancyException,
    BrokerAuthenticationError,
    CredentialsNotFound,
    LookupFailed,
    TenantNotFound,
    TransportError,
)

__all__ = [
    "BBBTenancyException",
    "BrokerAuthenticationError",
    "CredentialsNotFound",
    "ForwardAction",
    "LookupFailed",
    "ResolvedCredentials",
    "TenantNotFound",
    "TransportError",
    "normalize_endpoint",
]
