"""Application layer: credential resolution service.

Depends on domain types and on the cache protocol (DIP); infrastructure
clients are injected by the lifespan wiring.
"""

from bbb_tenancy.application.services.credential_resolver import (
    CredentialResolver,
    CredentialResolverConfig,
)

__all__ = ["CredentialResolver", "CredentialResolverConfig"]
