"""Application services."""

from bbb_tenancy.application.services.credential_resolver import (
    CredentialResolver,
    CredentialResolverConfig,
)

__all__ = ["CredentialResolver", "CredentialResolverConfig"]
