"""Tenant broker: OAuth-protected tenant settings API."""

from bbb_tenancy.infrastructure.external.broker.client import BrokerClient
from bbb_tenancy.infrastructure.external.broker.oauth import (
    BrokerTokenProvider,
    OAuthTokens,
)

__all__ = ["BrokerClient", "BrokerTokenProvider", "OAuthTokens"]
