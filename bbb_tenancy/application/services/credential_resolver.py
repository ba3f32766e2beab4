"""Tenant credential resolution.

Resolves the BigBlueButton API endpoint and shared secret for a tenant.
Sources, in priority order:

1. Credential cache (tenant:{tenant_id}), when enabled.
2. Broker tenant settings (bigbluebutton_url / bigbluebutton_secret).
3. Static credential table (TENANT_CREDENTIALS).
4. Default endpoint/secret, for the empty (single-tenant) tenant id only.
5. Multitenant lookup service, when values are still missing.

Only fully assembled credentials are cached; failures are never stored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from bbb_tenancy.core.config import Settings
from bbb_tenancy.core.constants import (
    SETTING_BBB_SECRET,
    SETTING_BBB_URL,
    SETTING_FORWARD_PARAMS_PREFIX,
)
from bbb_tenancy.domain.credentials import ForwardAction, ResolvedCredentials
from bbb_tenancy.domain.exceptions import CredentialsNotFound, TenantNotFound
from bbb_tenancy.infrastructure.cache.cache_protocol import CacheProtocol
from bbb_tenancy.infrastructure.cache.keys import tenant_credentials_key
from bbb_tenancy.infrastructure.external.broker.client import BrokerClient
from bbb_tenancy.infrastructure.external.multitenant.client import MultitenantLookupClient
from bbb_tenancy.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _first_text(*values: Any) -> str | None:
    """Return the first non-empty string; values of any other type are skipped."""
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


def _is_credentials_record(record: Any) -> bool:
    """True if a cached value is a complete credentials record."""
    if not isinstance(record, dict):
        return False
    try:
        credentials = ResolvedCredentials.model_validate(record)
    except ValidationError:
        return False
    return bool(credentials.api_url and credentials.secret)


@dataclass(frozen=True)
class CredentialResolverConfig:
    """Immutable resolver configuration, built once at startup."""

    default_endpoint: str = ""
    default_secret: str = ""
    tenant_credentials: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    cache_enabled: bool = True
    cache_ttl_seconds: int = 600

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialResolverConfig:
        return cls(
            default_endpoint=settings.bigbluebutton_endpoint,
            default_secret=settings.bigbluebutton_secret.get_secret_value(),
            tenant_credentials=dict(settings.tenant_credentials),
            cache_enabled=settings.cache_enabled,
            cache_ttl_seconds=settings.cache_ttl_seconds,
        )


class CredentialResolver:
    """Resolves (api_url, secret, settings) per tenant.

    The lookup client is optional: None means the multitenant API is not
    defined, and tenants without broker or static credentials fail with
    CredentialsNotFound.
    """

    def __init__(
        self,
        config: CredentialResolverConfig,
        cache: CacheProtocol,
        broker: BrokerClient,
        lookup: MultitenantLookupClient | None = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.broker = broker
        self.lookup = lookup

    async def resolve(self, tenant_id: str) -> ResolvedCredentials:
        """Return credentials for tenant_id with a normalized api_url.

        Raises:
            TenantNotFound: Tenant unknown to broker and static table, or to
                the multitenant lookup (noSuchUser).
            CredentialsNotFound: No source yielded both api_url and secret.
            TransportError: Multitenant lookup returned a non-success status.
            LookupFailed: Multitenant lookup reported an application error.
        """
        if self.config.cache_enabled:
            logger.debug("Cache enabled, attempt to fetch credentials from cache...")
            record = await self.cache.get_or_compute(
                tenant_credentials_key(tenant_id),
                self.config.cache_ttl_seconds,
                lambda: self._assemble(tenant_id),
                is_valid=_is_credentials_record,
            )
        else:
            record = await self._assemble(tenant_id)
        return ResolvedCredentials.model_validate(record).normalized()

    async def endpoint(self, tenant_id: str) -> str:
        """Return the normalized BigBlueButton API URL for tenant_id."""
        return (await self.resolve(tenant_id)).api_url

    async def secret(self, tenant_id: str) -> str:
        """Return the BigBlueButton shared secret for tenant_id."""
        return (await self.resolve(tenant_id)).secret

    async def forward_params(
        self, action: ForwardAction, tenant_id: str
    ) -> dict[str, Any] | None:
        """Return broker-provided parameters to forward on join/create, if any."""
        settings = (await self.resolve(tenant_id)).settings or {}
        params = settings.get(f"{SETTING_FORWARD_PARAMS_PREFIX}{ForwardAction(action).value}")
        return params if isinstance(params, dict) else None

    async def tenant_settings(self, tenant_id: str) -> dict[str, Any] | None:
        """Return the broker's raw tenant info (uncached), or None."""
        return await self.broker.fetch_tenant_settings(tenant_id)

    async def _assemble(self, tenant_id: str) -> dict[str, Any]:
        """Merge broker, static and default sources; fall back to the lookup service."""
        logger.debug("No cache. Attempt to fetch credentials from broker...")
        tenant_info = await self.broker.fetch_tenant_settings(tenant_id)
        static_credentials = self.config.tenant_credentials.get(tenant_id)

        if tenant_id and tenant_info is None and static_credentials is None:
            raise TenantNotFound(tenant_id)

        settings = tenant_info.get("settings") if tenant_info else None
        if not isinstance(settings, dict):
            settings = None
        broker_values = settings or {}
        static_values = static_credentials or {}

        api_url = _first_text(
            broker_values.get(SETTING_BBB_URL),
            static_values.get(SETTING_BBB_URL),
            self.config.default_endpoint if not tenant_id else None,
        )
        secret = _first_text(
            broker_values.get(SETTING_BBB_SECRET),
            static_values.get(SETTING_BBB_SECRET),
            self.config.default_secret if not tenant_id else None,
        )

        if api_url and secret:
            return ResolvedCredentials(
                api_url=api_url, secret=secret, settings=settings
            ).to_cache()

        if not tenant_id:
            raise CredentialsNotFound("BigBlueButton credentials not found", tenant_id)
        if self.lookup is None:
            raise CredentialsNotFound("Multitenant API not defined", tenant_id)

        logger.debug(
            "Missing credentials for tenant %r, attempt to fetch from multitenant API...",
            tenant_id,
        )
        user = await self.lookup.get_user(tenant_id)
        lookup_url = _first_text(user.get("apiURL"))
        lookup_secret = _first_text(user.get("secret"))
        if not (lookup_url and lookup_secret):
            raise CredentialsNotFound(
                "Multitenant API returned incomplete credentials", tenant_id
            )
        return ResolvedCredentials(
            api_url=lookup_url, secret=lookup_secret, settings=settings
        ).to_cache()
