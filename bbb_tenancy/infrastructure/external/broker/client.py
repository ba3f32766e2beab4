"""Broker client: best-effort fetch of tenant settings.

The broker owns the authoritative tenant -> settings mapping. It is
optional for credential resolution: any failure yields None and the
resolver moves on to the static table and the multitenant lookup.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from bbb_tenancy.core.constants import BROKER_TENANTS_PATH
from bbb_tenancy.infrastructure.external.broker.oauth import BrokerTokenProvider
from bbb_tenancy.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class BrokerClient:
    """Fetches tenant info ({"settings": {...}}) from the broker.

    A client built without a token provider (broker not configured)
    returns None for every tenant without making a request.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        token_provider: BrokerTokenProvider | None,
    ) -> None:
        self.http_client = http_client
        self.base_url = base_url
        self.token_provider = token_provider

    def is_configured(self) -> bool:
        return bool(self.base_url) and self.token_provider is not None

    def tenant_url(self, tenant_id: str) -> str:
        return f"{self.base_url}{BROKER_TENANTS_PATH}{quote(tenant_id, safe='')}"

    async def fetch_tenant_settings(self, tenant_id: str) -> dict[str, Any] | None:
        """Return the broker's tenant info, or None on any failure.

        Any failure (auth, transport, non-2xx, malformed JSON, bad URL) is
        logged at ERROR and never raised.
        """
        if not self.is_configured() or self.token_provider is None:
            logger.debug("Broker not configured; skipping tenant %r", tenant_id)
            return None
        try:
            token = await self.token_provider.get_token()
            response = await self.http_client.get(
                self.tenant_url(tenant_id),
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
            tenant_info = response.json()
        except Exception as e:
            logger.error(
                "Could not fetch tenant credentials from broker. Error message: %s", e
            )
            return None
        if not isinstance(tenant_info, dict):
            logger.error(
                "Could not fetch tenant credentials from broker. "
                "Error message: unexpected response type %s",
                type(tenant_info).__name__,
            )
            return None
        return tenant_info
