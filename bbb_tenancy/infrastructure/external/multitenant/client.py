"""HTTP client for the multitenant lookup service (legacy getUser API)."""

from __future__ import annotations

from typing import Any

import httpx

from bbb_tenancy.core.constants import LOOKUP_GET_USER_ACTION
from bbb_tenancy.domain.exceptions import TransportError
from bbb_tenancy.infrastructure.external.multitenant.checksum import encode_params, sign
from bbb_tenancy.infrastructure.external.multitenant.response_parser import parse_response
from bbb_tenancy.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class MultitenantLookupClient:
    """Looks up a tenant's BigBlueButton apiURL/secret via a signed getUser call.

    Stateless apart from its configuration; a single attempt per call.
    Failures propagate (TransportError, TenantNotFound, LookupFailed).
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint: str,
        secret: str,
        checksum_algorithm: str = "sha256",
    ) -> None:
        self.http_client = http_client
        self.endpoint = endpoint
        self.secret = secret
        self.checksum_algorithm = checksum_algorithm

    def build_url(self, action: str, params: dict[str, str]) -> str:
        """Return {endpoint}api/{action}?{params}&checksum={hex}."""
        query = encode_params(params)
        checksum = sign(action, params, self.secret, self.checksum_algorithm)
        return f"{self.endpoint}api/{action}?{query}&checksum={checksum}"

    async def get_user(self, tenant_id: str) -> dict[str, Any]:
        """Return the user record (apiURL, secret, ...) for tenant_id."""
        url = self.build_url(LOOKUP_GET_USER_ACTION, {"name": tenant_id})
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as e:
            logger.error(
                "Multitenant lookup request failed for tenant %r: %s", tenant_id, e
            )
            raise TransportError(None, f"Multitenant lookup request failed: {e}") from e
        return parse_response(response, tenant_id)
