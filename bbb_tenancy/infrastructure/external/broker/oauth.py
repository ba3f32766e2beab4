"""Broker OAuth: client-credentials token acquisition for server-to-server calls."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import httpx

from bbb_tenancy.core.constants import BROKER_TOKEN_PATH, BROKER_TOKEN_SCOPE
from bbb_tenancy.domain.exceptions import BrokerAuthenticationError
from bbb_tenancy.shared.telemetry.logging import get_logger
from bbb_tenancy.shared.utils.datetime import utc_now

logger = get_logger(__name__)

# Refresh this long before the broker-reported expiry.
_EXPIRY_MARGIN = timedelta(seconds=30)


@dataclass
class OAuthTokens:
    """Normalized OAuth token response."""

    access_token: str
    token_type: str
    expires_in: int
    expires_at: datetime
    scope: str

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at - _EXPIRY_MARGIN


class BrokerTokenProvider:
    """Obtains and caches a broker access token (client_credentials grant)."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        client_id: str,
        client_secret: str,
        scope: str = BROKER_TOKEN_SCOPE,
    ) -> None:
        self.http_client = http_client
        self.base_url = base_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self._tokens: OAuthTokens | None = None
        self._lock = asyncio.Lock()

    @property
    def token_endpoint(self) -> str:
        return f"{self.base_url}{BROKER_TOKEN_PATH}"

    async def get_token(self) -> str:
        """Return a valid access token, requesting a new one when expired.

        Raises:
            BrokerAuthenticationError: Token endpoint rejected the client or
                returned no access_token.
            httpx.HTTPError: Transport failure reaching the token endpoint.
        """
        async with self._lock:
            if self._tokens is None or self._tokens.is_expired():
                self._tokens = await self._request_tokens()
            return self._tokens.access_token

    async def _request_tokens(self) -> OAuthTokens:
        response = await self.http_client.post(
            self.token_endpoint,
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": self.scope,
            },
        )
        if response.status_code != 200:
            logger.error(
                "Broker token request failed: status=%d", response.status_code
            )
            raise BrokerAuthenticationError(
                f"Token request failed with status {response.status_code}"
            )
        try:
            token_data: dict[str, Any] = response.json()
        except ValueError as e:
            raise BrokerAuthenticationError("Token response is not valid JSON") from e
        return self._normalize_token_response(token_data)

    def _normalize_token_response(self, token_data: dict[str, Any]) -> OAuthTokens:
        """Normalize broker response to OAuthTokens."""
        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            raise BrokerAuthenticationError("Token response has no access_token")
        raw_expires_in = token_data.get("expires_in", 3600)
        if isinstance(raw_expires_in, bool):
            raise BrokerAuthenticationError("Token response has invalid expires_in")
        try:
            expires_in = int(raw_expires_in)
        except (TypeError, ValueError) as e:
            raise BrokerAuthenticationError("Token response has invalid expires_in") from e
        return OAuthTokens(
            access_token=access_token,
            token_type=token_data.get("token_type", "Bearer"),
            expires_in=expires_in,
            expires_at=utc_now() + timedelta(seconds=expires_in),
            scope=token_data.get("scope", self.scope),
        )
