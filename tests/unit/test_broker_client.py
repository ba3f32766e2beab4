"""Tests for BrokerClient (best-effort, None on any failure) and BrokerTokenProvider."""

import json
import logging
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from bbb_tenancy.domain.exceptions import BrokerAuthenticationError
from bbb_tenancy.infrastructure.external.broker.client import BrokerClient
from bbb_tenancy.infrastructure.external.broker.oauth import BrokerTokenProvider
from tests.conftest import mock_http_client

BASE_URL = "https://broker.example/lti"
TENANT_INFO = {
    "settings": {
        "bigbluebutton_url": "https://bbb.example/",
        "bigbluebutton_secret": "s3cr3t",
        "forward_params_join": {"userdata-bbb_skip_check_audio": "true"},
    }
}


def _broker_handler(
    tenant_status: int = 200,
    tenant_body: bytes | None = None,
    token_status: int = 200,
    seen: list[httpx.Request] | None = None,
):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path == "/lti/oauth/token":
            return httpx.Response(
                token_status,
                json={"access_token": "tok-1", "token_type": "Bearer", "expires_in": 7200},
            )
        body = tenant_body if tenant_body is not None else json.dumps(TENANT_INFO).encode()
        return httpx.Response(tenant_status, content=body)

    return handler


def _client(http_client: httpx.AsyncClient) -> BrokerClient:
    tokens = BrokerTokenProvider(http_client, BASE_URL, "client-id", "client-secret")
    return BrokerClient(http_client, BASE_URL, tokens)


async def test_fetch_tenant_settings_success() -> None:
    seen: list[httpx.Request] = []
    async with mock_http_client(_broker_handler(seen=seen)) as http_client:
        result = await _client(http_client).fetch_tenant_settings("tenant1")

    assert result == TENANT_INFO
    token_request, tenant_request = seen
    assert token_request.method == "POST"
    assert b"grant_type=client_credentials" in token_request.content
    assert b"scope=api" in token_request.content
    assert tenant_request.method == "GET"
    assert str(tenant_request.url) == "https://broker.example/lti/api/v1/tenants/tenant1"
    assert tenant_request.headers["Authorization"] == "Bearer tok-1"


async def test_token_is_reused_until_expiry() -> None:
    seen: list[httpx.Request] = []
    async with mock_http_client(_broker_handler(seen=seen)) as http_client:
        client = _client(http_client)
        await client.fetch_tenant_settings("tenant1")
        await client.fetch_tenant_settings("tenant2")

    token_requests = [r for r in seen if r.url.path.endswith("/oauth/token")]
    assert len(token_requests) == 1


@pytest.mark.parametrize(
    "handler_kwargs",
    [
        {"tenant_status": 404},
        {"tenant_status": 500},
        {"tenant_body": b"not json"},
        {"tenant_body": b"[1, 2]"},
        {"token_status": 401},
    ],
)
async def test_failures_return_none_and_log(
    handler_kwargs: dict, caplog: pytest.LogCaptureFixture
) -> None:
    async with mock_http_client(_broker_handler(**handler_kwargs)) as http_client:
        with caplog.at_level(logging.ERROR):
            result = await _client(http_client).fetch_tenant_settings("tenant1")

    assert result is None
    assert "Could not fetch tenant credentials from broker" in caplog.text


async def test_network_error_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_http_client(handler) as http_client:
        assert await _client(http_client).fetch_tenant_settings("tenant1") is None


async def test_unconfigured_broker_makes_no_request() -> None:
    seen: list[httpx.Request] = []
    async with mock_http_client(_broker_handler(seen=seen)) as http_client:
        client = BrokerClient(http_client, "", None)
        assert client.is_configured() is False
        assert await client.fetch_tenant_settings("tenant1") is None
    assert seen == []


async def test_tenant_id_is_path_escaped() -> None:
    async with mock_http_client(_broker_handler()) as http_client:
        client = _client(http_client)
        assert client.tenant_url("a/b c") == f"{BASE_URL}/api/v1/tenants/a%2Fb%20c"


async def test_token_provider_rejects_missing_access_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"token_type": "Bearer"})

    async with mock_http_client(handler) as http_client:
        provider = BrokerTokenProvider(http_client, BASE_URL, "id", "secret")
        with pytest.raises(BrokerAuthenticationError):
            await provider.get_token()


def _token_only_handler(token_body: dict):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/lti/oauth/token":
            return httpx.Response(200, json=token_body)
        return httpx.Response(200, json=TENANT_INFO)

    return handler


@pytest.mark.parametrize("expires_in", [None, "soon", True, [3600]])
async def test_token_provider_rejects_invalid_expires_in(expires_in) -> None:
    handler = _token_only_handler({"access_token": "t", "expires_in": expires_in})
    async with mock_http_client(handler) as http_client:
        provider = BrokerTokenProvider(http_client, BASE_URL, "id", "secret")
        with pytest.raises(BrokerAuthenticationError, match="expires_in"):
            await provider.get_token()


async def test_token_provider_accepts_numeric_string_expires_in() -> None:
    handler = _token_only_handler({"access_token": "t", "expires_in": "120"})
    async with mock_http_client(handler) as http_client:
        provider = BrokerTokenProvider(http_client, BASE_URL, "id", "secret")
        assert await provider.get_token() == "t"


async def test_null_expires_in_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    handler = _token_only_handler({"access_token": "t", "expires_in": None})
    async with mock_http_client(handler) as http_client:
        with caplog.at_level(logging.ERROR):
            result = await _client(http_client).fetch_tenant_settings("t1")

    assert result is None
    assert "Could not fetch tenant credentials from broker" in caplog.text


async def test_unexpected_exception_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    tokens = MagicMock(spec=BrokerTokenProvider)
    tokens.get_token = AsyncMock(side_effect=RuntimeError("unexpected"))
    async with mock_http_client(_broker_handler()) as http_client:
        client = BrokerClient(http_client, BASE_URL, tokens)
        with caplog.at_level(logging.ERROR):
            assert await client.fetch_tenant_settings("t1") is None
    assert "unexpected" in caplog.text
