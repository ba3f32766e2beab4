"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (HTTP client,
Redis cache, broker and lookup clients) into the CredentialResolver.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from bbb_tenancy.application.services.credential_resolver import (
    CredentialResolver,
    CredentialResolverConfig,
)
from bbb_tenancy.core.config import Settings, get_settings
from bbb_tenancy.infrastructure.cache.redis_cache import CacheService
from bbb_tenancy.infrastructure.external.broker.client import BrokerClient
from bbb_tenancy.infrastructure.external.broker.oauth import BrokerTokenProvider
from bbb_tenancy.infrastructure.external.multitenant.client import MultitenantLookupClient
from bbb_tenancy.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


def build_credential_resolver(
    settings: Settings,
    http_client: httpx.AsyncClient,
    cache: CacheService,
) -> CredentialResolver:
    """Wire broker, lookup and cache into a CredentialResolver from settings."""
    token_provider = None
    if settings.broker_enabled:
        token_provider = BrokerTokenProvider(
            http_client,
            settings.broker_base_url,
            settings.omniauth_bbbltibroker_key,
            settings.omniauth_bbbltibroker_secret.get_secret_value(),
        )
    else:
        logger.info("Broker not configured; tenant settings come from TENANT_CREDENTIALS")
    broker = BrokerClient(http_client, settings.broker_base_url, token_provider)

    lookup = None
    lookup_secret = (
        settings.multitenant_api_secret.get_secret_value()
        if settings.multitenant_api_secret
        else ""
    )
    if settings.multitenant_api_endpoint and lookup_secret:
        lookup = MultitenantLookupClient(
            http_client,
            settings.multitenant_api_endpoint,
            lookup_secret,
            settings.checksum_algorithm,
        )

    return CredentialResolver(
        CredentialResolverConfig.from_settings(settings),
        cache,
        broker,
        lookup,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, shared HTTP client, Redis cache (if enabled),
    credential resolver. Shutdown order: HTTP client close, cache disconnect.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    # Shared HTTP client for broker and multitenant lookup calls (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    cache = CacheService(settings=settings)
    if settings.redis_enabled and settings.cache_enabled:
        await cache.connect()
    else:
        logger.info("Credential cache disabled")
    app.state.cache = cache

    app.state.credential_resolver = build_credential_resolver(
        settings, app.state.http_client, cache
    )

    yield

    # ---- Shutdown ----
    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("HTTP client closed")

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")
