"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Environment variable names follow the rooms/LTI
deployment conventions (BIGBLUEBUTTON_*, OMNIAUTH_BBBLTIBROKER_*,
TENANT_CREDENTIALS). Values are validated at load time.
"""

import hashlib
from functools import lru_cache

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_digest_name(name: str) -> str:
    """Return the hashlib name for a digest ("SHA-256" -> "sha256")."""
    return name.strip().lower().replace("-", "")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Single-tenant installs set BIGBLUEBUTTON_ENDPOINT/BIGBLUEBUTTON_SECRET.
    Multi-tenant installs rely on the broker, TENANT_CREDENTIALS, and/or
    the multitenant lookup service (MULTITENANT_API_ENDPOINT/SECRET).
    """

    # App
    app_name: str = "bbb-tenancy"
    app_version: str = "1.0.0"
    debug: bool = False

    # Default (single-tenant) BigBlueButton credentials
    bigbluebutton_endpoint: str = ""
    bigbluebutton_secret: SecretStr = SecretStr("")

    # Multitenant lookup service (legacy getUser API). Both required to enable it.
    multitenant_api_endpoint: str | None = None
    multitenant_api_secret: SecretStr | None = None
    checksum_algorithm: str = "sha256"

    # Static per-tenant credentials: JSON object
    # {"tenant": {"bigbluebutton_url": "...", "bigbluebutton_secret": "..."}}
    tenant_credentials: dict[str, dict[str, str]] = {}

    # Broker (OAuth-protected tenant settings API)
    omniauth_bbbltibroker_site: str = ""
    omniauth_bbbltibroker_root: str = "lti"
    omniauth_bbbltibroker_key: str = ""
    omniauth_bbbltibroker_secret: SecretStr = SecretStr("")

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Credential cache
    cache_enabled: bool = True
    cache_expires_in_minutes: int = 10

    # Redis Cache
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("checksum_algorithm")
    @classmethod
    def validate_checksum_algorithm(cls, value: str) -> str:
        """Reject digest names hashlib cannot compute."""
        name = normalize_digest_name(value)
        if name not in hashlib.algorithms_available:
            raise ValueError(
                f"CHECKSUM_ALGORITHM {value!r} is not supported. "
                "Use one of: sha1, sha256, sha384, sha512."
            )
        return name

    @model_validator(mode="after")
    def validate_cache_and_broker(self) -> "Settings":
        """Validate cache TTL and broker settings.

        - CACHE_EXPIRES_IN_MINUTES must be positive.
        - Broker site and root are stripped of surrounding "/" so that
          broker_base_url joins them with exactly one separator.
        """
        if self.cache_expires_in_minutes <= 0:
            raise ValueError(
                "CACHE_EXPIRES_IN_MINUTES must be a positive number of minutes."
            )
        self.omniauth_bbbltibroker_site = self.omniauth_bbbltibroker_site.rstrip("/")
        self.omniauth_bbbltibroker_root = self.omniauth_bbbltibroker_root.strip("/")
        return self

    @property
    def cache_ttl_seconds(self) -> int:
        """Credential cache TTL in seconds."""
        return self.cache_expires_in_minutes * 60

    @property
    def broker_base_url(self) -> str:
        """Broker base URL ({site}/{root}) or "" when the site is not set."""
        if not self.omniauth_bbbltibroker_site:
            return ""
        return f"{self.omniauth_bbbltibroker_site}/{self.omniauth_bbbltibroker_root}"

    @property
    def broker_enabled(self) -> bool:
        """True when site, client key and client secret are all set."""
        return bool(
            self.omniauth_bbbltibroker_site
            and self.omniauth_bbbltibroker_key
            and self.omniauth_bbbltibroker_secret.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
