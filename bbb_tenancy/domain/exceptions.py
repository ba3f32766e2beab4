"""Domain exceptions for tenant credential resolution.

Presentation layer maps them to HTTP responses in exception handlers
(see bbb_tenancy.core.exception_handlers).
"""

from typing import Any


class BBBTenancyException(Exception):
    """Base exception for all credential resolution errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. tenant_id, status_code).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class TenantNotFound(BBBTenancyException):
    """Raised when neither the broker nor the static table (nor the lookup) knows the tenant."""

    def __init__(self, tenant_id: str) -> None:
        """Initialize with the unknown tenant identifier.

        Args:
            tenant_id: The tenant that was not found.
        """
        super().__init__(
            f"Tenant does not exist: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class CredentialsNotFound(BBBTenancyException):
    """Raised when api_url/secret cannot be assembled from any source."""

    def __init__(self, message: str, tenant_id: str) -> None:
        super().__init__(
            message,
            "CREDENTIALS_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class TransportError(BBBTenancyException):
    """Raised when the multitenant lookup call did not return a success status."""

    def __init__(self, status_code: int | None, message: str | None = None) -> None:
        """Initialize with the HTTP status (None for network failures).

        Args:
            status_code: HTTP status of the lookup response, if any.
            message: Server-provided message or transport error text.
        """
        super().__init__(
            message or f"Multitenant lookup failed with status {status_code}",
            "LOOKUP_TRANSPORT_ERROR",
            {"status_code": status_code},
        )
        self.status_code = status_code


class LookupFailed(BBBTenancyException):
    """Raised when the multitenant lookup answered with a non-SUCCESS returncode."""

    def __init__(self, message_key: str | None, message: str | None = None) -> None:
        super().__init__(
            message or f"Multitenant lookup failed with {message_key}",
            "LOOKUP_FAILED",
            {"message_key": message_key},
        )
        self.message_key = message_key


class BrokerAuthenticationError(BBBTenancyException):
    """Raised when a broker access token cannot be obtained."""

    def __init__(self, message: str = "Broker authentication failed") -> None:
        super().__init__(message, "BROKER_AUTHENTICATION_ERROR")
