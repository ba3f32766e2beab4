"""API layer: FastAPI dependencies exposing the credential resolver."""

from bbb_tenancy.api.deps import get_credential_resolver

__all__ = ["get_credential_resolver"]
